"""diffpost - post rendered diff reports to pull requests as comments.

A report that does not fit into a single GitHub comment is split into
self-contained parts which are posted in order.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
