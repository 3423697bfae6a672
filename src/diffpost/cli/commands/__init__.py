"""CLI commands for diffpost."""

from __future__ import annotations

from diffpost.cli.commands.add import add
from diffpost.cli.commands.version import version

__all__ = ["add", "version"]
