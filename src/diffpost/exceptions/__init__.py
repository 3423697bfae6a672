"""diffpost exception hierarchy.

All exceptions can be imported from this package:
    from diffpost.exceptions import DiffPostError, StructureError
"""

from __future__ import annotations

from diffpost.exceptions.base import DiffPostError
from diffpost.exceptions.config import ConfigError, CredentialMissingError
from diffpost.exceptions.github import (
    DeliveryError,
    DeliveryExhaustedError,
    DeliveryRejectedError,
    ReferenceFormatError,
)
from diffpost.exceptions.input import InputError
from diffpost.exceptions.splitter import (
    BudgetTooSmallError,
    SplitError,
    StructureError,
)

__all__ = [
    # Base
    "DiffPostError",
    # Config
    "ConfigError",
    "CredentialMissingError",
    # GitHub
    "DeliveryError",
    "DeliveryExhaustedError",
    "DeliveryRejectedError",
    "ReferenceFormatError",
    # Input
    "InputError",
    # Splitting
    "BudgetTooSmallError",
    "SplitError",
    "StructureError",
]
