from __future__ import annotations

from diffpost.exceptions.base import DiffPostError


class SplitError(DiffPostError):
    """Base exception for reports that cannot be split into comments."""


class StructureError(SplitError):
    """The report lacks the section markers needed to split it.

    Raised when an oversized report contains no ``<details>`` block, so
    there is nothing to cut it along.
    """


class BudgetTooSmallError(SplitError):
    """The comment size limit leaves no room for section content.

    Attributes:
        message: Human-readable error message.
        effective_budget: Bytes left per part once header, footer and the
            part indicator are accounted for (may be negative).
    """

    def __init__(self, message: str, effective_budget: int) -> None:
        self.effective_budget = effective_budget
        super().__init__(message)
