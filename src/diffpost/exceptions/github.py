from __future__ import annotations

from typing import TYPE_CHECKING

from diffpost.exceptions.base import DiffPostError

if TYPE_CHECKING:
    from diffpost.models.delivery import DeliveryFailure


class ReferenceFormatError(DiffPostError):
    """A pull request reference string could not be parsed.

    Attributes:
        message: Human-readable error message.
        reference: The rejected reference string.
    """

    def __init__(self, message: str, reference: str | None = None) -> None:
        self.reference = reference
        super().__init__(message)


class DeliveryError(DiffPostError):
    """Exception for comments that could not be posted.

    Attributes:
        message: Human-readable error message.
        failure: The last classified failure observed, if any.
        part_number: Part of the report being posted, once known.
    """

    def __init__(
        self,
        message: str,
        failure: DeliveryFailure | None = None,
    ) -> None:
        self.failure = failure
        self.part_number: int | None = None
        super().__init__(message)


class DeliveryExhaustedError(DeliveryError):
    """Every attempt allowed by the retry policy failed.

    Attributes:
        message: Human-readable error message.
        failure: The failure observed on the final attempt.
        attempts: Number of attempts made.
    """

    def __init__(
        self,
        message: str,
        failure: DeliveryFailure | None = None,
        attempts: int = 0,
    ) -> None:
        self.attempts = attempts
        super().__init__(message, failure=failure)


class DeliveryRejectedError(DeliveryError):
    """GitHub rejected the comment in a way retrying cannot fix."""
