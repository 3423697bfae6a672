"""Data models for comment delivery.

This module defines the values exchanged between the GitHub transport,
the DeliveryClient and the orchestrator:
- DeliveryPolicy: Validated retry/backoff/timeout settings
- RateLimitInfo: Quota metadata parsed from response headers
- FailureKind / DeliveryFailure: Classified outcome of a failed post
- PostOutcome: Result of a single HTTP exchange
- DeliveryState / DeliveryResult: Retry state machine trace
- PostSummary: Result of a whole run

Failures are data, not exception types: callers branch on
``DeliveryFailure.kind`` instead of catching transport exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from diffpost.models.fragment import Fragment

__all__ = [
    "DeliveryPolicy",
    "RateLimitInfo",
    "FailureKind",
    "DeliveryFailure",
    "PostOutcome",
    "DeliveryState",
    "DeliveryResult",
    "PostSummary",
]


# =============================================================================
# Policy
# =============================================================================


class DeliveryPolicy(BaseModel):
    """Retry settings for posting a single comment.

    Attributes:
        max_retries: Retries after the first attempt (total attempts is
            ``max_retries + 1``).
        initial_delay: Base delay in seconds used by the backoff formula.
        backoff_factor: Multiplier applied to every backoff delay.
        request_timeout: Per-request timeout in seconds, enforced by the
            HTTP transport.

    Examples:
        >>> policy = DeliveryPolicy(max_retries=3, initial_delay=2.0)
        >>> policy.backoff_delay(2)
        8.0
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0)
    initial_delay: float = Field(default=2.0, ge=0.0)
    backoff_factor: float = Field(default=2.0, ge=1.0)
    request_timeout: float = Field(default=30.0, gt=0.0)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_delay(self, attempt: int) -> float:
        """Delay in seconds before retry ``attempt`` (1-based).

        The delay grows linearly with the attempt number:
        ``initial_delay * attempt * backoff_factor``.
        """
        if attempt <= 0:
            return 0.0
        return self.initial_delay * attempt * self.backoff_factor


# =============================================================================
# Rate limits
# =============================================================================


def _header(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


@dataclass(frozen=True, slots=True)
class RateLimitInfo:
    """Quota metadata reported by GitHub on a response.

    Attributes:
        remaining: Requests left in the current window, if reported.
        reset_at: When the window resets (UTC), if reported.
    """

    remaining: int | None = None
    reset_at: datetime | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str] | None) -> RateLimitInfo:
        """Parse ``X-RateLimit-Remaining`` and ``X-RateLimit-Reset``.

        Missing or malformed headers yield ``None`` fields.
        """
        if not headers:
            return cls()

        remaining: int | None = None
        raw_remaining = _header(headers, "X-RateLimit-Remaining")
        if raw_remaining is not None:
            try:
                remaining = int(raw_remaining)
            except ValueError:
                remaining = None

        reset_at: datetime | None = None
        raw_reset = _header(headers, "X-RateLimit-Reset")
        if raw_reset is not None:
            try:
                reset_at = datetime.fromtimestamp(int(raw_reset), tz=UTC)
            except (ValueError, OverflowError, OSError):
                reset_at = None

        return cls(remaining=remaining, reset_at=reset_at)

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0


def retry_after_seconds(headers: Mapping[str, str] | None) -> float | None:
    """Parse a ``Retry-After`` header given in seconds."""
    if not headers:
        return None
    raw = _header(headers, "Retry-After")
    if raw is None:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


# =============================================================================
# Failures and outcomes
# =============================================================================


class FailureKind(str, Enum):
    """Classification of a failed post.

    Attributes:
        TRANSIENT: Network error or non-2xx response; retried.
        RATE_LIMITED: Quota exhausted; wait for the reset, then retry.
        FATAL: Retrying cannot help (e.g. bad credentials); not retried.
    """

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class DeliveryFailure:
    """A classified failure of one HTTP exchange.

    Attributes:
        kind: How the DeliveryClient should react.
        message: Human-readable description.
        status: HTTP status, or None for network-level failures.
        reset_at: When a rate-limited request may be retried (RATE_LIMITED
            only; None if the response did not say).
    """

    kind: FailureKind
    message: str
    status: int | None = None
    reset_at: datetime | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class PostOutcome:
    """Result of a single attempt to create a comment.

    Exactly one of ``failure`` being None (success) or set (failure)
    describes the outcome; ``rate_limit`` is filled whenever the response
    carried quota headers.
    """

    rate_limit: RateLimitInfo = field(default_factory=RateLimitInfo)
    failure: DeliveryFailure | None = None
    comment_url: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(
        cls, rate_limit: RateLimitInfo, comment_url: str | None = None
    ) -> PostOutcome:
        return cls(rate_limit=rate_limit, comment_url=comment_url)

    @classmethod
    def failed(
        cls, failure: DeliveryFailure, rate_limit: RateLimitInfo | None = None
    ) -> PostOutcome:
        return cls(rate_limit=rate_limit or RateLimitInfo(), failure=failure)


# =============================================================================
# Delivery state machine
# =============================================================================


class DeliveryState(str, Enum):
    """States of the DeliveryClient retry loop.

    Transitions:
        ATTEMPTING -> SUCCEEDED            2xx response
        ATTEMPTING -> BACKING_OFF          transient failure, attempts left
        ATTEMPTING -> RATE_LIMIT_WAITING   rate limited, attempts left
        BACKING_OFF -> ATTEMPTING          after the backoff delay
        RATE_LIMIT_WAITING -> ATTEMPTING   after the quota reset (+1s)
        ATTEMPTING -> EXHAUSTED            failure with no attempts left
    """

    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    RATE_LIMIT_WAITING = "rate_limit_waiting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass(slots=True)
class DeliveryResult:
    """Trace of one successful delivery.

    Attributes:
        attempts: HTTP attempts made (0 in dry-run mode).
        transitions: States visited, in order.
        rate_limit: Quota metadata from the successful response.
        comment_url: URL of the created comment, when GitHub returned one.
        dry_run: True if nothing was sent.
    """

    attempts: int = 0
    transitions: list[DeliveryState] = field(default_factory=list)
    rate_limit: RateLimitInfo | None = None
    comment_url: str | None = None
    dry_run: bool = False


@dataclass(slots=True)
class PostSummary:
    """Result of posting a whole report."""

    fragments: list[Fragment] = field(default_factory=list)
    results: list[DeliveryResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def posted(self) -> int:
        return len(self.results)
