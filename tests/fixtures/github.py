"""Fake GitHub transport for delivery tests.

Provides:
- FakeTransport: CommentTransport returning queued outcomes and recording calls
- RecordingSleep: Async sleep replacement that records requested delays
- helpers to build rate-limited, transient and fatal outcomes
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from diffpost.models.delivery import (
    DeliveryFailure,
    FailureKind,
    PostOutcome,
    RateLimitInfo,
)
from diffpost.models.github import PullRequestRef

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


def ok_outcome(remaining: int = 4999, url: str | None = None) -> PostOutcome:
    return PostOutcome.success(
        RateLimitInfo(remaining=remaining, reset_at=FIXED_NOW), comment_url=url
    )


def transient_outcome(status: int | None = 502) -> PostOutcome:
    return PostOutcome.failed(
        DeliveryFailure(
            kind=FailureKind.TRANSIENT,
            message=f"GitHub API error (status {status}): Bad Gateway",
            status=status,
        )
    )


def rate_limited_outcome(reset_at: datetime) -> PostOutcome:
    return PostOutcome.failed(
        DeliveryFailure(
            kind=FailureKind.RATE_LIMITED,
            message="GitHub API error (status 403): API rate limit exceeded",
            status=403,
            reset_at=reset_at,
        ),
        RateLimitInfo(remaining=0, reset_at=reset_at),
    )


def fatal_outcome() -> PostOutcome:
    return PostOutcome.failed(
        DeliveryFailure(
            kind=FailureKind.FATAL,
            message="GitHub API error (status 401): Bad credentials",
            status=401,
        )
    )


class FakeTransport:
    """CommentTransport that replays queued outcomes.

    When the queue is empty every call succeeds.

    Example:
        >>> transport = FakeTransport([transient_outcome(), ok_outcome()])
    """

    def __init__(self, outcomes: list[PostOutcome] | None = None) -> None:
        self.outcomes: deque[PostOutcome] = deque(outcomes or [])
        self.calls: list[tuple[PullRequestRef, str]] = []
        self.closed = False

    async def create_comment(
        self, destination: PullRequestRef, body: str
    ) -> PostOutcome:
        self.calls.append((destination, body))
        if self.outcomes:
            return self.outcomes.popleft()
        return ok_outcome()

    def close(self) -> None:
        self.closed = True

    @property
    def bodies(self) -> list[str]:
        return [body for _, body in self.calls]


@dataclass
class RecordingSleep:
    """Async sleep that returns immediately and records each delay."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def pr_ref() -> PullRequestRef:
    return PullRequestRef(owner="octo", repo="widgets", number=42)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
