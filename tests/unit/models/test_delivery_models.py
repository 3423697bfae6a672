"""Tests for delivery models."""

from __future__ import annotations

from datetime import UTC, datetime

from diffpost.models.delivery import (
    DeliveryFailure,
    FailureKind,
    PostOutcome,
    PostSummary,
    RateLimitInfo,
    retry_after_seconds,
)


class TestRateLimitInfo:
    def test_from_headers(self) -> None:
        info = RateLimitInfo.from_headers(
            {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1704110400"}
        )

        assert info.remaining == 0
        assert info.reset_at == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert info.exhausted

    def test_missing_headers(self) -> None:
        info = RateLimitInfo.from_headers(None)

        assert info.remaining is None
        assert info.reset_at is None
        assert not info.exhausted

    def test_malformed_headers(self) -> None:
        info = RateLimitInfo.from_headers(
            {"X-RateLimit-Remaining": "lots", "X-RateLimit-Reset": "soon"}
        )

        assert info == RateLimitInfo()


def test_retry_after_seconds() -> None:
    assert retry_after_seconds({"retry-after": "12"}) == 12.0
    assert retry_after_seconds({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}) is None
    assert retry_after_seconds({}) is None


def test_post_outcome() -> None:
    failure = DeliveryFailure(kind=FailureKind.TRANSIENT, message="boom")

    assert PostOutcome.success(RateLimitInfo()).ok
    failed = PostOutcome.failed(failure)
    assert not failed.ok
    assert failed.rate_limit == RateLimitInfo()
    assert str(failure) == "boom"


def test_post_summary_posted() -> None:
    assert PostSummary().posted == 0
