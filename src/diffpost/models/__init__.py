"""Data models for diffpost."""

from __future__ import annotations

from diffpost.models.delivery import (
    DeliveryFailure,
    DeliveryPolicy,
    DeliveryResult,
    DeliveryState,
    FailureKind,
    PostOutcome,
    PostSummary,
    RateLimitInfo,
)
from diffpost.models.fragment import Chunk, Fragment, byte_length
from diffpost.models.github import PullRequestRef

__all__ = [
    "Chunk",
    "DeliveryFailure",
    "DeliveryPolicy",
    "DeliveryResult",
    "DeliveryState",
    "FailureKind",
    "Fragment",
    "PostOutcome",
    "PostSummary",
    "PullRequestRef",
    "RateLimitInfo",
    "byte_length",
]
