"""GitHub integration: reference parsing, transport and delivery."""

from __future__ import annotations

from diffpost.github.delivery import DeliveryClient
from diffpost.github.reference import parse_pr_reference
from diffpost.github.transport import (
    CommentTransport,
    GitHubCommentTransport,
    classify_response,
    create_github_client,
)

__all__ = [
    "CommentTransport",
    "DeliveryClient",
    "GitHubCommentTransport",
    "classify_response",
    "create_github_client",
    "parse_pr_reference",
]
