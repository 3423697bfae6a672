"""GitHub transport for creating issue comments via PyGithub.

This module performs exactly one HTTP exchange per call and never retries:
retry policy belongs to the DeliveryClient. PyGithub's built-in retry and
write throttling are switched off so the two do not compound.

Failures are returned as classified ``DeliveryFailure`` values instead of
being raised, so callers branch on ``FailureKind`` rather than on
exception types.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException

from diffpost.constants import DEFAULT_GITHUB_API_URL, DEFAULT_REQUEST_TIMEOUT
from diffpost.models.delivery import (
    DeliveryFailure,
    FailureKind,
    PostOutcome,
    RateLimitInfo,
    retry_after_seconds,
)
from diffpost.models.github import PullRequestRef

__all__ = [
    "CommentTransport",
    "GitHubCommentTransport",
    "classify_response",
    "create_github_client",
]

_RATE_LIMIT_STATUSES = frozenset({403, 429})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CommentTransport(Protocol):
    """Anything that can create a comment on a pull request thread."""

    async def create_comment(
        self, destination: PullRequestRef, body: str
    ) -> PostOutcome: ...


def create_github_client(
    token: str,
    *,
    base_url: str = DEFAULT_GITHUB_API_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> Github:
    """Create a PyGithub client authenticated with a token.

    Args:
        token: GitHub personal access token or Actions token.
        base_url: REST API root (GitHub Enterprise uses ``https://host/api/v3``).
        timeout: Per-request timeout in seconds.

    Returns:
        PyGithub Github instance with its own retry and throttling disabled.
    """
    return Github(
        auth=Auth.Token(token),
        base_url=base_url,
        timeout=timeout,
        retry=None,
        seconds_between_requests=None,
        seconds_between_writes=None,
    )


def classify_response(
    status: int,
    headers: Mapping[str, str] | None,
    data: Any,
    now: datetime,
) -> DeliveryFailure:
    """Classify a non-2xx response.

    Args:
        status: HTTP status code.
        headers: Response headers (any case).
        data: Decoded response body, used for the message.
        now: Current time, used to resolve ``Retry-After``.

    Returns:
        RATE_LIMITED for 403/429 with an exhausted quota or a Retry-After
        header, FATAL for 401, TRANSIENT for everything else.
    """
    detail = data.get("message", data) if isinstance(data, dict) else data
    message = f"GitHub API error (status {status}): {detail}"

    if status in _RATE_LIMIT_STATUSES:
        rate_limit = RateLimitInfo.from_headers(headers)
        if rate_limit.exhausted:
            return DeliveryFailure(
                kind=FailureKind.RATE_LIMITED,
                message=message,
                status=status,
                reset_at=rate_limit.reset_at,
            )
        retry_after = retry_after_seconds(headers)
        if retry_after is not None:
            return DeliveryFailure(
                kind=FailureKind.RATE_LIMITED,
                message=message,
                status=status,
                reset_at=now + timedelta(seconds=retry_after),
            )

    if status == 401:
        return DeliveryFailure(kind=FailureKind.FATAL, message=message, status=status)

    return DeliveryFailure(kind=FailureKind.TRANSIENT, message=message, status=status)


class GitHubCommentTransport:
    """Create pull request comments through the GitHub REST API.

    Blocking PyGithub calls run in a worker thread via ``asyncio.to_thread``.

    Attributes:
        github: The underlying PyGithub client instance.

    Example:
        ```python
        transport = GitHubCommentTransport(create_github_client(token))
        outcome = await transport.create_comment(ref, "## Diff")
        if not outcome.ok:
            print(outcome.failure.kind)
        ```
    """

    def __init__(
        self,
        github: Github,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._github = github
        self._clock = clock

    @property
    def github(self) -> Github:
        return self._github

    async def create_comment(
        self, destination: PullRequestRef, body: str
    ) -> PostOutcome:
        """Post ``body`` as a new comment on the pull request thread.

        Args:
            destination: Pull request to comment on.
            body: Comment body (markdown).

        Returns:
            PostOutcome describing success or the classified failure.
        """
        return await asyncio.to_thread(self._create_comment, destination, body)

    def _create_comment(self, destination: PullRequestRef, body: str) -> PostOutcome:
        url = (
            f"/repos/{quote(destination.owner)}/{quote(destination.repo)}"
            f"/issues/{destination.number}/comments"
        )
        try:
            headers, data = self._github.requester.requestJsonAndCheck(
                "POST", url, input={"body": body}
            )
        except GithubException as e:
            return PostOutcome.failed(
                classify_response(e.status, e.headers, e.data, self._clock()),
                RateLimitInfo.from_headers(e.headers),
            )
        except requests.exceptions.RequestException as e:
            return PostOutcome.failed(
                DeliveryFailure(
                    kind=FailureKind.TRANSIENT,
                    message=f"failed to execute request: {e}",
                )
            )

        comment_url = data.get("html_url") if isinstance(data, dict) else None
        return PostOutcome.success(RateLimitInfo.from_headers(headers), comment_url)

    def close(self) -> None:
        """Close the underlying GitHub client connection."""
        self._github.close()
