"""Tests for the GitHub comment transport."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests
from github import GithubException

from diffpost.github.transport import (
    GitHubCommentTransport,
    classify_response,
    create_github_client,
)
from diffpost.models.delivery import FailureKind
from diffpost.models.github import PullRequestRef
from tests.fixtures.github import FIXED_NOW

RESET_EPOCH = int((FIXED_NOW + timedelta(seconds=10)).timestamp())


class TestClassifyResponse:
    def test_rate_limit_exhausted(self):
        headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(RESET_EPOCH)}

        failure = classify_response(403, headers, {"message": "rate limit"}, FIXED_NOW)

        assert failure.kind is FailureKind.RATE_LIMITED
        assert failure.status == 403
        assert failure.reset_at == FIXED_NOW + timedelta(seconds=10)

    def test_rate_limit_headers_are_case_insensitive(self):
        headers = {"x-ratelimit-remaining": "0", "x-ratelimit-reset": str(RESET_EPOCH)}

        failure = classify_response(429, headers, None, FIXED_NOW)

        assert failure.kind is FailureKind.RATE_LIMITED

    def test_retry_after_is_rate_limited(self):
        failure = classify_response(
            403, {"Retry-After": "30"}, {"message": "secondary"}, FIXED_NOW
        )

        assert failure.kind is FailureKind.RATE_LIMITED
        assert failure.reset_at == FIXED_NOW + timedelta(seconds=30)

    def test_forbidden_with_quota_left_is_transient(self):
        headers = {"X-RateLimit-Remaining": "10", "X-RateLimit-Reset": str(RESET_EPOCH)}

        failure = classify_response(403, headers, {"message": "Forbidden"}, FIXED_NOW)

        assert failure.kind is FailureKind.TRANSIENT
        assert failure.message == "GitHub API error (status 403): Forbidden"

    def test_unauthorized_is_fatal(self):
        failure = classify_response(401, {}, {"message": "Bad credentials"}, FIXED_NOW)

        assert failure.kind is FailureKind.FATAL

    @pytest.mark.parametrize("status", [404, 422, 500, 502, 503])
    def test_other_statuses_are_transient(self, status: int):
        failure = classify_response(status, None, "oops", FIXED_NOW)

        assert failure.kind is FailureKind.TRANSIENT
        assert failure.message == f"GitHub API error (status {status}): oops"


class TestCreateGitHubClient:
    def test_disables_builtin_retry(self):
        with patch("diffpost.github.transport.Github") as mock_github:
            create_github_client("ghp_token", base_url="https://ghe/api/v3", timeout=5)

        kwargs = mock_github.call_args.kwargs
        assert kwargs["base_url"] == "https://ghe/api/v3"
        assert kwargs["timeout"] == 5
        assert kwargs["retry"] is None
        assert kwargs["seconds_between_writes"] is None


class TestGitHubCommentTransport:
    @pytest.fixture
    def mock_github(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def transport(self, mock_github: MagicMock) -> GitHubCommentTransport:
        return GitHubCommentTransport(mock_github, clock=lambda: FIXED_NOW)

    @pytest.fixture
    def ref(self) -> PullRequestRef:
        return PullRequestRef(owner="octo", repo="widgets", number=42)

    @pytest.mark.asyncio
    async def test_success(self, transport, mock_github, ref):
        mock_github.requester.requestJsonAndCheck.return_value = (
            {"X-RateLimit-Remaining": "4999", "X-RateLimit-Reset": str(RESET_EPOCH)},
            {"id": 1, "html_url": "https://github.com/octo/widgets/pull/42#c1"},
        )

        outcome = await transport.create_comment(ref, "## Diff")

        assert outcome.ok
        assert outcome.rate_limit.remaining == 4999
        assert outcome.rate_limit.reset_at == datetime.fromtimestamp(RESET_EPOCH, tz=UTC)
        assert outcome.comment_url == "https://github.com/octo/widgets/pull/42#c1"
        mock_github.requester.requestJsonAndCheck.assert_called_once_with(
            "POST",
            "/repos/octo/widgets/issues/42/comments",
            input={"body": "## Diff"},
        )

    @pytest.mark.asyncio
    async def test_rate_limited(self, transport, mock_github, ref):
        mock_github.requester.requestJsonAndCheck.side_effect = GithubException(
            403,
            {"message": "API rate limit exceeded"},
            {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(RESET_EPOCH)},
        )

        outcome = await transport.create_comment(ref, "body")

        assert not outcome.ok
        assert outcome.failure.kind is FailureKind.RATE_LIMITED
        assert outcome.rate_limit.remaining == 0

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self, transport, mock_github, ref):
        mock_github.requester.requestJsonAndCheck.side_effect = GithubException(
            502, {"message": "Bad Gateway"}, {}
        )

        outcome = await transport.create_comment(ref, "body")

        assert outcome.failure.kind is FailureKind.TRANSIENT
        assert outcome.failure.status == 502

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self, transport, mock_github, ref):
        mock_github.requester.requestJsonAndCheck.side_effect = (
            requests.exceptions.ConnectionError("connection refused")
        )

        outcome = await transport.create_comment(ref, "body")

        assert outcome.failure.kind is FailureKind.TRANSIENT
        assert outcome.failure.status is None
        assert "failed to execute request" in outcome.failure.message

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, transport, mock_github, ref):
        mock_github.requester.requestJsonAndCheck.side_effect = (
            requests.exceptions.Timeout("read timed out")
        )

        outcome = await transport.create_comment(ref, "body")

        assert outcome.failure.kind is FailureKind.TRANSIENT

    def test_close(self, transport, mock_github):
        transport.close()

        mock_github.close.assert_called_once()
