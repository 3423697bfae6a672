"""Deliver one comment to a pull request with retries and rate-limit waits.

The retry loop is a small state machine (see ``DeliveryState``) driven by
Tenacity:

- Every attempt enters ATTEMPTING.
- A transient failure moves to BACKING_OFF and sleeps
  ``initial_delay * attempt * backoff_factor`` before the next attempt.
- A rate-limited failure moves to RATE_LIMIT_WAITING and sleeps until the
  reported reset time plus a one second buffer. The wait consumes an
  attempt, so the total number of attempts never exceeds
  ``max_retries + 1``.
- A 2xx response ends in SUCCEEDED; running out of attempts ends in
  EXHAUSTED and raises ``DeliveryExhaustedError``.
- A fatal failure (bad credentials) is not retried and raises
  ``DeliveryRejectedError``.

Dry-run mode returns before the transport is touched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
)

from diffpost.constants import RATE_LIMIT_BUFFER_SECONDS
from diffpost.exceptions import DeliveryExhaustedError, DeliveryRejectedError
from diffpost.github.transport import CommentTransport
from diffpost.logging import get_logger
from diffpost.models.delivery import (
    DeliveryPolicy,
    DeliveryResult,
    DeliveryState,
    FailureKind,
    PostOutcome,
)
from diffpost.models.github import PullRequestRef

__all__ = ["DeliveryClient"]

SleepFn = Callable[[float], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _should_retry(outcome: PostOutcome) -> bool:
    return outcome.failure is not None and outcome.failure.kind is not FailureKind.FATAL


class DeliveryClient:
    """Post comments to a pull request, retrying transient failures.

    Attributes:
        policy: Retry policy applied to every delivery.
        dry_run: When True, nothing is sent.

    Example:
        ```python
        client = DeliveryClient(transport, DeliveryPolicy(max_retries=3))
        result = await client.deliver(ref, fragment.content)
        print(result.attempts, result.rate_limit)
        ```
    """

    def __init__(
        self,
        transport: CommentTransport | None,
        policy: DeliveryPolicy | None = None,
        *,
        dry_run: bool = False,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the DeliveryClient.

        Args:
            transport: Performs the HTTP exchange. May be None in dry-run mode.
            policy: Retry policy. Defaults to DeliveryPolicy().
            dry_run: Log instead of posting.
            sleep: Async sleep used for backoff and rate-limit waits.
            clock: Returns the current UTC time; used for rate-limit waits.
            logger: Logger to report progress on.

        Raises:
            ValueError: If no transport is given outside dry-run mode.
        """
        if transport is None and not dry_run:
            raise ValueError("a transport is required unless dry_run is enabled")
        self._transport = transport
        self._policy = policy or DeliveryPolicy()
        self._dry_run = dry_run
        self._sleep = sleep
        self._clock = clock
        self._logger = logger or get_logger(__name__)

    @property
    def policy(self) -> DeliveryPolicy:
        return self._policy

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def rate_limit_wait(self, outcome: PostOutcome) -> float:
        """Seconds to wait before retrying a rate-limited post."""
        reset_at = outcome.failure.reset_at if outcome.failure else None
        wait = 0.0
        if reset_at is not None:
            wait = max(0.0, (reset_at - self._clock()).total_seconds())
        return wait + RATE_LIMIT_BUFFER_SECONDS

    def _wait(self, retry_state: RetryCallState) -> float:
        assert retry_state.outcome is not None
        outcome: PostOutcome = retry_state.outcome.result()
        if outcome.failure is not None and outcome.failure.kind is FailureKind.RATE_LIMITED:
            return self.rate_limit_wait(outcome)
        return self._policy.backoff_delay(retry_state.attempt_number)

    async def deliver(self, destination: PullRequestRef, content: str) -> DeliveryResult:
        """Post ``content`` as a comment on ``destination``.

        Args:
            destination: Pull request to comment on.
            content: Comment body.

        Returns:
            DeliveryResult with the attempts made, visited states and the
            quota reported by the successful response.

        Raises:
            DeliveryExhaustedError: If every allowed attempt failed.
            DeliveryRejectedError: If GitHub rejected the post as fatal.
        """
        log = self._logger.bind(pr=str(destination))

        if self._dry_run:
            log.info("dry_run_post", length=len(content.encode("utf-8")))
            log.debug("dry_run_body", body=content)
            return DeliveryResult(dry_run=True)

        assert self._transport is not None
        result = DeliveryResult()

        def before_attempt(retry_state: RetryCallState) -> None:
            result.attempts = retry_state.attempt_number
            result.transitions.append(DeliveryState.ATTEMPTING)

        def before_sleep(retry_state: RetryCallState) -> None:
            assert retry_state.outcome is not None
            assert retry_state.next_action is not None
            failure = retry_state.outcome.result().failure
            delay = retry_state.next_action.sleep
            if failure.kind is FailureKind.RATE_LIMITED:
                result.transitions.append(DeliveryState.RATE_LIMIT_WAITING)
                log.warning(
                    "rate_limit_wait",
                    wait_seconds=round(delay, 3),
                    reset_at=failure.reset_at.isoformat() if failure.reset_at else None,
                )
            else:
                result.transitions.append(DeliveryState.BACKING_OFF)
                log.warning(
                    "delivery_retry_scheduled",
                    attempt=retry_state.attempt_number,
                    max_retries=self._policy.max_retries,
                    delay_seconds=round(delay, 3),
                    error=failure.message,
                )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._policy.max_attempts),
            wait=self._wait,
            retry=retry_if_result(_should_retry),
            before=before_attempt,
            before_sleep=before_sleep,
            sleep=self._sleep,
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )
        outcome: PostOutcome = await retrying(
            self._transport.create_comment, destination, content
        )

        if outcome.ok:
            result.transitions.append(DeliveryState.SUCCEEDED)
            result.rate_limit = outcome.rate_limit
            result.comment_url = outcome.comment_url
            log.info("comment_posted", attempts=result.attempts, url=outcome.comment_url)
            log.debug(
                "rate_limit_status",
                remaining=outcome.rate_limit.remaining,
                reset_at=(
                    outcome.rate_limit.reset_at.isoformat()
                    if outcome.rate_limit.reset_at
                    else None
                ),
            )
            return result

        failure = outcome.failure
        assert failure is not None
        if failure.kind is FailureKind.FATAL:
            log.error("delivery_rejected", status=failure.status, error=failure.message)
            raise DeliveryRejectedError(
                f"GitHub rejected the comment: {failure.message}", failure=failure
            )

        result.transitions.append(DeliveryState.EXHAUSTED)
        log.error(
            "delivery_exhausted",
            attempts=result.attempts,
            kind=failure.kind.value,
            error=failure.message,
        )
        raise DeliveryExhaustedError(
            f"failed to post comment after {self._policy.max_retries} retries: "
            f"{failure.message}",
            failure=failure,
            attempts=result.attempts,
        )
