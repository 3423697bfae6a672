"""Post a diff report to a pull request as one or more comments.

Pipeline, run once per invocation:

1. Check the credential (live mode only) before touching files or network.
2. Parse the pull request reference.
3. Read the report.
4. Split it into parts.
5. Post the parts strictly in order, pausing between live posts.

Configuration and structural errors abort before anything is posted. A
delivery failure on part k aborts the run; parts after k are never sent.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog

from diffpost.config import DiffPostConfig, require_github_token
from diffpost.exceptions import DeliveryError, InputError
from diffpost.github.delivery import DeliveryClient, SleepFn
from diffpost.github.reference import parse_pr_reference
from diffpost.github.transport import GitHubCommentTransport, create_github_client
from diffpost.logging import get_logger
from diffpost.models.delivery import PostSummary
from diffpost.models.fragment import byte_length
from diffpost.splitter import DocumentSplitter

__all__ = ["PostRequest", "post_diff_comments", "read_document"]


@dataclass(frozen=True, slots=True)
class PostRequest:
    """Inputs for posting one report.

    Attributes:
        diff_file: Path to the rendered markdown report.
        pr_reference: ``owner/repo#123`` or a pull request URL.
        github_token: Token from the command line; the environment is
            consulted when None.
    """

    diff_file: Path
    pr_reference: str
    github_token: str | None = None


def read_document(path: Path) -> str:
    """Read a UTF-8 report from disk.

    Raises:
        InputError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise InputError(f"failed to read input file {path}: {e}", path=path) from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InputError(f"input file {path} is not valid UTF-8: {e}", path=path) from e


async def post_diff_comments(
    request: PostRequest,
    *,
    config: DiffPostConfig,
    client: DeliveryClient | None = None,
    splitter: DocumentSplitter | None = None,
    sleep: SleepFn = asyncio.sleep,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> PostSummary:
    """Split the report and post every part to the pull request.

    Args:
        request: What to post and where.
        config: Size limit, retry policy, delays and dry-run flag.
        client: DeliveryClient to use. Built from ``config`` when None.
        splitter: DocumentSplitter to use. Built when None.
        sleep: Async sleep used for the pause between posts.
        logger: Logger to report progress on.

    Returns:
        PostSummary with the fragments and per-part delivery results.

    Raises:
        CredentialMissingError: No token in live mode.
        ReferenceFormatError: The pull request reference is invalid.
        InputError: The report cannot be read.
        SplitError: The report cannot be split within ``config.max_length``.
        DeliveryError: A part could not be posted; ``part_number`` is set.
    """
    log = logger or get_logger(__name__)
    dry_run = client.dry_run if client is not None else config.dry_run

    token = None if dry_run else require_github_token(request.github_token)
    destination = parse_pr_reference(request.pr_reference)
    log = log.bind(pr=str(destination))
    if dry_run:
        log.info("dry_run_enabled")

    document = read_document(request.diff_file)
    log.info(
        "report_loaded",
        path=str(request.diff_file),
        size=byte_length(document),
        max_length=config.max_length,
    )

    splitter = splitter or DocumentSplitter(logger=log)
    fragments = splitter.split(document, config.max_length)
    for fragment in fragments:
        log.debug(
            "fragment_planned",
            part=fragment.part_number,
            total=fragment.total_parts,
            size=fragment.size,
        )

    transport: GitHubCommentTransport | None = None
    if client is None:
        if token is not None:
            transport = GitHubCommentTransport(
                create_github_client(
                    token,
                    base_url=config.api_url,
                    timeout=config.request_timeout,
                )
            )
        client = DeliveryClient(
            transport,
            config.delivery_policy(),
            dry_run=dry_run,
            logger=log,
        )

    summary = PostSummary(fragments=fragments, dry_run=dry_run)
    log.info("posting_comments", count=len(fragments))
    try:
        for fragment in fragments:
            if fragment.exceeds(config.max_length):
                log.warning(
                    "fragment_oversized",
                    part=fragment.part_number,
                    size=fragment.size,
                    max_length=config.max_length,
                    excess=fragment.size - config.max_length,
                )

            log.info("posting_part", part=fragment.part_number, total=fragment.total_parts)
            try:
                result = await client.deliver(destination, fragment.content)
            except DeliveryError as e:
                e.part_number = fragment.part_number
                raise
            summary.results.append(result)

            if not fragment.is_last and not dry_run:
                await sleep(config.inter_post_delay)
    finally:
        if transport is not None:
            transport.close()

    if dry_run:
        log.info("dry_run_completed", parts=len(fragments))
    else:
        log.info("comments_posted", parts=len(fragments))
    return summary
