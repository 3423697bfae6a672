"""``diffpost add``: post a diff report to a pull request."""

from __future__ import annotations

from pathlib import Path

import click

from diffpost.cli.context import CLIContext, async_command
from diffpost.cli.errors import cli_error_handler
from diffpost.cli.output import format_success
from diffpost.cli.params import DURATION
from diffpost.workflows.post_comments import PostRequest, post_diff_comments


@click.command()
@click.option(
    "-f",
    "--file",
    "diff_file",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to the rendered diff report (markdown).",
)
@click.option(
    "-p",
    "--pr",
    "pr_reference",
    required=True,
    help="Pull request: owner/repo#123 or https://github.com/owner/repo/pull/123.",
)
@click.option(
    "-m",
    "--max-length",
    type=int,
    default=None,
    help="Maximum comment size in bytes [default: 65536].",
)
@click.option(
    "-t",
    "--github-token",
    default=None,
    help="GitHub token (falls back to GH_TOKEN, then GITHUB_TOKEN).",
)
@click.option(
    "--max-retries",
    type=int,
    default=None,
    help="Retries per comment after the first attempt [default: 3].",
)
@click.option(
    "--retry-delay",
    type=DURATION,
    default=None,
    help="Initial backoff delay, e.g. 2s or 500ms [default: 2s].",
)
@click.option(
    "--backoff-factor",
    type=float,
    default=None,
    help="Backoff multiplier [default: 2.0].",
)
@click.option(
    "--request-timeout",
    type=DURATION,
    default=None,
    help="Per-request timeout [default: 30s].",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Log what would be posted without calling GitHub.",
)
@click.pass_context
@async_command
async def add(
    ctx: click.Context,
    diff_file: Path,
    pr_reference: str,
    max_length: int | None,
    github_token: str | None,
    max_retries: int | None,
    retry_delay: float | None,
    backoff_factor: float | None,
    request_timeout: float | None,
    dry_run: bool,
) -> None:
    """Post a diff report to a pull request, split across comments if needed.

    Examples:

        diffpost add -f diff.md -p octo/widgets#42

        diffpost add -f diff.md -p https://github.com/octo/widgets/pull/42 --dry-run
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    with cli_error_handler():
        config = cli_ctx.config.with_overrides(
            max_length=max_length,
            max_retries=max_retries,
            retry_delay=retry_delay,
            backoff_factor=backoff_factor,
            request_timeout=request_timeout,
            dry_run=dry_run or None,
        )
        request = PostRequest(
            diff_file=diff_file,
            pr_reference=pr_reference,
            github_token=github_token,
        )
        summary = await post_diff_comments(request, config=config)

    count = len(summary.fragments)
    noun = "comment" if count == 1 else "comments"
    if summary.dry_run:
        click.echo(f"Dry run: would post {count} {noun}")
    else:
        click.echo(format_success(f"Posted {count} {noun}"))
