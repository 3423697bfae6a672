from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from diffpost.cli.context import ExitCode
from diffpost.cli.output import format_error
from diffpost.exceptions import (
    BudgetTooSmallError,
    ConfigError,
    CredentialMissingError,
    DeliveryError,
    DiffPostError,
    ReferenceFormatError,
)
from diffpost.logging import get_logger

__all__ = ["cli_error_handler"]


def _describe(error: DiffPostError) -> str:
    if isinstance(error, CredentialMissingError):
        return format_error(error.message)
    if isinstance(error, ReferenceFormatError):
        return format_error(
            error.message,
            details=[f"Value: {error.reference}"] if error.reference else None,
            suggestion="Use owner/repo#123 or https://github.com/owner/repo/pull/123",
        )
    if isinstance(error, BudgetTooSmallError):
        return format_error(
            error.message,
            suggestion="Increase --max-length",
        )
    if isinstance(error, DeliveryError) and error.part_number is not None:
        return format_error(
            f"failed to post comment part {error.part_number}: {error.message}"
        )
    if isinstance(error, ConfigError):
        details = []
        if error.field:
            details.append(f"Field: {error.field}")
        if error.value is not None:
            details.append(f"Value: {error.value}")
        return format_error(error.message, details=details or None)
    return format_error(error.message)


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    - KeyboardInterrupt: Exit with code 130
    - DiffPostError: Print the formatted message, exit with code 1
    - Generic exceptions: Log the traceback, exit with code 1

    Example:
        >>> with cli_error_handler():
        >>>     asyncio.run(post_diff_comments(request, config=config))
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except DiffPostError as e:
        click.echo(_describe(e), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_error")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
