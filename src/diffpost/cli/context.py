"""CLI context and utilities for diffpost.

This module provides context management, exit codes, and the bridge from
Click's synchronous interface to async workflows.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from diffpost.config import DiffPostConfig

__all__ = [
    "ExitCode",
    "CLIContext",
    "async_command",
]


class ExitCode(IntEnum):
    """Standard exit codes for the diffpost CLI.

    - 0 for success (including dry runs)
    - 1 for any unrecoverable failure
    - 2 for usage errors (raised by Click)
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded configuration (file and environment applied).
        config_path: Path to config file (if specified via --config).
    """

    config: DiffPostConfig
    config_path: Path | None = None


F = TypeVar("F", bound=Callable[..., Any])


def async_command(f: F) -> F:
    """Decorator to run async Click commands with asyncio.run().

    Example:
        >>> @cli.command()
        >>> @click.pass_context
        >>> @async_command
        >>> async def add(ctx: click.Context, diff_file: Path) -> None:
        >>>     await post_diff_comments(...)
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return wrapper  # type: ignore[return-value]
