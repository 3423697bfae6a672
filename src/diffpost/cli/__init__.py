"""CLI utilities for diffpost.

This module provides CLI-specific utilities including context management,
output formatting, parameter types and error handling.
"""

from __future__ import annotations

from diffpost.cli.context import CLIContext, ExitCode, async_command
from diffpost.cli.errors import cli_error_handler
from diffpost.cli.output import format_error, format_success
from diffpost.cli.params import DURATION, DurationParamType

__all__ = [
    "CLIContext",
    "DURATION",
    "DurationParamType",
    "ExitCode",
    "async_command",
    "cli_error_handler",
    "format_error",
    "format_success",
]
