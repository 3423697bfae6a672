"""CLI entry point for diffpost.

This module defines the Click-based command-line interface for diffpost.
"""

from __future__ import annotations

from pathlib import Path

import click

from diffpost import __version__
from diffpost.cli.commands import add, version
from diffpost.cli.context import CLIContext, ExitCode
from diffpost.cli.output import format_error
from diffpost.config import load_config
from diffpost.exceptions import ConfigError
from diffpost.logging import LOG_LEVELS, configure_logging, parse_log_level


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="diffpost")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (default: ./diffpost.yaml when present).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level [default: info].",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Log output format (DIFFPOST_LOG_FORMAT=json also selects JSON).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """diffpost - post Argo CD diff previews to GitHub pull requests."""
    ctx.ensure_object(dict)

    # Load configuration first (before logging setup)
    try:
        config = load_config(config_file)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details or None), err=True)
        ctx.exit(ExitCode.FAILURE)

    # Priority: --log-level > config (file or DIFFPOST_LOG_LEVEL)
    level = parse_log_level(log_level or config.log_level)
    configure_logging(
        force_json=(log_format or "").lower() == "json",
        level=level,
    )

    ctx.obj["cli_ctx"] = CLIContext(config=config, config_path=config_file)

    # If no command is given, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(add)
cli.add_command(version)

if __name__ == "__main__":
    cli()
