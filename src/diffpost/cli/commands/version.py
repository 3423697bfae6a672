"""Version command."""

from __future__ import annotations

import click

from diffpost import __version__
from diffpost.constants import DESCRIPTION


@click.command()
def version() -> None:
    """Print version information."""
    click.echo(f"diffpost version {__version__}")
    click.echo(DESCRIPTION)
