"""Command-line interface for Sandman.

This module provides the main CLI entry point and assembles all commands.

Commands:
- init: Create the default configuration and global ignore file
- backup: Back up one directory once
- watch: Run every configured backup continuously
"""

from __future__ import annotations

import click

from sandman import __version__
from sandman.cli.backup import backup, watch
from sandman.cli.config import ensure_config_files, init
from sandman.cli.log import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="sandman")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Sandman - Scheduled, content-hashed backups to S3."""
    setup_logging(verbose)


cli.add_command(init)
cli.add_command(backup)
cli.add_command(watch)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "ensure_config_files",
    "main",
    "setup_logging",
]
