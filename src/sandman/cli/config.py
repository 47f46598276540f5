"""Configuration bootstrap for the Sandman CLI.

Commands:
- init: Create the configuration directory and its default files
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from sandman.core.paths import (
    BASE_CONFIG,
    BASE_GLOBAL_IGNORE,
    get_config_dir,
    get_config_file,
    get_global_ignore_file,
)

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Files written by ensure_config_files."""

    config_file: Path
    ignore_file: Path
    created_config: bool = False
    created_ignore: bool = False


def ensure_config_files() -> BootstrapResult:
    """Create the configuration directory and default files if missing.

    Existing files are never overwritten.

    Returns:
        BootstrapResult with the file paths and what was created.
    """
    config_dir = get_config_dir()
    config_file = get_config_file()
    ignore_file = get_global_ignore_file()
    result = BootstrapResult(config_file=config_file, ignore_file=ignore_file)

    config_dir.mkdir(parents=True, exist_ok=True)

    if not ignore_file.exists():
        ignore_file.write_text(BASE_GLOBAL_IGNORE, encoding="utf-8")
        result.created_ignore = True
        logger.info(f"Creating global .sandmanignore file at {ignore_file}")

    if not config_file.exists():
        config_file.write_text(BASE_CONFIG, encoding="utf-8")
        result.created_config = True
        logger.info(f"Creating default configuration at {config_file}")

    return result


@click.command()
def init() -> None:
    """Create the default configuration and global ignore file.

    Existing files are left untouched.
    """
    try:
        result = ensure_config_files()
    except OSError as e:
        click.echo(f"Error: Unable to create configuration: {e}", err=True)
        sys.exit(1)

    state = "Created" if result.created_config else "Found"
    click.echo(f"{state} configuration: {result.config_file}")
    state = "Created" if result.created_ignore else "Found"
    click.echo(f"{state} global ignore file: {result.ignore_file}")
    if result.created_config:
        click.echo("Edit the configuration, then run: sandman watch")
