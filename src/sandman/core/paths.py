"""Well-known file names and locations for Sandman.

This module provides:
- File names for the per-target sidecar, ignore file and config file
- get_config_dir / file_in_config: the per-user configuration directory
- BASE_CONFIG / BASE_GLOBAL_IGNORE: templates written on first run
"""

from __future__ import annotations

import os
from pathlib import Path

HISTORY_FILENAME = ".sandman_history"
# Sidecar temp files are named "{HISTORY_FILENAME}.<random>{HISTORY_TEMP_SUFFIX}"
HISTORY_TEMP_SUFFIX = ".tmp"
CONFIG_FILENAME = ".sandman_config.toml"
IGNORE_FILENAME = ".sandmanignore"

CONFIG_DIR_ENV = "SANDMAN_CONFIG_DIR"

BASE_CONFIG = """\
title = "Example Sandman Config"

[aws]
aws_access_key_id = "AWS_ACCESS_KEY_ID"
aws_default_region = "DEFAULT_REGION"
aws_secret_access_key = "AWS_SECRET_ACCESS_KEY"

# Backup configurations with names, directory paths, prefixes, buckets,
# intervals (seconds) and start times (unix timestamp).
[[directories.backups]]
name = "Example Backup 1"
directory = "PATH-GOES-HERE"
prefix = "ExampleBackup1"
bucket = "our-bucket-name"
interval = 10
start_time = 0
cleanable = false

[[directories.backups]]
name = "Example Backup 2"
directory = "PATH-GOES-HERE"
prefix = "ExampleBackup2"
bucket = "our-bucket-name"
interval = 180
start_time = 0
cleanable = false
"""

BASE_GLOBAL_IGNORE = f"""\
{HISTORY_FILENAME}
{CONFIG_FILENAME}
{IGNORE_FILENAME}
"""


def get_config_dir() -> Path:
    """Get the configuration directory for Sandman.

    Returns:
        Path from $SANDMAN_CONFIG_DIR if set, otherwise ~/.sandman.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".sandman"


def file_in_config(file_name: str) -> Path:
    """Get the path of a file inside the configuration directory."""
    return get_config_dir() / file_name


def get_config_file() -> Path:
    """Get the path to the default config file."""
    return file_in_config(CONFIG_FILENAME)


def get_global_ignore_file() -> Path:
    """Get the path to the ignore file shared by every target."""
    return file_in_config(IGNORE_FILENAME)


def is_history_file(name: str) -> bool:
    """Check if a file name is the sidecar or one of its temporary files."""
    if name == HISTORY_FILENAME:
        return True
    return name.startswith(f"{HISTORY_FILENAME}.") and name.endswith(HISTORY_TEMP_SUFFIX)


def history_file_for(directory: Path | str) -> Path:
    """Get the sidecar history file of a target directory."""
    return Path(directory) / HISTORY_FILENAME


def ignore_file_for(directory: Path | str) -> Path:
    """Get the per-target ignore file of a target directory."""
    return Path(directory) / IGNORE_FILENAME
