"""Configuration classes for Sandman.

This module defines the configuration handed to the backup core:
- AwsConfig: Explicit S3 credentials (optional as a group)
- BackupTarget: One local-directory-to-bucket backup relationship
- SandmanConfig: The parsed configuration file
- load_config / parse_config: TOML loading and validation
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class ConfigError(Exception):
    """Configuration file is missing, unparseable or invalid."""


@dataclass(frozen=True)
class AwsConfig:
    """Explicit AWS credentials for the S3 client.

    Attributes:
        aws_access_key_id: AWS access key ID.
        aws_default_region: Region name (e.g., "us-east-1").
        aws_secret_access_key: AWS secret access key.
    """

    aws_access_key_id: str
    aws_default_region: str
    aws_secret_access_key: str

    def __repr__(self) -> str:
        """Representation that never leaks the secret."""
        return (
            f"AwsConfig(aws_access_key_id={self.aws_access_key_id!r}, "
            f"aws_default_region={self.aws_default_region!r}, "
            "aws_secret_access_key='***')"
        )


@dataclass(frozen=True)
class BackupTarget:
    """Configuration for one directory to be backed up.

    Attributes:
        name: Designator for this backup, used in log lines.
        directory: Path to the local directory.
        bucket: S3 bucket name.
        prefix: Key prefix inside the bucket.
        interval: Minimum seconds between two scans.
        start_time: Unix timestamp before which no scan happens.
        cleanable: Whether uploaded files are deleted locally.
    """

    name: str
    directory: str
    bucket: str
    prefix: str
    interval: int = 0
    start_time: int = 0
    cleanable: bool = False

    def __post_init__(self) -> None:
        """Normalize the key prefix."""
        object.__setattr__(self, "prefix", self.prefix.rstrip("/"))

    @property
    def directory_path(self) -> Path:
        """Get the target directory as a Path."""
        return Path(self.directory)


@dataclass(frozen=True)
class SandmanConfig:
    """Main configuration for a continuous run.

    Attributes:
        aws: Explicit credentials, or None for default resolution.
        backups: Targets to run concurrently.
    """

    aws: AwsConfig | None = None
    backups: list[BackupTarget] = field(default_factory=list)


_AWS_KEYS = ("aws_access_key_id", "aws_default_region", "aws_secret_access_key")


def _require(entry: Mapping[str, Any], key: str, expected: type, where: str) -> Any:
    """Fetch a required key and check its type."""
    if key not in entry:
        raise ConfigError(f"{where}: missing required key '{key}'")
    value = entry[key]
    # bool is a subclass of int; never accept it where an integer is expected
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"{where}: '{key}' must be an integer")
    if not isinstance(value, expected):
        raise ConfigError(f"{where}: '{key}' must be of type {expected.__name__}")
    return value


def _parse_aws(data: Any) -> AwsConfig | None:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ConfigError("[aws] must be a table")

    present = [key for key in _AWS_KEYS if key in data]
    if not present:
        return None
    if len(present) != len(_AWS_KEYS):
        missing = ", ".join(key for key in _AWS_KEYS if key not in data)
        raise ConfigError(f"[aws]: incomplete credentials, missing {missing}")

    values = {key: _require(data, key, str, "[aws]") for key in _AWS_KEYS}
    return AwsConfig(**values)


def _parse_target(entry: Any, index: int) -> BackupTarget:
    where = f"directories.backups[{index}]"
    if not isinstance(entry, Mapping):
        raise ConfigError(f"{where} must be a table")

    interval = _require(entry, "interval", int, where)
    start_time = _require(entry, "start_time", int, where)
    if interval < 0:
        raise ConfigError(f"{where}: 'interval' must not be negative")
    if start_time < 0:
        raise ConfigError(f"{where}: 'start_time' must not be negative")

    cleanable = entry.get("cleanable", False)
    if not isinstance(cleanable, bool):
        raise ConfigError(f"{where}: 'cleanable' must be a boolean")

    return BackupTarget(
        name=_require(entry, "name", str, where),
        directory=_require(entry, "directory", str, where),
        bucket=_require(entry, "bucket", str, where),
        prefix=_require(entry, "prefix", str, where),
        interval=interval,
        start_time=start_time,
        cleanable=cleanable,
    )


def parse_config(data: Mapping[str, Any]) -> SandmanConfig:
    """Build a SandmanConfig from an already-parsed TOML table.

    Args:
        data: Top-level table of the configuration file.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If a required table or key is missing or mistyped.
    """
    directories = data.get("directories")
    if not isinstance(directories, Mapping):
        raise ConfigError("missing [directories] table")

    backups = directories.get("backups")
    if not isinstance(backups, list):
        raise ConfigError("missing [[directories.backups]] entries")

    return SandmanConfig(
        aws=_parse_aws(data.get("aws")),
        backups=[_parse_target(entry, i) for i, entry in enumerate(backups)],
    )


def load_config(path: Path) -> SandmanConfig:
    """Load and validate a TOML configuration file.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read configuration file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    return parse_config(data)
