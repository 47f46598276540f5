"""Core module - Configuration, hashing, paths and shared types."""

from sandman.core.config import (
    AwsConfig,
    BackupTarget,
    ConfigError,
    SandmanConfig,
    load_config,
    parse_config,
)
from sandman.core.hashing import compute_bytes_hash, compute_file_hash, is_valid_digest
from sandman.core.paths import (
    CONFIG_FILENAME,
    HISTORY_FILENAME,
    IGNORE_FILENAME,
    get_config_dir,
    get_config_file,
    get_global_ignore_file,
)
from sandman.core.types import GathererState

__all__ = [
    # Config
    "AwsConfig",
    "BackupTarget",
    "ConfigError",
    "SandmanConfig",
    "load_config",
    "parse_config",
    # Hashing
    "compute_bytes_hash",
    "compute_file_hash",
    "is_valid_digest",
    # Paths
    "CONFIG_FILENAME",
    "HISTORY_FILENAME",
    "IGNORE_FILENAME",
    "get_config_dir",
    "get_config_file",
    "get_global_ignore_file",
    # Types
    "GathererState",
]
