"""Shared types and dataclasses for backup cycles.

This module provides:
- BackupError, SnapshotError, PersistenceError, UploadError: Exception classes
- HashSnapshot: Path-to-digest mapping captured at one instant
- UploadedFile: A file confirmed accepted by the remote store
- CycleResult: Summary of one scan/diff/upload/persist/cleanup pass
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from sandman.core.hashing import is_valid_digest


class BackupError(Exception):
    """Base exception for backup errors."""


class SnapshotError(BackupError):
    """A serialized snapshot has the wrong shape."""


class PersistenceError(BackupError):
    """Failed to write the sidecar history file."""


class UploadError(BackupError):
    """Failed to upload a file to the remote store."""


def now_millis() -> int:
    """Get the current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass
class HashSnapshot:
    """Content digests of a directory tree at one point in time.

    Also used for change-sets (only the entries that differ from a baseline)
    and merged baselines.

    Attributes:
        files: Mapping of file path to hex-lowercase SHA-256 digest.
        timestamp: Capture time in milliseconds since the epoch.
    """

    files: dict[str, str] = field(default_factory=dict)
    timestamp: int = field(default_factory=now_millis)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the sidecar record shape."""
        return {"files": dict(self.files), "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Any) -> HashSnapshot:
        """Create a HashSnapshot from a decoded sidecar record.

        Raises:
            SnapshotError: If the record is not a {files, timestamp} mapping
                of paths to digests with an integer timestamp.
        """
        if not isinstance(data, dict):
            raise SnapshotError("snapshot record must be an object")

        files = data.get("files")
        timestamp = data.get("timestamp")
        if not isinstance(files, dict):
            raise SnapshotError("'files' must be an object")
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise SnapshotError("'timestamp' must be an integer")

        for path, digest in files.items():
            if not is_valid_digest(digest):
                raise SnapshotError(f"invalid digest for {path!r}")

        return cls(files=dict(files), timestamp=timestamp)


@dataclass(frozen=True)
class UploadedFile:
    """A local file accepted by the remote store.

    Attributes:
        path: Snapshot key, relative to the target directory.
        local_path: Full path of the file on disk.
        remote_key: Object key it was stored under.
    """

    path: str
    local_path: str
    remote_key: str


@dataclass
class CycleResult:
    """Result of one backup cycle for a target."""

    scanned: int
    changes: HashSnapshot
    uploaded: list[UploadedFile]
    deleted: list[str] = field(default_factory=list)
    persisted: bool = True

    @property
    def failed(self) -> list[str]:
        """Paths in the change-set that were not uploaded."""
        done = {u.path for u in self.uploaded}
        return sorted(path for path in self.changes.files if path not in done)
