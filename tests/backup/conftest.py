"""Shared fixtures for backup tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from sandman.backup.storage import ObjectStore, StorageError
from sandman.core.config import BackupTarget


class MemoryStore(ObjectStore):
    """In-memory object store that can be told to reject keys."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.failing_suffixes: set[str] = set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def location(self) -> str:
        return "memory"

    def put(self, bucket: str, key: str, data: bytes) -> None:
        with self._lock:
            self.calls.append(key)
            if any(key.endswith(suffix) for suffix in self.failing_suffixes):
                raise StorageError(f"rejected {key}")
            self.objects[(bucket, key)] = data

    def keys(self, bucket: str = "bucket") -> list[str]:
        with self._lock:
            return sorted(key for b, key in self.objects if b == bucket)


@pytest.fixture
def store() -> MemoryStore:
    """Create an in-memory object store."""
    return MemoryStore()


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Create a target directory with a.txt ("x") and b.txt ("y")."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "a.txt").write_text("x")
    (directory / "b.txt").write_text("y")
    return directory


@pytest.fixture
def target(backup_dir: Path) -> BackupTarget:
    """Create a target for backup_dir."""
    return BackupTarget(
        name="test",
        directory=str(backup_dir),
        bucket="bucket",
        prefix="prefix",
        interval=3600,
        start_time=0,
    )
