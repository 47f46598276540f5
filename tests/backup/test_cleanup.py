"""Tests for local cleanup."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from sandman.backup.cleanup import cleanup_uploaded
from sandman.backup.types import UploadedFile


def _uploaded(directory: Path, name: str) -> UploadedFile:
    return UploadedFile(path=name, local_path=str(directory / name), remote_key=f"p/t/{name}")


class TestCleanupUploaded:
    """Tests for cleanup_uploaded."""

    def test_deletes_uploaded_files(self, backup_dir: Path) -> None:
        """Uploaded files are removed from disk."""
        deleted = cleanup_uploaded([_uploaded(backup_dir, "a.txt")], "test")

        assert deleted == [str(backup_dir / "a.txt")]
        assert not (backup_dir / "a.txt").exists()
        assert (backup_dir / "b.txt").exists()

    def test_missing_file_continues(
        self, backup_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A file that is already gone is logged and the rest still deleted."""
        items = [_uploaded(backup_dir, "gone.txt"), _uploaded(backup_dir, "b.txt")]

        with caplog.at_level(logging.WARNING, logger="sandman.backup.cleanup"):
            deleted = cleanup_uploaded(items, "test")

        assert deleted == [str(backup_dir / "b.txt")]
        assert "Already gone" in caplog.text

    def test_delete_error_continues(
        self, backup_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Other delete errors are logged and processing continues."""
        real_remove = os.remove

        def remove(path: str) -> None:
            if path.endswith("a.txt"):
                raise PermissionError("denied")
            real_remove(path)

        items = [_uploaded(backup_dir, "a.txt"), _uploaded(backup_dir, "b.txt")]
        with patch("sandman.backup.cleanup.os.remove", side_effect=remove):
            deleted = cleanup_uploaded(items, "test")

        assert deleted == [str(backup_dir / "b.txt")]
        assert (backup_dir / "a.txt").exists()
        assert "Unable to delete" in caplog.text

    def test_nothing_uploaded(self) -> None:
        """An empty list deletes nothing."""
        assert cleanup_uploaded([]) == []
