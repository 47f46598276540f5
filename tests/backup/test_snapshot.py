"""Tests for the snapshot builder."""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from sandman.backup.ignore import IgnoreRules
from sandman.backup.snapshot import build_snapshot
from sandman.core.hashing import compute_bytes_hash, compute_file_hash
from sandman.core.paths import HISTORY_FILENAME


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Create a small directory tree."""
    root = tmp_path / "data"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "a.txt").write_text("x")
    (root / "b.txt").write_text("y")
    (root / "sub" / "c.log").write_text("log")
    (root / "sub" / "deep" / "d.bin").write_bytes(b"\x00\x01")
    return root


class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_hashes_every_file(self, tree: Path) -> None:
        """Every regular file is hashed under its relative POSIX path."""
        snap = build_snapshot(tree)

        assert snap.files == {
            "a.txt": compute_bytes_hash(b"x"),
            "b.txt": compute_bytes_hash(b"y"),
            "sub/c.log": compute_bytes_hash(b"log"),
            "sub/deep/d.bin": compute_bytes_hash(b"\x00\x01"),
        }

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory produces an empty snapshot."""
        assert build_snapshot(tmp_path).files == {}

    def test_rescan_is_stable(self, tree: Path) -> None:
        """Scanning an unchanged tree twice gives the same files."""
        assert build_snapshot(tree).files == build_snapshot(tree).files

    def test_history_file_always_skipped(self, tree: Path) -> None:
        """The sidecar history file is never part of a snapshot."""
        (tree / HISTORY_FILENAME).write_text("{}")

        snap = build_snapshot(tree)

        assert HISTORY_FILENAME not in snap.files

    def test_leftover_history_temp_file_skipped(self, tree: Path) -> None:
        """A temporary sidecar left by an interrupted save is not user data."""
        (tree / f"{HISTORY_FILENAME}.abc123.tmp").write_text("{}")
        (tree / "notes.tmp").write_text("n")

        snap = build_snapshot(tree)

        assert f"{HISTORY_FILENAME}.abc123.tmp" not in snap.files
        assert "notes.tmp" in snap.files

    def test_unlistable_subdirectory_skipped(self, tree: Path) -> None:
        """A directory that cannot be listed drops only its own subtree."""
        real_scandir = os.scandir

        def scandir(path: Path) -> object:
            if Path(path) == tree / "sub":
                raise PermissionError("denied")
            return real_scandir(path)

        with patch("sandman.backup.snapshot.os.scandir", side_effect=scandir):
            snap = build_snapshot(tree)

        assert set(snap.files) == {"a.txt", "b.txt"}

    def test_ignored_file(self, tree: Path) -> None:
        """Excluded files are left out."""
        rules = IgnoreRules.from_patterns(tree, ["*.log"])

        snap = build_snapshot(tree, rules)

        assert "sub/c.log" not in snap.files
        assert "a.txt" in snap.files

    def test_ignored_directory_not_read(self, tree: Path) -> None:
        """Excluded directories are not descended into or hashed."""
        rules = IgnoreRules.from_patterns(tree, ["sub/"])

        with patch(
            "sandman.backup.snapshot.compute_file_hash",
            wraps=compute_file_hash,
        ) as hasher:
            snap = build_snapshot(tree, rules)

        assert set(snap.files) == {"a.txt", "b.txt"}
        hashed = {Path(call.args[0]).name for call in hasher.call_args_list}
        assert hashed == {"a.txt", "b.txt"}

    def test_unreadable_file_skipped(self, tree: Path) -> None:
        """A file that cannot be read is logged and left out."""

        def flaky(path: str) -> str:
            if path.endswith("a.txt"):
                raise PermissionError("denied")
            return compute_file_hash(path)

        with patch("sandman.backup.snapshot.compute_file_hash", side_effect=flaky):
            snap = build_snapshot(tree)

        assert "a.txt" not in snap.files
        assert "b.txt" in snap.files

    def test_missing_root_returns_empty(self, tmp_path: Path) -> None:
        """A missing target directory yields an empty snapshot."""
        assert build_snapshot(tmp_path / "missing").files == {}

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_directory_not_followed(self, tree: Path, tmp_path: Path) -> None:
        """Symbolic links to directories are not descended into."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "e.txt").write_text("e")
        os.symlink(outside, tree / "link", target_is_directory=True)

        snap = build_snapshot(tree)

        assert not any(path.startswith("link") for path in snap.files)

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_dangling_symlink_skipped(self, tree: Path) -> None:
        """Broken links are skipped."""
        os.symlink(tree / "nowhere", tree / "broken")

        snap = build_snapshot(tree)

        assert "broken" not in snap.files
