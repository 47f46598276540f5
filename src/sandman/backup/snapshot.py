"""Snapshot builder for backup targets.

This module provides:
- build_snapshot: Walks a target directory and hashes every included file

Traversal uses an explicit worklist of directories. Ignore rules are checked
at each entry before hashing or descending, so excluded subtrees are never
read. Sidecar history files and their leftover temporary files are always
skipped.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sandman.backup.ignore import IgnoreRules
from sandman.backup.types import HashSnapshot
from sandman.core.hashing import compute_file_hash
from sandman.core.paths import is_history_file

logger = logging.getLogger(__name__)


def _is_text(path: str) -> bool:
    """Check that a path decoded from the filesystem is valid text."""
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def build_snapshot(root: Path | str, ignore: IgnoreRules | None = None) -> HashSnapshot:
    """Hash every included file below a directory.

    Args:
        root: Target directory to scan.
        ignore: Exclusion rules relative to root, or None to include everything.

    Returns:
        HashSnapshot keyed by POSIX paths relative to root, timestamped at
        the start of the scan. Unreadable files and unlistable directories
        are logged and left out.
    """
    root_path = Path(root)
    snapshot = HashSnapshot()
    pending: list[str] = [""]

    while pending:
        rel_dir = pending.pop()
        current = root_path / rel_dir if rel_dir else root_path

        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error(f"Unable to open directory {current}: {e}")
            continue

        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

            if not _is_text(rel_path):
                logger.error(f"Invalid path: {entry.path!r}")
                continue
            if is_history_file(entry.name):
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file()
            except OSError as e:
                logger.error(f"Error reading directory entry {entry.path}: {e}")
                continue

            if ignore is not None and ignore.excluded(rel_path, is_dir=is_dir):
                logger.debug(f"Ignoring {rel_path}")
                continue

            if is_dir:
                pending.append(rel_path)
                continue
            if not is_file:
                # Symlinked directories, dangling links, sockets, FIFOs
                logger.debug(f"Skipping non-regular entry {rel_path}")
                continue

            try:
                snapshot.files[rel_path] = compute_file_hash(entry.path)
            except OSError as e:
                logger.error(f"Error while opening file {entry.path}: {e}")

    logger.debug(f"Scanned {root_path}: {len(snapshot.files)} files")
    return snapshot
