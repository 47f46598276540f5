"""Snapshot diff and merge.

This module provides:
- diff_snapshots: Entries of a new snapshot that differ from the baseline
- merge_snapshots: The baseline with a change-set overlaid

There are no tombstones. A path present only in the baseline is never
reported, so local deletions never reach the remote store.
"""

from __future__ import annotations

from sandman.backup.types import HashSnapshot


def diff_snapshots(old: HashSnapshot, new: HashSnapshot) -> HashSnapshot:
    """Compute the change-set between a baseline and a fresh snapshot.

    Args:
        old: Prior baseline.
        new: Snapshot from the current scan.

    Returns:
        HashSnapshot with every path of `new` whose digest is absent from or
        different in `old`, timestamped with the new scan time.
    """
    changed = {
        path: digest
        for path, digest in new.files.items()
        if old.files.get(path) != digest
    }
    return HashSnapshot(files=changed, timestamp=new.timestamp)


def merge_snapshots(old: HashSnapshot, changes: HashSnapshot) -> HashSnapshot:
    """Overlay a change-set onto a baseline.

    The result is the next baseline and is committed whether or not the
    uploads of the change-set succeed, so a file whose upload failed is not
    retried until its content changes again.

    Args:
        old: Prior baseline (left untouched).
        changes: Change-set from diff_snapshots.

    Returns:
        New HashSnapshot holding every old entry, with change-set entries
        inserted or replaced, timestamped with the change-set scan time.
    """
    files = dict(old.files)
    files.update(changes.files)
    return HashSnapshot(files=files, timestamp=changes.timestamp)
