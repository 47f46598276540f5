"""Backup operations for one or more targets.

Architecture:
    Gatherer → build_snapshot → diff_snapshots/merge_snapshots
             → upload_change_set → save_snapshot → cleanup_uploaded

Components:
- **IgnoreRules**: gitignore-style exclusions from the target and global files
- **build_snapshot**: Content-hash snapshot of a target directory
- **diff_snapshots / merge_snapshots**: Change-set and next baseline
- **load_snapshot / save_snapshot**: Sidecar history persistence
- **upload_change_set**: Per-file upload to the object store
- **cleanup_uploaded**: Deletes local files after confirmed upload
- **Gatherer**: Per-target scheduling in its own thread
"""

from sandman.backup.cleanup import cleanup_uploaded
from sandman.backup.diff import diff_snapshots, merge_snapshots
from sandman.backup.gatherer import Gatherer, run_gatherers, seconds_until_due
from sandman.backup.ignore import IgnoreRules, load_ignore_spec
from sandman.backup.snapshot import build_snapshot
from sandman.backup.state import load_snapshot, save_snapshot
from sandman.backup.storage import (
    ObjectStore,
    S3ObjectStore,
    StorageError,
    create_object_store,
)
from sandman.backup.types import (
    BackupError,
    CycleResult,
    HashSnapshot,
    PersistenceError,
    SnapshotError,
    UploadedFile,
    UploadError,
)
from sandman.backup.upload import (
    format_timestamp_tag,
    remote_key_for,
    upload_change_set,
    upload_file,
)

__all__ = [
    # Types
    "BackupError",
    "CycleResult",
    "HashSnapshot",
    "PersistenceError",
    "SnapshotError",
    "UploadError",
    "UploadedFile",
    # Ignore
    "IgnoreRules",
    "load_ignore_spec",
    # Snapshots
    "build_snapshot",
    "diff_snapshots",
    "merge_snapshots",
    "load_snapshot",
    "save_snapshot",
    # Storage and upload
    "ObjectStore",
    "S3ObjectStore",
    "StorageError",
    "create_object_store",
    "format_timestamp_tag",
    "remote_key_for",
    "upload_change_set",
    "upload_file",
    # Cleanup
    "cleanup_uploaded",
    # Scheduling
    "Gatherer",
    "run_gatherers",
    "seconds_until_due",
]
