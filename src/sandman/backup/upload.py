"""Upload of a change-set to the remote store.

This module provides:
- format_timestamp_tag: Cycle-wide sortable tag (YYYY-MM-DD--HH-MM-SS)
- remote_key_for: Object key of a file for a cycle
- upload_file: Upload one file, raising UploadError on failure
- upload_change_set: Upload every changed file, returning the successes
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sandman.backup.storage import StorageError
from sandman.backup.types import HashSnapshot, UploadedFile, UploadError

if TYPE_CHECKING:
    from sandman.backup.storage import ObjectStore
    from sandman.core.config import BackupTarget

logger = logging.getLogger(__name__)

TIMESTAMP_TAG_FORMAT = "%Y-%m-%d--%H-%M-%S"


def format_timestamp_tag(now: datetime | None = None) -> str:
    """Format the tag shared by every object of one cycle.

    Args:
        now: Cycle time (default: current UTC time).

    Returns:
        Tag like "2024-05-01--13-45-09".
    """
    if now is None:
        now = datetime.now(UTC)
    return now.strftime(TIMESTAMP_TAG_FORMAT)


def remote_key_for(prefix: str, tag: str, path: str) -> str:
    """Build the object key of a file.

    Args:
        prefix: Target key prefix (may be empty).
        tag: Cycle timestamp tag.
        path: Snapshot path of the file, relative to the target directory.

    Returns:
        "{prefix}/{tag}/{path}", without a leading slash when prefix is empty.
    """
    parts = [prefix.strip("/"), tag, path.replace("\\", "/").lstrip("/")]
    return "/".join(part for part in parts if part)


def upload_file(store: ObjectStore, bucket: str, key: str, local_path: Path) -> None:
    """Upload the current bytes of one file.

    Raises:
        UploadError: If the file cannot be read or the store rejects it.
    """
    try:
        data = local_path.read_bytes()
    except OSError as e:
        raise UploadError(f"Unable to read {local_path}: {e}") from e

    try:
        store.put(bucket, key, data)
    except StorageError as e:
        raise UploadError(str(e)) from e


def upload_change_set(
    changes: HashSnapshot,
    target: BackupTarget,
    store: ObjectStore,
    now: datetime | None = None,
) -> list[UploadedFile]:
    """Upload every file of a change-set.

    Failures are per file: they are logged and the file is left out of the
    result, and the remaining files are still attempted.

    Args:
        changes: Change-set whose paths are relative to the target directory.
        target: Target supplying the directory, bucket and key prefix.
        store: Remote object store.
        now: Cycle time used for the timestamp tag.

    Returns:
        The files the store accepted.
    """
    tag = format_timestamp_tag(now)
    root = target.directory_path
    uploaded: list[UploadedFile] = []

    for rel_path in sorted(changes.files):
        key = remote_key_for(target.prefix, tag, rel_path)
        local_path = root / rel_path
        try:
            upload_file(store, target.bucket, key, local_path)
        except UploadError as e:
            logger.error(f"[Gatherer - {target.name}] Error uploading {key}: {e}")
            continue

        logger.debug(f"[Gatherer - {target.name}] Successfully uploaded: {key}")
        uploaded.append(UploadedFile(path=rel_path, local_path=str(local_path), remote_key=key))

    if changes.files:
        logger.info(
            f"[Gatherer - {target.name}] Uploaded {len(uploaded)}/{len(changes.files)} "
            f"files to s3://{target.bucket}/{remote_key_for(target.prefix, tag, '')}"
        )
    return uploaded
