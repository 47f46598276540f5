"""Local cleanup of uploaded files.

This module provides:
- cleanup_uploaded: Delete local files the remote store confirmed
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from sandman.backup.types import UploadedFile

logger = logging.getLogger(__name__)


def cleanup_uploaded(uploaded: Iterable[UploadedFile], name: str = "") -> list[str]:
    """Delete the local copies of uploaded files.

    Only confirmed uploads are passed in, never the full change-set.
    A failed deletion is logged and the remaining files are still processed.

    Args:
        uploaded: Files accepted by the remote store.
        name: Target name for log lines.

    Returns:
        Local paths that were deleted.
    """
    deleted: list[str] = []

    for item in uploaded:
        try:
            os.remove(item.local_path)
        except FileNotFoundError:
            logger.warning(f"[Gatherer - {name}] Already gone: {item.local_path}")
            continue
        except OSError as e:
            logger.error(f"[Gatherer - {name}] Unable to delete {item.local_path}: {e}")
            continue
        deleted.append(item.local_path)
        logger.debug(f"[Gatherer - {name}] Deleted {item.local_path}")

    if deleted:
        logger.info(f"[Gatherer - {name}] Cleaned up {len(deleted)} uploaded files")
    return deleted
