"""Sidecar persistence of a target's baseline snapshot.

This module provides:
- load_snapshot: Read the prior baseline, falling back to an empty one
- save_snapshot: Atomically replace the sidecar with a new baseline

The sidecar is a JSON record {"files": {path: digest}, "timestamp": ms}.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from sandman.backup.types import HashSnapshot, PersistenceError, SnapshotError
from sandman.core.paths import HISTORY_TEMP_SUFFIX

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> HashSnapshot:
    """Load the prior baseline of a target.

    Args:
        path: Sidecar history file.

    Returns:
        The stored snapshot, or a new empty snapshot (timestamped now) if the
        sidecar is missing, unreadable or corrupt.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"No history at {path}. Defaulting to empty.")
        return HashSnapshot()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Unable to read history {path}: {e}. Defaulting to empty.")
        return HashSnapshot()

    try:
        return HashSnapshot.from_dict(json.loads(raw))
    except (ValueError, RecursionError, SnapshotError) as e:
        # JSONDecodeError is a ValueError, as are oversized integer literals
        logger.warning(f"Corrupt history {path}: {e}. Defaulting to empty.")
        return HashSnapshot()


def save_snapshot(snapshot: HashSnapshot, path: Path) -> None:
    """Write a baseline to the sidecar.

    The record is written to a temporary file in the same directory and
    renamed over the sidecar, so readers see either the old or the new file.

    Args:
        snapshot: Baseline to store.
        path: Sidecar history file.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    payload = json.dumps(snapshot.to_dict(), indent=2, sort_keys=True)

    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{path.name}.", suffix=HISTORY_TEMP_SUFFIX, dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise PersistenceError(f"Failed to write history {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Could not remove temporary file {tmp_name}")

    logger.debug(f"Wrote history {path} ({len(snapshot.files)} files)")
