"""Per-target backup scheduling.

This module provides:
- Gatherer: Runs backup cycles for one target in its own thread
- seconds_until_due: Remaining interval time measured from a baseline
- run_gatherers: Starts every gatherer and waits for all of them

Architecture:
    Gatherer ─► build_snapshot ─► diff/merge ─► upload ─► save ─► cleanup

    Each cycle runs scan, diff, upload, persist and cleanup in that order
    and always runs to completion. Cancellation is a threading.Event shared
    by every gatherer; it is checked between cycles and interrupts the
    start-time and interval waits.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from sandman.backup.cleanup import cleanup_uploaded
from sandman.backup.diff import diff_snapshots, merge_snapshots
from sandman.backup.ignore import IgnoreRules
from sandman.backup.snapshot import build_snapshot
from sandman.backup.state import load_snapshot, save_snapshot
from sandman.backup.types import (
    CycleResult,
    HashSnapshot,
    PersistenceError,
    UploadedFile,
    now_millis,
)
from sandman.backup.upload import upload_change_set
from sandman.core.paths import history_file_for
from sandman.core.types import GathererState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sandman.backup.storage import ObjectStore
    from sandman.core.config import BackupTarget

logger = logging.getLogger(__name__)

# Pause after every continuous-mode cycle, so interval = 0 never spins
CYCLE_PAUSE = 1.0  # seconds
JOIN_POLL_INTERVAL = 0.5  # seconds


def seconds_until_due(baseline: HashSnapshot, interval: int, now_ms: int) -> float:
    """Compute how long to wait before the next scan.

    Args:
        baseline: Prior snapshot; its timestamp is the last scan time.
        interval: Minimum seconds between scans.
        now_ms: Current time in milliseconds since the epoch.

    Returns:
        Seconds left in the interval, or 0.0 if it has elapsed.
    """
    elapsed_ms = now_ms - baseline.timestamp
    remaining_ms = interval * 1000 - elapsed_ms
    return max(remaining_ms, 0) / 1000


class Gatherer:
    """Backs up one target on its own schedule.

    The gatherer owns the target's in-memory baseline: it is loaded from the
    sidecar on first use and replaced by the merged snapshot each time the
    sidecar is written.

    Usage:
        cancel = threading.Event()
        gatherer = Gatherer(target, store, cancel, global_ignore_file)
        gatherer.start()
        ...
        cancel.set()
        gatherer.join()
    """

    def __init__(
        self,
        target: BackupTarget,
        store: ObjectStore,
        cancel_event: threading.Event | None = None,
        global_ignore_file: Path | None = None,
    ) -> None:
        """Initialize the gatherer.

        Args:
            target: Target configuration.
            store: Remote object store for uploads.
            cancel_event: Shared cancellation signal.
            global_ignore_file: Ignore file shared by every target.
        """
        self._target = target
        self._store = store
        self._cancel = cancel_event if cancel_event is not None else threading.Event()
        self._global_ignore_file = global_ignore_file
        self._history_path = history_file_for(target.directory)

        self._baseline: HashSnapshot | None = None
        self._state = GathererState.IDLE
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._cycles = 0
        self._last_result: CycleResult | None = None

    @property
    def target(self) -> BackupTarget:
        """Get the target configuration."""
        return self._target

    @property
    def state(self) -> GathererState:
        """Get the current state."""
        with self._lock:
            return self._state

    @property
    def cycles(self) -> int:
        """Get the number of completed cycles."""
        return self._cycles

    @property
    def last_result(self) -> CycleResult | None:
        """Get the result of the most recent completed cycle."""
        return self._last_result

    @property
    def baseline(self) -> HashSnapshot:
        """Get the in-memory baseline, loading it from the sidecar if needed."""
        if self._baseline is None:
            self._baseline = load_snapshot(self._history_path)
        return self._baseline

    def _set_state(self, state: GathererState) -> None:
        with self._lock:
            self._state = state
        logger.debug(f"[Gatherer - {self._target.name}] {state.value}")

    def _log(self, level: int, msg: str) -> None:
        logger.log(level, f"[Gatherer - {self._target.name}] {msg}")

    def _wait(self, seconds: float) -> bool:
        """Sleep unless cancelled.

        Returns:
            True if the sleep ran to the end, False if cancellation was requested.
        """
        if seconds <= 0:
            return not self._cancel.is_set()
        return not self._cancel.wait(timeout=seconds)

    def _wait_for_start(self) -> bool:
        remaining = self._target.start_time - time.time()
        if remaining <= 0:
            return not self._cancel.is_set()

        self._set_state(GathererState.WAITING_FOR_START)
        self._log(logging.INFO, f"Waiting {remaining:.0f}s for start time")
        return self._wait(remaining)

    def _wait_for_interval(self) -> bool:
        self._set_state(GathererState.WAITING_FOR_INTERVAL)
        remaining = seconds_until_due(self.baseline, self._target.interval, now_millis())
        if remaining > 0:
            self._log(logging.INFO, f"Not ready for backup, sleeping for {remaining:.1f}s...")
        return self._wait(remaining)

    def run_cycle(self) -> CycleResult:
        """Run one scan, diff, upload, persist and cleanup pass.

        The merged snapshot is computed before the upload and saved whatever
        the upload outcome, so a file whose upload failed is not retried
        until it changes again. If the save fails, the previous baseline is
        kept (with the new scan time) and the same files are seen as changed
        on the next cycle.

        Returns:
            CycleResult summarizing the pass.
        """
        target = self._target
        baseline = self.baseline
        self._log(logging.INFO, f"Ready for backup... of {target.directory}")

        self._set_state(GathererState.SCANNING)
        ignore = IgnoreRules.for_target(target.directory, self._global_ignore_file)
        current = build_snapshot(target.directory, ignore)

        self._set_state(GathererState.DIFFING)
        changes = diff_snapshots(baseline, current)
        merged = merge_snapshots(baseline, changes)
        self._log(
            logging.INFO,
            f"{len(changes.files)} changed of {len(current.files)} scanned files",
        )

        uploaded: list[UploadedFile] = []
        if changes.files:
            self._set_state(GathererState.UPLOADING)
            uploaded = upload_change_set(changes, target, self._store)

        self._set_state(GathererState.PERSISTING)
        persisted = True
        try:
            save_snapshot(merged, self._history_path)
            self._baseline = merged
        except PersistenceError as e:
            self._log(logging.ERROR, str(e))
            persisted = False
            self._baseline = HashSnapshot(files=dict(baseline.files), timestamp=changes.timestamp)

        deleted: list[str] = []
        if target.cleanable and uploaded:
            self._set_state(GathererState.CLEANING_UP)
            deleted = cleanup_uploaded(uploaded, target.name)

        self._cycles += 1
        self._last_result = CycleResult(
            scanned=len(current.files),
            changes=changes,
            uploaded=uploaded,
            deleted=deleted,
            persisted=persisted,
        )
        return self._last_result

    def _run_cycle_safely(self) -> None:
        """Run a cycle, logging any unexpected error.

        A failed cycle still counts as a scan for scheduling: the baseline
        keeps its files but takes the cycle start time, so the next attempt
        waits a full interval.
        """
        started = now_millis()
        try:
            self.run_cycle()
        except Exception:
            logger.exception(f"[Gatherer - {self._target.name}] Error during backup cycle")
            self._baseline = HashSnapshot(files=dict(self.baseline.files), timestamp=started)

    def run(self, oneshot: bool = False) -> None:
        """Run the gatherer in the calling thread.

        Args:
            oneshot: Run a single cycle immediately, ignoring the start time,
                the interval and the cancellation signal.
        """
        try:
            if oneshot:
                self._run_cycle_safely()
                return

            self._log(
                logging.INFO,
                f"Starting to watch for backup with {self._target.directory} "
                f"- every {self._target.interval}s",
            )
            if not self._wait_for_start():
                return

            while self._wait_for_interval():
                self._run_cycle_safely()
                if not self._wait(CYCLE_PAUSE):
                    break
        finally:
            self._set_state(GathererState.TERMINATED)
            self._log(logging.INFO, f"Stopped after {self._cycles} cycles")

    def start(self, oneshot: bool = False) -> None:
        """Start the gatherer in a background thread."""
        if self._thread and self._thread.is_alive():
            self._log(logging.WARNING, "Already running")
            return

        self._thread = threading.Thread(
            target=self.run,
            kwargs={"oneshot": oneshot},
            name=f"Gatherer-{self._target.name}",
            daemon=True,
        )
        self._thread.start()

    def is_alive(self) -> bool:
        """Check if the background thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)


def run_gatherers(gatherers: Iterable[Gatherer], oneshot: bool = False) -> None:
    """Start every gatherer and wait until all have terminated.

    Joins poll with a timeout so signal handlers in the main thread keep
    running while waiting.

    Args:
        gatherers: Gatherers to run concurrently.
        oneshot: Run a single cycle per gatherer.
    """
    started = list(gatherers)
    for gatherer in started:
        gatherer.start(oneshot=oneshot)

    for gatherer in started:
        while gatherer.is_alive():
            gatherer.join(timeout=JOIN_POLL_INTERVAL)
