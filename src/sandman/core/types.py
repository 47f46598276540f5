"""Shared types for Sandman.

This module defines enums used by the gatherer and the CLI.
"""

from __future__ import annotations

from enum import Enum


class GathererState(str, Enum):
    """Lifecycle state of a backup target's gatherer.

    A gatherer moves from IDLE through the start/interval waits into the
    cycle states (SCANNING to CLEANING_UP), then either back to
    WAITING_FOR_INTERVAL or to TERMINATED.
    """

    IDLE = "idle"
    WAITING_FOR_START = "waiting_for_start"
    WAITING_FOR_INTERVAL = "waiting_for_interval"
    SCANNING = "scanning"
    DIFFING = "diffing"
    UPLOADING = "uploading"
    PERSISTING = "persisting"
    CLEANING_UP = "cleaning_up"
    TERMINATED = "terminated"

    @property
    def in_cycle(self) -> bool:
        """Check if this state is part of a running backup cycle."""
        return self in _CYCLE_STATES


_CYCLE_STATES = frozenset(
    {
        GathererState.SCANNING,
        GathererState.DIFFING,
        GathererState.UPLOADING,
        GathererState.PERSISTING,
        GathererState.CLEANING_UP,
    }
)
