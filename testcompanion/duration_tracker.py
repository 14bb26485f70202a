"""DurationTracker - active-time accounting for a testing session."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum

from .formatting import DurationCategory, duration_category, format_duration
from .scheduler import Clock

logger = logging.getLogger(__name__)


class TrackerState(Enum):
    """Lifecycle states for duration tracking."""

    ACTIVE = "active"        # App focused, time accumulates
    INACTIVE = "inactive"    # App lost focus, time paused
    READ_ONLY = "read_only"  # Viewing an opened report, time frozen


class DurationTracker:
    """
    Accumulate active elapsed time across focus and read-only changes.

    Valid transitions:
    - ACTIVE → INACTIVE (focus lost)
    - INACTIVE → ACTIVE (focus gained)
    - ACTIVE | INACTIVE → READ_ONLY (report opened)
    - READ_ONLY → ACTIVE (editing re-enabled)

    Accumulated time only grows while ACTIVE and is never reset by a
    transition. Invalid transitions are ignored.
    """

    VALID_TRANSITIONS: dict[TrackerState, set[TrackerState]] = {
        TrackerState.ACTIVE: {TrackerState.INACTIVE, TrackerState.READ_ONLY},
        TrackerState.INACTIVE: {TrackerState.ACTIVE, TrackerState.READ_ONLY},
        TrackerState.READ_ONLY: {TrackerState.ACTIVE},
    }

    def __init__(self, clock: Clock, accumulated: timedelta = timedelta(0)):
        self._clock = clock
        self._accumulated = accumulated
        self._state = TrackerState.ACTIVE
        self._last_active: datetime = clock.now()

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TrackerState.ACTIVE

    @property
    def accumulated(self) -> timedelta:
        """Time accumulated up to the last tick or transition."""
        return self._accumulated

    @property
    def last_active(self) -> datetime:
        return self._last_active

    @property
    def display(self) -> str:
        return format_duration(self._accumulated)

    @property
    def category(self) -> DurationCategory:
        return duration_category(self._accumulated)

    def can_transition(self, to_state: TrackerState) -> bool:
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def tick(self) -> timedelta:
        """Fold elapsed wall time into the total if active."""
        if self.is_active:
            now = self._clock.now()
            if now > self._last_active:
                self._accumulated += now - self._last_active
            self._last_active = now
        return self._accumulated

    def deactivate(self) -> bool:
        """Focus lost: flush elapsed time and pause."""
        if not self.can_transition(TrackerState.INACTIVE):
            return False
        self.tick()
        self._state = TrackerState.INACTIVE
        return True

    def activate(self) -> bool:
        """Focus gained: resume from now."""
        if not self.can_transition(TrackerState.ACTIVE) or self._state is TrackerState.READ_ONLY:
            return False
        self._resume()
        return True

    def enter_read_only(self) -> bool:
        """Freeze the total while a report is viewed."""
        if not self.can_transition(TrackerState.READ_ONLY):
            return False
        self.tick()
        self._state = TrackerState.READ_ONLY
        return True

    def enable_editing(self) -> bool:
        """Leave read-only mode; the frozen total carries over."""
        if self._state is not TrackerState.READ_ONLY:
            return False
        self._resume()
        return True

    def _resume(self) -> None:
        self._state = TrackerState.ACTIVE
        self._last_active = self._clock.now()

    def reset(self, accumulated: timedelta = timedelta(0)) -> None:
        """Start over from ``accumulated`` in the ACTIVE state."""
        self._accumulated = accumulated
        self._resume()
        logger.debug(f"Duration tracker reset to {format_duration(accumulated)}")

    def load(self, accumulated: timedelta) -> None:
        """Replace the total without changing state."""
        self._accumulated = accumulated
        self._last_active = self._clock.now()


__all__ = ["DurationTracker", "TrackerState"]
