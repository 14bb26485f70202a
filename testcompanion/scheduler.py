"""
Single-threaded timer scheduler.

Timers run on one logical thread. ``Scheduler.advance`` drives them from a
``ManualClock`` in tests; ``Scheduler.run`` drives them from real time on
an asyncio loop.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""
        ...

    def local_now(self) -> datetime:
        """Current time as an aware local datetime."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def local_now(self) -> datetime:
        return datetime.now().astimezone()


class ManualClock:
    """Virtual clock that only moves when told to."""

    def __init__(self, start: datetime | None = None, utc_offset: timedelta = timedelta(0)):
        self._now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self._tz = timezone(utc_offset)

    def now(self) -> datetime:
        return self._now

    def local_now(self) -> datetime:
        return self._now.astimezone(self._tz)

    def set(self, moment: datetime) -> None:
        self._now = moment

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


class Timer:
    """
    A one-shot or repeating timer owned by a Scheduler.

    ``start`` on a running timer restarts its countdown, which is what makes
    a one-shot timer act as a debounce.
    """

    def __init__(
        self,
        scheduler: "Scheduler",
        interval: float,
        callback: Callable[[], None],
        repeat: bool = True,
    ):
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        self._scheduler = scheduler
        self.interval = timedelta(seconds=interval)
        self.callback = callback
        self.repeat = repeat
        self.due: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.due is not None

    def start(self) -> None:
        self.due = self._scheduler.clock.now() + self.interval

    def stop(self) -> None:
        self.due = None

    def _fire(self) -> None:
        if self.repeat and self.due is not None:
            self.due += self.interval
        else:
            self.due = None
        self.callback()


class Scheduler:
    """Owns timers and fires them in due-time order."""

    def __init__(self, clock: Clock):
        self.clock = clock
        self._timers: list[Timer] = []

    def create_timer(self, interval: float, callback: Callable[[], None], repeat: bool = True) -> Timer:
        """Create a stopped timer."""
        timer = Timer(self, interval, callback, repeat=repeat)
        self._timers.append(timer)
        return timer

    def _next_due(self, limit: datetime) -> Timer | None:
        due = [t for t in self._timers if t.due is not None and t.due <= limit]
        if not due:
            return None
        return min(due, key=lambda t: t.due)

    def run_pending(self) -> int:
        """
        Fire every timer due at the current clock time.

        Returns:
            Number of callbacks fired
        """
        fired = 0
        now = self.clock.now()
        while (timer := self._next_due(now)) is not None:
            timer._fire()
            fired += 1
        return fired

    def advance(self, seconds: float) -> int:
        """
        Move a ManualClock forward, firing timers at their due times.

        Returns:
            Number of callbacks fired
        """
        if not isinstance(self.clock, ManualClock):
            raise TypeError("advance() requires a ManualClock")

        target = self.clock.now() + timedelta(seconds=seconds)
        fired = 0
        while (timer := self._next_due(target)) is not None:
            self.clock.set(max(timer.due, self.clock.now()))
            timer._fire()
            fired += 1
        self.clock.set(target)
        return fired

    async def run(self, stop: asyncio.Event, poll_interval: float = 0.1) -> None:
        """Fire timers against real time until ``stop`` is set."""
        logger.debug("Scheduler loop started")
        while not stop.is_set():
            self.run_pending()
            try:
                await asyncio.wait_for(stop.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                pass
        logger.debug("Scheduler loop stopped")


__all__ = ["Clock", "ManualClock", "Scheduler", "SystemClock", "Timer"]
