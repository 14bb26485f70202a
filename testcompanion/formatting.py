"""Formatting helpers for durations and timestamps shown in reports."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

SMALL_LIMIT = timedelta(hours=1)
MEDIUM_LIMIT = timedelta(hours=4)

_DURATION_PATTERN = re.compile(
    r"^\s*(?:(?P<hours>\d+)h)?\s*(?:(?P<minutes>\d+)m)?\s*(?:(?P<seconds>\d+)s)?\s*$"
)


class DurationCategory(str, Enum):
    """Session length bucket."""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LONG = "LONG"


def duration_category(duration: timedelta) -> DurationCategory:
    """Bucket a duration. Boundary values fall into the lower category."""
    if duration <= SMALL_LIMIT:
        return DurationCategory.SMALL
    if duration <= MEDIUM_LIMIT:
        return DurationCategory.MEDIUM
    return DurationCategory.LONG


def format_duration(duration: timedelta) -> str:
    """
    Format a duration as ``"1h 23m 45s"``, ``"5m 30s"`` or ``"12s"``.

    Components are whole numbers without zero padding; sub-second time is
    dropped.
    """
    total = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours >= 1:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes >= 1:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def parse_duration(formatted: str) -> timedelta:
    """
    Parse the output of ``format_duration`` back into a timedelta.

    Matches optional ``h``, ``m`` and ``s`` tokens in that order. Absent
    tokens count as zero. Unrecognised text parses as zero.
    """
    if not formatted or not formatted.strip():
        return timedelta(0)

    match = _DURATION_PATTERN.match(formatted)
    if match is None:
        logger.warning(f"Unrecognised duration string: {formatted!r}")
        return timedelta(0)

    return timedelta(
        hours=int(match.group("hours") or 0),
        minutes=int(match.group("minutes") or 0),
        seconds=int(match.group("seconds") or 0),
    )


def format_utc_offset(offset: timedelta | None) -> str:
    """Whole-hour offset label: ``UTC``, ``UTC+2`` or ``UTC-5``."""
    if offset is None:
        return "UTC"
    hours = int(offset.total_seconds() / 3600)
    if hours == 0:
        return "UTC"
    if hours > 0:
        return f"UTC+{hours}"
    return f"UTC{hours}"


def format_start_time(local_now: datetime) -> str:
    """Format a local time as ``"19/10/2026 02:05 PM UTC+2"``."""
    return f"{local_now.strftime('%d/%m/%Y %I:%M %p')} {format_utc_offset(local_now.utcoffset())}"


def format_report_timestamp(moment: datetime) -> str:
    """Format a moment as ``"2026-10-19 12:00:00 UTC"``."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment.strftime('%Y-%m-%d %H:%M:%S')} UTC"


__all__ = [
    "DurationCategory",
    "duration_category",
    "format_duration",
    "format_report_timestamp",
    "format_start_time",
    "format_utc_offset",
    "parse_duration",
]
