"""Commute windows around each class day."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Tuple

from .config import CommuteConfig
from .errors import ConfigError
from .models import CommuteWindow, ResolvedEntry

_DURATION_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_duration(value: str) -> timedelta:
    """Parse ``HH:MM`` (or ``HH:MM:SS``); an empty value means no commute."""

    value = (value or "").strip()
    if not value:
        return timedelta(0)
    match = _DURATION_RE.match(value)
    if not match:
        raise ConfigError(f"Invalid duration {value!r}, expected HH:MM")
    hours, minutes, seconds = match.groups()
    if int(minutes) >= 60 or (seconds and int(seconds) >= 60):
        raise ConfigError(f"Invalid duration {value!r}, expected HH:MM")
    return timedelta(hours=int(hours), minutes=int(minutes), seconds=int(seconds or 0))


def commute_windows(
    entry: ResolvedEntry, config: CommuteConfig
) -> Tuple[CommuteWindow, CommuteWindow]:
    # Times past midnight wrap around the clock.
    times = config.for_building(entry.building)
    start = datetime.combine(entry.date, entry.time_start)
    end = datetime.combine(entry.date, entry.time_end)
    outbound = CommuteWindow(
        leg=1,
        start=(start - parse_duration(times.forwards)).time(),
        end=entry.time_start,
    )
    back = CommuteWindow(
        leg=2,
        start=entry.time_end,
        end=(end + parse_duration(times.backwards)).time(),
    )
    return outbound, back
