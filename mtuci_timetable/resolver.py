"""Map compact entries onto the dates of the current and the next week."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List

from .errors import SchemaError
from .models import CompactEntry, ResolvedEntry

WINDOW_DAYS = 14


def anchor_monday(today: date) -> date:
    """Monday of the week containing ``today``; weeks always start on Monday."""

    return today - timedelta(days=today.weekday())


def window_dates(anchor: date, days: int = WINDOW_DAYS) -> List[date]:
    return [anchor + timedelta(days=i) for i in range(days)]


def flip_parity(parity: int) -> int:
    if parity not in (1, 2):
        raise SchemaError(f"Week parity out of range: {parity}")
    return 2 if parity == 1 else 1


def day_offset(day: int, parity: int) -> int:
    if not 1 <= day <= 7:
        raise SchemaError(f"Day of week out of range: {day}")
    if parity not in (1, 2):
        raise SchemaError(f"Week parity out of range: {parity}")
    return (day - 1) + (parity - 1) * 7


def resolve(
    entries: Iterable[CompactEntry],
    anchor: date,
    current_week_is_parity2: bool,
) -> List[ResolvedEntry]:
    """Attach a calendar date to every entry.

    The API's parity flag describes the first week of the two-week view, so
    when it says the current week is parity 2 every entry's parity is
    swapped before the offset from ``anchor`` is computed.
    """

    resolved: List[ResolvedEntry] = []
    for entry in entries:
        week = flip_parity(entry.parity) if current_week_is_parity2 else entry.parity
        offset = day_offset(entry.day, week)
        resolved.append(
            ResolvedEntry(
                day=entry.day,
                parity=entry.parity,
                week=week,
                time_start=entry.time_start,
                time_end=entry.time_end,
                building=entry.building,
                date=anchor + timedelta(days=offset),
            )
        )
    return resolved
