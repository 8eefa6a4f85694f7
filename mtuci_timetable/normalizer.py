"""Reduce the verbose timetable to one compact entry per class day."""

from __future__ import annotations

from typing import Iterable, List

from .models import Building, CompactEntry, RawDayEntry, RawLesson

OP_MARKER = "ОП"


def classify_building(lessons: Iterable[RawLesson]) -> Building:
    """Classify by the first lesson that has a room; ``A`` when none has one."""

    for lesson in lessons:
        if lesson.room is not None:
            return Building.OP if OP_MARKER in lesson.room else Building.A
    return Building.A


def normalize(timetable: Iterable[RawDayEntry]) -> List[CompactEntry]:
    compact: List[CompactEntry] = []
    for entry in timetable:
        lessons = list(entry.ordered_lessons())
        starts = [l.time_start for l in lessons if l.time_start is not None]
        ends = [l.time_end for l in lessons if l.time_end is not None]
        if not starts or not ends:
            continue
        compact.append(
            CompactEntry(
                day=entry.day,
                parity=entry.parity,
                time_start=starts[0],
                time_end=ends[-1],
                building=classify_building(lessons),
            )
        )
    return compact
