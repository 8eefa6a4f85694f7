"""Data models for timetable entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional


class SubjectType(IntEnum):
    LECTURE = 1
    PRACTICE = 2
    LAB = 3


class Building(Enum):
    OP = "ОП"
    A = "А"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class RawLesson:
    number: int
    time_start: Optional[time] = None
    time_end: Optional[time] = None
    audience: List[str] = field(default_factory=list)
    discipline: str | None = None
    teachers: List[str] = field(default_factory=list)
    type: SubjectType | None = None

    @property
    def room(self) -> str | None:
        return self.audience[0] if self.audience else None


@dataclass
class RawDayEntry:
    day: int  # 1 = Monday
    parity: int  # 1 = odd week, 2 = even week
    lessons: Dict[int, RawLesson] = field(default_factory=dict)

    def ordered_lessons(self) -> Iterator[RawLesson]:
        for number in sorted(self.lessons):
            yield self.lessons[number]


@dataclass
class CompactEntry:
    day: int
    parity: int
    time_start: time
    time_end: time
    building: Building


@dataclass
class ResolvedEntry:
    day: int
    parity: int
    week: int  # effective parity after the current-week flip
    time_start: time
    time_end: time
    building: Building
    date: date


@dataclass
class CommuteWindow:
    leg: int  # 1 = to campus, 2 = back home
    start: time
    end: time
