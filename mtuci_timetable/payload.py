"""Convert the raw ``api/web/get`` response into typed timetable models.

The API marks an empty slot with ``"--"`` in every field.  The sentinel is
turned into ``None`` (or an empty list) here so nothing downstream has to
know about it.
"""

from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Any, Dict, List, Optional, Tuple

from .errors import SchemaError
from .models import RawDayEntry, RawLesson, SubjectType

SENTINEL = "--"
TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() in ("", SENTINEL))


def _as_list(value: Any) -> List[str]:
    if _is_blank(value):
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    raise SchemaError(f"Expected a string or a list, got {value!r}")


def _parse_int(raw: Dict[str, Any], key: str) -> int:
    if key not in raw:
        raise SchemaError(f"Missing field {key!r}")
    value = raw[key]
    if isinstance(value, bool):
        raise SchemaError(f"Field {key!r} is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise SchemaError(f"Field {key!r} is not an integer: {value!r}")


def _parse_time(value: Any) -> Optional[time]:
    if _is_blank(value):
        return None
    if not isinstance(value, str):
        raise SchemaError(f"Expected a HH:MM time, got {value!r}")
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise SchemaError(f"Expected a HH:MM time, got {value!r}")


def _parse_type(value: Any) -> SubjectType | None:
    if _is_blank(value):
        return None
    try:
        return SubjectType(int(value))
    except (TypeError, ValueError):
        logging.debug("Unknown subject type %r", value)
        return None


def parse_lesson(raw: Dict[str, Any], number: int) -> RawLesson:
    if not isinstance(raw, dict):
        raise SchemaError(f"Lesson {number} is not an object: {raw!r}")
    for key in ("time_start", "time_end"):
        if key not in raw:
            raise SchemaError(f"Lesson {number} has no {key!r}")

    audience = _as_list(raw.get("audience"))
    # An empty slot only marks its first audience entry.
    if audience and _is_blank(audience[0]):
        audience = []

    discipline = [d for d in _as_list(raw.get("discipline")) if not _is_blank(d)]
    return RawLesson(
        number=number,
        time_start=_parse_time(raw["time_start"]),
        time_end=_parse_time(raw["time_end"]),
        audience=audience,
        discipline=discipline[0] if discipline else None,
        teachers=[t for t in _as_list(raw.get("teacher")) if not _is_blank(t)],
        type=_parse_type(raw.get("type")),
    )


def parse_day(raw: Dict[str, Any]) -> RawDayEntry:
    if not isinstance(raw, dict):
        raise SchemaError(f"Timetable entry is not an object: {raw!r}")
    day = _parse_int(raw, "day")
    parity = _parse_int(raw, "parity")
    if not 1 <= day <= 7:
        raise SchemaError(f"Day of week out of range: {day}")
    if parity not in (1, 2):
        raise SchemaError(f"Week parity out of range: {parity}")

    raw_lessons = raw.get("lessons")
    if raw_lessons is None:
        raise SchemaError(f"Missing field 'lessons' for day {day}")
    if isinstance(raw_lessons, dict):
        items = []
        for key, value in raw_lessons.items():
            try:
                items.append((int(key), value))
            except ValueError:
                raise SchemaError(f"Lesson slot is not a number: {key!r}") from None
    elif isinstance(raw_lessons, list):
        items = [
            (_parse_int(value, "number") if isinstance(value, dict) and "number" in value else i + 1, value)
            for i, value in enumerate(raw_lessons)
        ]
    else:
        raise SchemaError(f"Lessons for day {day} are not a mapping: {raw_lessons!r}")

    lessons = {number: parse_lesson(value, number) for number, value in items}
    return RawDayEntry(day=day, parity=parity, lessons=lessons)


def parse_payload(data: Any) -> Tuple[List[RawDayEntry], int]:
    """Return the timetable and the parity flag of the current week."""

    try:
        content = data["content"]
        raw_timetable = content["timetable"]["content"]["timetable"]
        raw_parity = content["parity"]
    except (KeyError, TypeError) as exc:
        raise SchemaError(f"Unexpected payload layout: missing {exc}") from exc

    if isinstance(raw_parity, bool) or raw_parity not in (1, 2):
        raise SchemaError(f"Current week parity out of range: {raw_parity!r}")
    if not isinstance(raw_timetable, list):
        raise SchemaError("Timetable is not a list")

    timetable = [parse_day(entry) for entry in raw_timetable]
    logging.debug("Parsed %d timetable entries, parity %s", len(timetable), raw_parity)
    return timetable, raw_parity
