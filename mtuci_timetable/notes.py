"""Markdown notes in the vault, one per class day and commute leg."""

from __future__ import annotations

import logging
from datetime import date, time
from pathlib import Path
from typing import Iterable, List

from .models import CommuteWindow, ResolvedEntry
from .resolver import window_dates

CLASS_FOLDER = "учёба"
COMMUTE_FOLDER = "дорога"
COMMUTE_TITLE = "Дорога"


def class_title(entry: ResolvedEntry) -> str:
    return f"Учёба ({entry.building.label})"


def render_note(title: str, start: time, end: time, day: date) -> str:
    lines = [
        "---",
        f'title: "{title}"',
        "allDay: false",
        f"startTime: {start:%H:%M}",
        f"endTime: {end:%H:%M}",
        f"date: {day.isoformat()}",
        "completed: null",
        "---",
    ]
    return "\n".join(lines)


class NoteWriter:
    def __init__(self, vault: Path, path: str) -> None:
        self.vault = vault
        self.base = vault / path if path else vault

    def class_note_path(self, day: date) -> Path:
        return self.base / CLASS_FOLDER / f"{day.isoformat()}.md"

    def commute_note_path(self, day: date, leg: int) -> Path:
        return self.base / COMMUTE_FOLDER / f"{day.isoformat()}-{leg}.md"

    def note_paths(self, day: date) -> List[Path]:
        return [
            self.class_note_path(day),
            self.commute_note_path(day, 1),
            self.commute_note_path(day, 2),
        ]

    def clear(self, anchor: date) -> List[Path]:
        """Delete every note of the two weeks starting at ``anchor``."""

        deleted: List[Path] = []
        for day in window_dates(anchor):
            for path in self.note_paths(day):
                if path.exists():
                    path.unlink()
                    deleted.append(path)
        logging.info("Deleted %d old notes", len(deleted))
        return deleted

    def _write(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logging.debug("Wrote %s", path)
        return path

    def write_class_note(self, entry: ResolvedEntry) -> Path:
        text = render_note(class_title(entry), entry.time_start, entry.time_end, entry.date)
        return self._write(self.class_note_path(entry.date), text)

    def write_commute_notes(
        self, entry: ResolvedEntry, windows: Iterable[CommuteWindow]
    ) -> List[Path]:
        return [
            self._write(
                self.commute_note_path(entry.date, w.leg),
                render_note(COMMUTE_TITLE, w.start, w.end, entry.date),
            )
            for w in windows
        ]
