"""One sync cycle: fetch, normalize, resolve, then rewrite the notes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Tuple

from . import normalizer, payload, resolver
from .api import APIClient
from .commute import commute_windows
from .config import Settings
from .errors import TimetableError
from .models import CommuteWindow, ResolvedEntry
from .notes import NoteWriter

FAILURE_MESSAGE = (
    "Не удалось загрузить расписание. Проверьте подключение к интернету "
    "и правильность токена в настройках."
)
BUSY_MESSAGE = "Расписание уже обновляется."


@dataclass
class SyncResult:
    ok: bool
    message: str = ""
    entries: List[ResolvedEntry] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)


def _plan(
    settings: Settings, client: APIClient, anchor: date
) -> List[Tuple[ResolvedEntry, Tuple[CommuteWindow, ...]]]:
    timetable, parity = payload.parse_payload(client.fetch())
    compact = normalizer.normalize(timetable)
    logging.info("%d of %d timetable entries have classes", len(compact), len(timetable))
    entries = resolver.resolve(compact, anchor, parity == 2)
    plan = []
    for entry in entries:
        windows = commute_windows(entry, settings.commute) if settings.generate_commute else ()
        plan.append((entry, tuple(windows)))
    return plan


def sync_once(
    settings: Settings, client: APIClient, writer: NoteWriter, today: date
) -> SyncResult:
    """Run a full sync for the two weeks starting on this week's Monday.

    Fetch and payload errors leave the vault untouched and come back as a
    failed result; errors while touching the notes propagate.
    """

    anchor = resolver.anchor_monday(today)
    try:
        plan = _plan(settings, client, anchor)
    except TimetableError as exc:
        logging.error("Sync failed: %s", exc)
        return SyncResult(ok=False, message=FAILURE_MESSAGE)

    result = SyncResult(ok=True, entries=[entry for entry, _ in plan])
    result.deleted = writer.clear(anchor)
    for entry, windows in plan:
        result.written.append(writer.write_class_note(entry))
        result.written.extend(writer.write_commute_notes(entry, windows))
    result.message = f"Расписание обновлено: {len(plan)} дн."
    logging.info("Wrote %d notes", len(result.written))
    return result


class SyncRunner:
    """Refuses to start a sync while another one is still running."""

    def __init__(self, settings: Settings, client: APIClient, writer: NoteWriter) -> None:
        self.settings = settings
        self.client = client
        self.writer = writer
        self.running = False

    def run(self, today: date) -> SyncResult:
        if self.running:
            logging.warning("Sync already in progress")
            return SyncResult(ok=False, message=BUSY_MESSAGE)
        self.running = True
        try:
            return sync_once(self.settings, self.client, self.writer, today)
        finally:
            self.running = False
