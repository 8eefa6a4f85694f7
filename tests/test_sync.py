from datetime import date

from mtuci_timetable import sync
from mtuci_timetable.config import CommuteConfig, CommuteTime, Settings
from mtuci_timetable.errors import TransportError
from mtuci_timetable.notes import NoteWriter

TODAY = date(2024, 6, 5)
EMPTY = {"audience": ["--"], "time_start": "--", "time_end": "--"}


def make_day(day, parity, empty=False):
    if empty:
        lessons = {"1": EMPTY, "2": EMPTY}
    else:
        lessons = {
            "1": EMPTY,
            "2": {"audience": ["ОП-301"], "time_start": "10:40", "time_end": "12:15"},
            "3": {"audience": ["ОП-301"], "time_start": "12:45", "time_end": "14:20"},
        }
    return {"day": day, "parity": parity, "lessons": lessons}


def make_payload(current_parity=1):
    timetable = [
        make_day(day, parity, empty=(day == 3))
        for parity in (1, 2)
        for day in range(1, 6)
    ]
    return {
        "content": {
            "parity": current_parity,
            "timetable": {"content": {"timetable": timetable}},
        }
    }


class FakeClient:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.data


def make_settings(generate_commute=True):
    return Settings(
        api_key="key",
        generate_commute=generate_commute,
        path="cal",
        commute=CommuteConfig(OP=CommuteTime(forwards="00:45", backwards="01:00")),
    )


def test_two_week_sync_writes_class_and_commute_notes(tmp_path):
    writer = NoteWriter(tmp_path, "cal")
    result = sync.sync_once(make_settings(), FakeClient(make_payload()), writer, TODAY)

    assert result.ok
    assert len(result.entries) == 8
    class_notes = sorted((tmp_path / "cal" / "учёба").iterdir())
    commute_notes = sorted((tmp_path / "cal" / "дорога").iterdir())
    assert len(class_notes) == 8
    assert len(commute_notes) == 16
    assert len(result.written) == 24
    assert class_notes[0].name == "2024-06-03.md"
    assert not (tmp_path / "cal" / "учёба" / "2024-06-05.md").exists()

    outbound = (tmp_path / "cal" / "дорога" / "2024-06-03-1.md").read_text(encoding="utf-8")
    assert "startTime: 09:55" in outbound
    assert "endTime: 10:40" in outbound
    back = (tmp_path / "cal" / "дорога" / "2024-06-03-2.md").read_text(encoding="utf-8")
    assert "startTime: 14:20" in back
    assert "endTime: 15:20" in back


def test_nine_class_days_give_eighteen_commute_notes(tmp_path):
    data = make_payload()
    # Only the first week's Wednesday is empty; the extra Saturday is empty too.
    data["content"]["timetable"]["content"]["timetable"][7] = make_day(3, 2)
    data["content"]["timetable"]["content"]["timetable"].append(make_day(6, 2, empty=True))
    writer = NoteWriter(tmp_path, "cal")

    result = sync.sync_once(make_settings(), FakeClient(data), writer, TODAY)

    assert len(result.entries) == 9
    assert len(list((tmp_path / "cal" / "дорога").iterdir())) == 18


def test_current_even_week_swaps_weeks(tmp_path):
    data = make_payload(current_parity=2)
    data["content"]["timetable"]["content"]["timetable"] = [make_day(1, 2)]
    writer = NoteWriter(tmp_path, "cal")

    result = sync.sync_once(make_settings(False), FakeClient(data), writer, TODAY)

    [entry] = result.entries
    assert entry.date == date(2024, 6, 3)
    assert not (tmp_path / "cal" / "дорога").exists()


def test_resync_replaces_old_notes(tmp_path):
    writer = NoteWriter(tmp_path, "cal")
    stale = writer.class_note_path(date(2024, 6, 5))
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")

    result = sync.sync_once(make_settings(False), FakeClient(make_payload()), writer, TODAY)

    assert stale in result.deleted
    assert not stale.exists()


def test_fetch_failure_touches_nothing(tmp_path):
    writer = NoteWriter(tmp_path, "cal")
    kept = writer.class_note_path(date(2024, 6, 4))
    kept.parent.mkdir(parents=True)
    kept.write_text("old", encoding="utf-8")

    client = FakeClient(error=TransportError("boom"))
    result = sync.sync_once(make_settings(), client, writer, TODAY)

    assert not result.ok
    assert result.message == sync.FAILURE_MESSAGE
    assert kept.read_text(encoding="utf-8") == "old"


def test_schema_drift_reported_not_written(tmp_path):
    data = make_payload()
    data["content"]["timetable"]["content"]["timetable"][0]["day"] = 9
    writer = NoteWriter(tmp_path, "cal")

    result = sync.sync_once(make_settings(), FakeClient(data), writer, TODAY)

    assert not result.ok
    assert not (tmp_path / "cal").exists()


def test_runner_refuses_overlapping_sync(tmp_path):
    runner = sync.SyncRunner(make_settings(), FakeClient(make_payload()), NoteWriter(tmp_path, "cal"))
    runner.running = True
    result = runner.run(TODAY)
    assert not result.ok
    assert result.message == sync.BUSY_MESSAGE
    assert runner.client.calls == 0

    runner.running = False
    assert runner.run(TODAY).ok
    assert runner.running is False
