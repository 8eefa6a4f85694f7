from datetime import date, time, timedelta

import pytest

from mtuci_timetable.commute import commute_windows, parse_duration
from mtuci_timetable.config import CommuteConfig, CommuteTime
from mtuci_timetable.errors import ConfigError
from mtuci_timetable.models import Building, ResolvedEntry


def make_entry(start=time(9, 0), end=time(14, 30), building=Building.OP):
    return ResolvedEntry(
        day=1,
        parity=1,
        week=1,
        time_start=start,
        time_end=end,
        building=building,
        date=date(2024, 6, 3),
    )


CONFIG = CommuteConfig(
    OP=CommuteTime(forwards="00:45", backwards="01:10"),
    A=CommuteTime(forwards="1:20", backwards="00:30"),
)


def test_windows_for_op():
    outbound, back = commute_windows(make_entry(), CONFIG)
    assert (outbound.leg, outbound.start, outbound.end) == (1, time(8, 15), time(9, 0))
    assert (back.leg, back.start, back.end) == (2, time(14, 30), time(15, 40))


def test_windows_use_building_durations():
    outbound, back = commute_windows(make_entry(building=Building.A), CONFIG)
    assert outbound.start == time(7, 40)
    assert back.end == time(15, 0)


def test_unset_durations_give_empty_windows():
    outbound, back = commute_windows(make_entry(), CommuteConfig())
    assert outbound.start == outbound.end == time(9, 0)
    assert back.start == back.end == time(14, 30)


def test_window_wraps_past_midnight():
    config = CommuteConfig(OP=CommuteTime(forwards="01:00", backwards="01:00"))
    outbound, back = commute_windows(make_entry(time(0, 30), time(23, 30)), config)
    assert outbound.start == time(23, 30)
    assert back.end == time(0, 30)


def test_parse_duration():
    assert parse_duration("") == timedelta(0)
    assert parse_duration("00:45") == timedelta(minutes=45)
    assert parse_duration("1:05") == timedelta(hours=1, minutes=5)
    assert parse_duration("01:00:30") == timedelta(hours=1, seconds=30)


@pytest.mark.parametrize("value", ["45", "1:5", "00:75", "abc"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ConfigError):
        parse_duration(value)
