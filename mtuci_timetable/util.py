"""Utility helpers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

DEFAULT_TZ = "Europe/Moscow"


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def parse_timezone(tz: str) -> ZoneInfo:
    return ZoneInfo(tz)


def today(tz: ZoneInfo | None = None) -> date:
    return datetime.now(tz).date()
