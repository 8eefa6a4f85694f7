"""Exceptions raised while syncing the timetable."""

from __future__ import annotations


class TimetableError(RuntimeError):
    """Base class for every failure the sync reports to the user."""


class TransportError(TimetableError):
    """The API could not be reached or answered with a non-success status."""


class AuthError(TimetableError):
    """The handshake did not hand out the expected cookies."""


class SchemaError(TimetableError):
    """The payload does not look like the timetable we know how to read."""


class ConfigError(TimetableError):
    pass
