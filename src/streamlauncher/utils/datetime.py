"""Datetime helpers.

All timestamps handled by streamlauncher are timezone-aware and expressed in
the local timezone of the running process.
"""

from datetime import datetime, timedelta

LOCAL_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
CLOCK_FORMAT = "%H:%M:%S"
SHORT_CLOCK_FORMAT = "%H:%M"


def now_local() -> datetime:
    """Return the current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def to_local(value: datetime) -> datetime:
    """Convert an aware datetime to local time.

    Naive datetimes are taken to already be local wall-clock time.
    """
    return value.astimezone()


def add_minutes(value: datetime, minutes: int) -> datetime:
    """Shift a timestamp by a signed number of minutes."""
    return value + timedelta(minutes=minutes)
