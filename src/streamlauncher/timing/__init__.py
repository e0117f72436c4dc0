"""Time resolution: explicit times, sunrise and sunset."""

from streamlauncher.timing.geo import Geocoder, SunTimesProvider
from streamlauncher.timing.models import (
    Location,
    ResolvedTime,
    ScheduleWindow,
    SunEvent,
    SunTimes,
)
from streamlauncher.timing.resolver import TimeResolver, is_sun_event, parse_local_time

__all__ = [
    "Geocoder",
    "SunTimesProvider",
    "Location",
    "ResolvedTime",
    "ScheduleWindow",
    "SunEvent",
    "SunTimes",
    "TimeResolver",
    "is_sun_event",
    "parse_local_time",
]
