"""Data models for time resolution."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class SunEvent(str, Enum):
    """Symbolic anchors a start time can be given as."""

    SUNRISE = "SUNRISE"
    SUNSET = "SUNSET"

    @classmethod
    def parse(cls, value: str) -> "SunEvent | None":
        """Return the matching event (case-insensitive) or None."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class Location(BaseModel):
    """A resolved geographic coordinate."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    name: str


class SunTimes(BaseModel):
    """Sunrise and sunset for one day, in local time."""

    model_config = ConfigDict(frozen=True)

    sunrise: datetime
    sunset: datetime

    def get(self, event: SunEvent) -> datetime:
        """Return the timestamp of the given event."""
        return self.sunrise if event is SunEvent.SUNRISE else self.sunset


class ResolvedTime(BaseModel):
    """A concrete local timestamp.

    ``location_name`` is set when the timestamp was derived from a sun event.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    event: SunEvent | None = None
    offset_minutes: int = 0
    location_name: str | None = None

    @property
    def from_sun_event(self) -> bool:
        return self.event is not None


class ScheduleWindow(BaseModel):
    """Start and end of a scheduled broadcast.

    The end is always anchored to sunset.
    """

    model_config = ConfigDict(frozen=True)

    start: ResolvedTime
    end: ResolvedTime
    location_name: str
    sun_times: SunTimes
