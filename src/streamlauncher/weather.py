"""Weather overlay text for OBS.

Fetches the day's weather-station log, takes its most recent record and
renders two short lines for OBS text sources:

- wind: "<speed> mph, <gust> mph, <cardinal>"
- date/time: "YYYY/MM/DD <time>"

Records are CSV lines: time,date,wind_speed,wind_gust,wind_dir,...
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime, time
from pathlib import Path

import httpx
from pydantic import BaseModel

from streamlauncher.config.schema import WeatherConfig
from streamlauncher.utils.datetime import now_local
from streamlauncher.utils.errors import WeatherDataError

logger = logging.getLogger(__name__)

CARDINAL_POINTS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)

MISSING = "N/A"
OFFLINE_WIND_TEXT = "-- mph, -- mph, --"


def degrees_to_cardinal(degrees: object) -> str:
    """Convert a wind direction in degrees to one of 16 compass points.

    Each point covers 22.5 degrees centred on its bearing, so 0 and 360
    both map to "N". Anything that is not a finite number gives "N/A".
    """
    try:
        value = float(str(degrees).strip())
    except ValueError:
        return MISSING
    if not math.isfinite(value):
        return MISSING
    index = math.floor((value % 360 + 11.25) / 22.5) % 16
    return CARDINAL_POINTS[index]


def _strip_leading_zero(value: str) -> str:
    return value[1:] if value.startswith("0") and len(value) > 1 else value


class WeatherReading(BaseModel):
    """One weather-station record."""

    time: str = MISSING
    date: str = MISSING
    wind_speed: str = MISSING
    wind_gust: str = MISSING
    wind_direction: str = MISSING

    @classmethod
    def from_log(cls, text: str) -> "WeatherReading":
        """Parse the last non-empty line of a station log.

        Raises:
            WeatherDataError: If the log holds no records
        """
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            raise WeatherDataError("Weather log is empty")

        fields = [field.strip() for field in lines[-1].split(",") if field.strip()]
        names = ["time", "date", "wind_speed", "wind_gust", "wind_direction"]
        return cls(**dict(zip(names, fields)))

    @property
    def cardinal(self) -> str:
        return degrees_to_cardinal(self.wind_direction)

    def wind_text(self) -> str:
        speed = _strip_leading_zero(self.wind_speed)
        gust = _strip_leading_zero(self.wind_gust)
        return f"{speed} mph, {gust} mph, {self.cardinal}"

    def datetime_text(self) -> str:
        """Render "YYYY/MM/DD <time>" from the record's M/D/YYYY date."""
        try:
            month, day, year = (int(part) for part in self.date.split("/"))
        except ValueError:
            return f"{self.date} {self.time}"
        return f"{year}/{month:02d}/{day:02d} {self.time}"


def _parse_clock(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def is_offline(now: datetime, begin_at: str, end_at: str) -> bool:
    """True outside the station's daily reporting window (inclusive bounds)."""
    current = now.time().replace(second=0, microsecond=0)
    return current < _parse_clock(begin_at) or current > _parse_clock(end_at)


class WeatherOverlay:
    """Fetches the station log and renders overlay text."""

    def __init__(
        self,
        config: WeatherConfig | None = None,
        client: httpx.Client | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.config = config or WeatherConfig()
        self._client = client
        self._clock = clock

    def url_for(self, day: datetime) -> str:
        return f"{self.config.base_url}{day:%Y%m%d}{self.config.url_suffix}"

    def fetch(self) -> WeatherReading:
        """Fetch today's log and parse its latest record.

        Raises:
            WeatherDataError: If the log cannot be fetched or holds no records
        """
        url = self.url_for(self._clock())
        logger.debug(f"Fetching weather data from {url}")
        try:
            if self._client is not None:
                response = self._client.get(url)
            else:
                with httpx.Client(timeout=10.0) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise WeatherDataError(f"Could not fetch data from {url}: {e}") from e
        return WeatherReading.from_log(response.text)

    def render(self) -> tuple[str, str]:
        """Return (wind text, date/time text) for the current moment.

        Outside the reporting window the station is shown as offline and
        nothing is fetched.
        """
        now = self._clock()
        if is_offline(now, self.config.begin_at, self.config.end_at):
            return OFFLINE_WIND_TEXT, f"{now:%Y/%m/%d %H:%M} (offline)"

        reading = self.fetch()
        return reading.wind_text(), reading.datetime_text()


def write_text(path: Path, text: str) -> None:
    """Write overlay text for an OBS "read from file" text source."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
