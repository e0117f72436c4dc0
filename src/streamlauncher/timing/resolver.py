"""Resolve a time specification to a concrete local timestamp.

A specification is either an explicit local date-time
(``YYYY-MM-DDTHH:MM:SS``) or one of the symbolic sun events ``SUNRISE`` and
``SUNSET`` (case-insensitive). Sun events are looked up for a location given
by name, or for the caller's IP location, on the current local date, and
shifted by a signed number of minutes.
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

from streamlauncher.timing.geo import Geocoder, SunTimesProvider
from streamlauncher.timing.models import (
    Location,
    ResolvedTime,
    ScheduleWindow,
    SunEvent,
    SunTimes,
)
from streamlauncher.utils.datetime import LOCAL_TIME_FORMAT, add_minutes, now_local
from streamlauncher.utils.errors import InvalidTimeFormatError

logger = logging.getLogger(__name__)

_EXPLICIT_TIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)


def is_sun_event(value: str) -> bool:
    """Whether ``value`` names a sun event rather than an explicit time."""
    return SunEvent.parse(value) is not None


def parse_local_time(value: str) -> datetime:
    """Parse ``YYYY-MM-DDTHH:MM:SS`` as local wall-clock time.

    Args:
        value: Time string

    Returns:
        Aware datetime in the local timezone with the same wall-clock fields

    Raises:
        InvalidTimeFormatError: If the string does not match the format exactly
    """
    if not _EXPLICIT_TIME.fullmatch(value):
        raise InvalidTimeFormatError(
            f"Invalid time format '{value}'. Use 'SUNRISE', 'SUNSET', or 'YYYY-MM-DDTHH:MM:SS'"
        )
    try:
        naive = datetime.strptime(value, LOCAL_TIME_FORMAT)
    except ValueError as e:
        raise InvalidTimeFormatError(f"Invalid time '{value}': {e}") from e
    return naive.astimezone()


class TimeResolver:
    """Turns time specifications into local timestamps.

    Lookups are cached per location for the lifetime of the resolver, so
    resolving the start and end of one schedule costs a single round of
    external calls.
    """

    def __init__(
        self,
        geocoder: Geocoder | None = None,
        sun_provider: SunTimesProvider | None = None,
        today: Callable[[], date] | None = None,
    ):
        """Initialize the resolver.

        Args:
            geocoder: Location lookup (default: new Geocoder)
            sun_provider: Sun-times lookup (default: new SunTimesProvider)
            today: Returns the calendar date to look sun times up for
        """
        self.geocoder = geocoder or Geocoder()
        self.sun_provider = sun_provider or SunTimesProvider()
        self._today = today or (lambda: now_local().date())
        self._cache: dict[str | None, tuple[Location, SunTimes]] = {}

    def lookup(self, location_hint: str | None = None) -> tuple[Location, SunTimes]:
        """Resolve a location and fetch today's sun times for it.

        Raises:
            LocationUnresolvedError: If the location lookup fails
            SunDataUnavailableError: If the sun-times lookup fails
        """
        key = location_hint or None
        if key not in self._cache:
            location = self.geocoder.locate(key)
            sun_times = self.sun_provider.get(
                location.latitude, location.longitude, self._today()
            )
            self._cache[key] = (location, sun_times)
        return self._cache[key]

    def resolve(
        self,
        spec: str,
        location_hint: str | None = None,
        offset_minutes: int = 0,
    ) -> ResolvedTime:
        """Resolve a single time specification.

        The offset applies to sun events only; explicit times are taken as
        given.

        Args:
            spec: ``SUNRISE``, ``SUNSET`` or ``YYYY-MM-DDTHH:MM:SS``
            location_hint: Place name for sun events (default: IP location)
            offset_minutes: Signed minutes added to a sun event

        Returns:
            ResolvedTime in local time

        Raises:
            InvalidTimeFormatError: Malformed explicit time (no lookups made)
            LocationUnresolvedError: Location lookup failed
            SunDataUnavailableError: Sun-times lookup failed
        """
        event = SunEvent.parse(spec)
        if event is None:
            return ResolvedTime(timestamp=parse_local_time(spec))

        location, sun_times = self.lookup(location_hint)
        return ResolvedTime(
            timestamp=add_minutes(sun_times.get(event), offset_minutes),
            event=event,
            offset_minutes=offset_minutes,
            location_name=location.name,
        )

    def resolve_window(
        self,
        start_spec: str,
        location_hint: str | None = None,
        start_offset: int = 0,
        end_offset: int = 0,
    ) -> ScheduleWindow:
        """Resolve the start and end of a broadcast.

        The start follows ``start_spec``; the end is always sunset plus
        ``end_offset``.
        """
        # Parse explicit times before any external call
        explicit = None if is_sun_event(start_spec) else parse_local_time(start_spec)

        location, sun_times = self.lookup(location_hint)

        if explicit is not None:
            start = ResolvedTime(timestamp=explicit)
        else:
            start = self.resolve(start_spec, location_hint, start_offset)
        end = self.resolve(SunEvent.SUNSET.value, location_hint, end_offset)

        if end.timestamp <= start.timestamp:
            logger.warning(
                f"Stream end {end.timestamp:%Y-%m-%d %H:%M:%S} is not after "
                f"start {start.timestamp:%Y-%m-%d %H:%M:%S}"
            )

        return ScheduleWindow(
            start=start,
            end=end,
            location_name=location.name,
            sun_times=sun_times,
        )
