"""Geolocation and sunrise/sunset lookups over HTTP.

- IP geolocation: ip-api.com
- Geocoding by name: OpenStreetMap Nominatim
- Sun times: sunrise-sunset.org
"""

import logging
from datetime import date, datetime
from typing import Any

import httpx

from streamlauncher.config.schema import GeoConfig
from streamlauncher.timing.models import Location, SunTimes
from streamlauncher.utils.datetime import to_local
from streamlauncher.utils.errors import LocationUnresolvedError, SunDataUnavailableError

logger = logging.getLogger(__name__)


class _HTTPService:
    """Shared GET-and-decode plumbing for the lookup services."""

    def __init__(self, config: GeoConfig | None = None, client: httpx.Client | None = None):
        self.config = config or GeoConfig()
        self._client = client

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        headers = {"User-Agent": self.config.user_agent}
        if self._client is not None:
            response = self._client.get(url, params=params, headers=headers)
        else:
            with httpx.Client(timeout=self.config.timeout_seconds) as client:
                response = client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()


class Geocoder(_HTTPService):
    """Resolves a place to coordinates."""

    def resolve_by_ip(self) -> Location:
        """Locate the caller from its network egress IP address.

        Returns:
            Location named "<city>, <region>"

        Raises:
            LocationUnresolvedError: If the lookup fails
        """
        try:
            data = self._get_json(self.config.ip_lookup_url)
        except (httpx.HTTPError, ValueError) as e:
            raise LocationUnresolvedError(f"Failed to get IP location: {e}") from e

        if not isinstance(data, dict) or data.get("status") != "success":
            raise LocationUnresolvedError("IP location lookup failed")

        try:
            location = Location(
                latitude=float(data["lat"]),
                longitude=float(data["lon"]),
                name=f"{data.get('city', '')}, {data.get('regionName', '')}",
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnresolvedError(f"Failed to parse IP location: {e}") from e

        logger.debug(f"Located by IP: {location.name} ({location.latitude}, {location.longitude})")
        return location

    def resolve_by_name(self, name: str) -> Location:
        """Geocode a place name such as "San Bernardino, CA".

        Raises:
            LocationUnresolvedError: If the lookup fails or finds nothing
        """
        try:
            results = self._get_json(
                self.config.geocode_url,
                params={"q": name, "format": "json", "limit": 1},
            )
        except (httpx.HTTPError, ValueError) as e:
            raise LocationUnresolvedError(f"Failed to geocode city '{name}': {e}") from e

        if not results:
            raise LocationUnresolvedError(f"City not found: {name}")

        try:
            first = results[0]
            location = Location(
                latitude=float(first["lat"]),
                longitude=float(first["lon"]),
                name=name,
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise LocationUnresolvedError(f"Failed to parse geocode response: {e}") from e

        logger.debug(f"Geocoded '{name}' to ({location.latitude}, {location.longitude})")
        return location

    def locate(self, city: str | None = None) -> Location:
        """Geocode ``city`` when given, otherwise locate by IP address."""
        if city:
            return self.resolve_by_name(city)
        return self.resolve_by_ip()


class SunTimesProvider(_HTTPService):
    """Fetches sunrise and sunset for a coordinate and date."""

    def get(self, latitude: float, longitude: float, day: date) -> SunTimes:
        """Fetch sun times, converted from UTC to local time.

        Raises:
            SunDataUnavailableError: If the lookup fails or reports a non-OK status
        """
        try:
            data = self._get_json(
                self.config.sun_times_url,
                params={
                    "lat": f"{latitude:f}",
                    "lng": f"{longitude:f}",
                    "date": day.isoformat(),
                    "formatted": 0,
                },
            )
        except (httpx.HTTPError, ValueError) as e:
            raise SunDataUnavailableError(f"Failed to fetch sun times: {e}") from e

        status = data.get("status") if isinstance(data, dict) else None
        if status != "OK":
            raise SunDataUnavailableError(f"Sun times API returned status: {status}")

        try:
            results = data["results"]
            sunrise = datetime.fromisoformat(results["sunrise"])
            sunset = datetime.fromisoformat(results["sunset"])
        except (KeyError, TypeError, ValueError) as e:
            raise SunDataUnavailableError(f"Failed to parse sun times: {e}") from e

        return SunTimes(sunrise=to_local(sunrise), sunset=to_local(sunset))
