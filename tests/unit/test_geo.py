"""Tests for the geolocation and sun-times HTTP clients."""

from datetime import date, datetime, timezone

import httpx
import pytest

from streamlauncher.config.schema import GeoConfig
from streamlauncher.timing.geo import Geocoder, SunTimesProvider
from streamlauncher.utils.errors import LocationUnresolvedError, SunDataUnavailableError


def make_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestGeocoder:
    """Tests for Geocoder."""

    def test_resolve_by_ip(self) -> None:
        """Test IP geolocation builds a "city, region" location."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "ip-api.com"
            return httpx.Response(
                200,
                json={
                    "status": "success",
                    "lat": 34.1,
                    "lon": -117.3,
                    "city": "San Bernardino",
                    "regionName": "California",
                },
            )

        geocoder = Geocoder(client=make_client(handler))
        location = geocoder.locate()

        assert location.name == "San Bernardino, California"
        assert location.latitude == pytest.approx(34.1)
        assert location.longitude == pytest.approx(-117.3)

    def test_resolve_by_ip_failed_status(self) -> None:
        """Test a non-success status raises LocationUnresolvedError."""
        geocoder = Geocoder(
            client=make_client(lambda request: httpx.Response(200, json={"status": "fail"}))
        )

        with pytest.raises(LocationUnresolvedError):
            geocoder.resolve_by_ip()

    def test_resolve_by_name_sends_query_and_user_agent(self) -> None:
        """Test name geocoding queries Nominatim with a User-Agent."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"lat": "39.74", "lon": "-104.99"}])

        geocoder = Geocoder(GeoConfig(user_agent="test-agent/1.0"), client=make_client(handler))
        location = geocoder.locate("Denver")

        assert location.name == "Denver"
        assert location.latitude == pytest.approx(39.74)
        assert seen[0].url.params["q"] == "Denver"
        assert seen[0].url.params["limit"] == "1"
        assert seen[0].headers["User-Agent"] == "test-agent/1.0"

    def test_resolve_by_name_not_found(self) -> None:
        """Test an empty result list means the city was not found."""
        geocoder = Geocoder(client=make_client(lambda request: httpx.Response(200, json=[])))

        with pytest.raises(LocationUnresolvedError, match="City not found"):
            geocoder.resolve_by_name("Atlantis")

    def test_transport_error(self) -> None:
        """Test network failures are wrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        geocoder = Geocoder(client=make_client(handler))

        with pytest.raises(LocationUnresolvedError):
            geocoder.resolve_by_name("Denver")


class TestSunTimesProvider:
    """Tests for SunTimesProvider."""

    def test_get_converts_to_local(self) -> None:
        """Test UTC timestamps are returned in local time."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "results": {
                        "sunrise": "2026-10-17T13:00:00+00:00",
                        "sunset": "2026-10-18T00:30:00+00:00",
                    },
                },
            )

        provider = SunTimesProvider(client=make_client(handler))
        sun_times = provider.get(39.74, -104.99, date(2026, 10, 17))

        assert sun_times.sunrise == datetime(2026, 10, 17, 13, 0, tzinfo=timezone.utc)
        assert sun_times.sunrise.utcoffset() == sun_times.sunrise.astimezone().utcoffset()
        assert sun_times.sunset > sun_times.sunrise
        assert seen[0].url.params["date"] == "2026-10-17"
        assert seen[0].url.params["formatted"] == "0"

    def test_non_ok_status(self) -> None:
        """Test a non-OK status raises SunDataUnavailableError."""
        provider = SunTimesProvider(
            client=make_client(lambda request: httpx.Response(200, json={"status": "INVALID_DATE"}))
        )

        with pytest.raises(SunDataUnavailableError, match="INVALID_DATE"):
            provider.get(0.0, 0.0, date(2026, 10, 17))

    def test_http_error(self) -> None:
        """Test an HTTP error status raises SunDataUnavailableError."""
        provider = SunTimesProvider(
            client=make_client(lambda request: httpx.Response(503))
        )

        with pytest.raises(SunDataUnavailableError):
            provider.get(0.0, 0.0, date(2026, 10, 17))
