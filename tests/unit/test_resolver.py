"""Tests for time resolution."""

from datetime import date, timedelta

import pytest
from conftest import FakeGeocoder, FakeSunProvider, local

from streamlauncher.timing.models import SunEvent
from streamlauncher.timing.resolver import TimeResolver, is_sun_event, parse_local_time
from streamlauncher.utils.errors import InvalidTimeFormatError, LocationUnresolvedError


class ExplodingGeocoder:
    def locate(self, city=None):
        raise LocationUnresolvedError("IP location lookup failed")


@pytest.fixture
def resolver(fake_geocoder: FakeGeocoder, fake_sun_provider: FakeSunProvider) -> TimeResolver:
    return TimeResolver(
        geocoder=fake_geocoder,
        sun_provider=fake_sun_provider,
        today=lambda: date(2026, 10, 17),
    )


class TestParseLocalTime:
    """Tests for explicit time parsing."""

    def test_parses_local_time(self) -> None:
        """Test a well-formed time becomes an aware local timestamp."""
        result = parse_local_time("2026-10-18T07:30:00")

        assert result == local(2026, 10, 18, 7, 30, 0)
        assert result.tzinfo is not None

    @pytest.mark.parametrize(
        "value",
        [
            "2026-10-18 07:30:00",
            "2026-10-18T07:30",
            "tomorrow",
            "",
            "2026-13-01T00:00:00",
            " 2026-01-25T20:00:00 ",
            "\uff12\uff10\uff12\uff16-01-25T20:00:00",
        ],
    )
    def test_rejects_malformed_time(self, value: str) -> None:
        """Test malformed values raise InvalidTimeFormatError."""
        with pytest.raises(InvalidTimeFormatError):
            parse_local_time(value)

    def test_is_sun_event_case_insensitive(self) -> None:
        """Test sun event keywords match regardless of case."""
        assert is_sun_event("sunrise")
        assert is_sun_event("SUNSET")
        assert not is_sun_event("2026-10-18T07:30:00")


class TestResolve:
    """Tests for TimeResolver.resolve."""

    def test_sunrise_with_negative_offset(self, resolver: TimeResolver) -> None:
        """Test sunrise 06:00 with offset -30 resolves to 05:30."""
        result = resolver.resolve("SUNRISE", "Denver", -30)

        assert result.timestamp == local(2026, 10, 17, 5, 30, 0)
        assert result.event is SunEvent.SUNRISE
        assert result.offset_minutes == -30
        assert result.location_name == "Denver, Colorado"

    def test_sunset_without_offset(self, resolver: TimeResolver) -> None:
        """Test sunset without offset is the raw sunset time."""
        result = resolver.resolve("sunset")

        assert result.timestamp == local(2026, 10, 17, 18, 0, 0)

    def test_explicit_time_ignores_offset(self, resolver: TimeResolver, fake_geocoder: FakeGeocoder) -> None:
        """Test an explicit time is taken as given, without lookups."""
        result = resolver.resolve("2026-10-18T07:00:00", offset_minutes=45)

        assert result.timestamp == local(2026, 10, 18, 7, 0, 0)
        assert result.event is None
        assert not result.from_sun_event
        assert fake_geocoder.calls == []

    def test_malformed_time_makes_no_external_calls(
        self,
        resolver: TimeResolver,
        fake_geocoder: FakeGeocoder,
        fake_sun_provider: FakeSunProvider,
    ) -> None:
        """Test a malformed time fails before any lookup."""
        with pytest.raises(InvalidTimeFormatError):
            resolver.resolve("next tuesday")

        assert fake_geocoder.calls == []
        assert fake_sun_provider.calls == []

    @pytest.mark.parametrize("offset", [-90, -30, 0, 15, 120])
    def test_offset_commutes(self, resolver: TimeResolver, offset: int) -> None:
        """Test resolving with an offset equals resolving without plus the offset."""
        base = resolver.resolve("SUNRISE")
        shifted = resolver.resolve("SUNRISE", offset_minutes=offset)

        assert shifted.timestamp == base.timestamp + timedelta(minutes=offset)

    def test_lookup_cached_per_hint(
        self,
        resolver: TimeResolver,
        fake_geocoder: FakeGeocoder,
        fake_sun_provider: FakeSunProvider,
    ) -> None:
        """Test repeated resolutions reuse one lookup per location."""
        resolver.resolve("SUNRISE", "Denver")
        resolver.resolve("SUNSET", "Denver")
        resolver.resolve("SUNSET")

        assert fake_geocoder.calls == ["Denver", None]
        assert len(fake_sun_provider.calls) == 2
        assert fake_sun_provider.calls[0][2] == date(2026, 10, 17)

    def test_location_failure_propagates(self, fake_sun_provider: FakeSunProvider) -> None:
        """Test geolocation failures surface as LocationUnresolvedError."""
        resolver = TimeResolver(geocoder=ExplodingGeocoder(), sun_provider=fake_sun_provider)

        with pytest.raises(LocationUnresolvedError):
            resolver.resolve("SUNRISE")


class TestResolveWindow:
    """Tests for TimeResolver.resolve_window."""

    def test_sun_window(self, resolver: TimeResolver) -> None:
        """Test start from sunrise and end from sunset, each with its offset."""
        window = resolver.resolve_window("SUNRISE", "Denver", -30, 30)

        assert window.start.timestamp == local(2026, 10, 17, 5, 30, 0)
        assert window.end.timestamp == local(2026, 10, 17, 18, 30, 0)
        assert window.location_name == "Denver, Colorado"

    def test_explicit_start_still_ends_at_sunset(self, resolver: TimeResolver) -> None:
        """Test an explicit start keeps the sunset-anchored end."""
        window = resolver.resolve_window("2026-10-17T09:15:00", None, -30, 10)

        assert window.start.timestamp == local(2026, 10, 17, 9, 15, 0)
        assert window.start.event is None
        assert window.end.timestamp == local(2026, 10, 17, 18, 10, 0)

    def test_single_lookup(
        self,
        resolver: TimeResolver,
        fake_geocoder: FakeGeocoder,
        fake_sun_provider: FakeSunProvider,
    ) -> None:
        """Test start and end share one geolocation and sun lookup."""
        resolver.resolve_window("SUNSET", "Denver", -60, 30)

        assert len(fake_geocoder.calls) == 1
        assert len(fake_sun_provider.calls) == 1

    def test_malformed_start_makes_no_external_calls(
        self, resolver: TimeResolver, fake_geocoder: FakeGeocoder
    ) -> None:
        """Test a malformed explicit start fails before any lookup."""
        with pytest.raises(InvalidTimeFormatError):
            resolver.resolve_window("18/10/2026 07:00")

        assert fake_geocoder.calls == []

    def test_end_before_start_warns(self, resolver: TimeResolver, caplog: pytest.LogCaptureFixture) -> None:
        """Test a window ending before it starts is logged but still returned."""
        window = resolver.resolve_window("2026-10-17T20:00:00", None, 0, 0)

        assert window.end.timestamp < window.start.timestamp
        assert "is not after" in caplog.text
