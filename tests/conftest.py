"""Shared test fixtures."""

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
)
from streamlauncher.broadcast.platform import BroadcastPlatform
from streamlauncher.config.schema import LauncherConfig
from streamlauncher.timing.models import Location, SunTimes
from streamlauncher.utils.errors import PlatformError


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """Aware datetime in the test process's local timezone."""
    return datetime(year, month, day, hour, minute, second).astimezone()


class FakePlatform(BroadcastPlatform):
    """In-memory broadcast platform.

    ``fail`` maps an operation name to the PlatformError it raises;
    ``transition_errors`` maps a target state to the error raised when
    transitioning into it.
    """

    def __init__(self, endpoints: list[IngestEndpoint] | None = None):
        self.calls: list[tuple[str, Any]] = []
        self.endpoints = list(endpoints or [])
        self.broadcasts: dict[str, BroadcastState] = {}
        self.fail: dict[str, PlatformError] = {}
        self.transition_errors: dict[BroadcastState, PlatformError] = {}
        self._next = 0

    def _check(self, name: str) -> None:
        if name in self.fail:
            raise self.fail[name]

    def create_broadcast(self, spec: BroadcastSpec) -> Broadcast:
        self.calls.append(("create_broadcast", spec))
        self._check("create_broadcast")
        self._next += 1
        broadcast_id = f"bc{self._next}"
        self.broadcasts[broadcast_id] = BroadcastState.CREATED
        return Broadcast(
            id=broadcast_id,
            title=spec.title,
            scheduled_start=spec.scheduled_start,
            privacy=spec.privacy,
        )

    def list_ingest_endpoints(self) -> list[IngestEndpoint]:
        self.calls.append(("list_ingest_endpoints", None))
        self._check("list_ingest_endpoints")
        return list(self.endpoints)

    def create_ingest_endpoint(self, title: str) -> IngestEndpoint:
        self.calls.append(("create_ingest_endpoint", title))
        self._check("create_ingest_endpoint")
        endpoint = IngestEndpoint(
            id=f"st{len(self.endpoints) + 1}",
            title=title,
            ingestion_address="rtmp://a.rtmp.youtube.com/live2",
            stream_key="abcd-efgh-ijkl-mnop",
        )
        self.endpoints.append(endpoint)
        return endpoint

    def bind(self, broadcast_id: str, endpoint_id: str) -> None:
        self.calls.append(("bind", (broadcast_id, endpoint_id)))
        self._check("bind")
        self.broadcasts[broadcast_id] = BroadcastState.BOUND

    def transition(self, broadcast_id: str, target: BroadcastState) -> None:
        self.calls.append(("transition", (broadcast_id, target)))
        if target in self.transition_errors:
            raise self.transition_errors[target]
        if broadcast_id not in self.broadcasts:
            raise PlatformError("Broadcast not found", status=404, reason="liveBroadcastNotFound")
        self.broadcasts[broadcast_id] = target

    def get_state(self, broadcast_id: str) -> BroadcastState | None:
        self.calls.append(("get_state", broadcast_id))
        self._check("get_state")
        return self.broadcasts.get(broadcast_id)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def transitions(self) -> list[BroadcastState]:
        return [args[1] for name, args in self.calls if name == "transition"]


class FakeGeocoder:
    def __init__(self, location: Location | None = None):
        self.location = location or Location(latitude=39.74, longitude=-104.99, name="Denver, Colorado")
        self.calls: list[str | None] = []

    def locate(self, city: str | None = None) -> Location:
        self.calls.append(city)
        return self.location


class FakeSunProvider:
    def __init__(self, sun_times: SunTimes):
        self.sun_times = sun_times
        self.calls: list[tuple[float, float, date]] = []

    def get(self, latitude: float, longitude: float, day: date) -> SunTimes:
        self.calls.append((latitude, longitude, day))
        return self.sun_times


class FakeClock:
    """Clock advanced by the fake sleep function."""

    def __init__(self, start: datetime):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def sun_times() -> SunTimes:
    """Sunrise 06:00, sunset 18:00 on 2026-10-17."""
    return SunTimes(sunrise=local(2026, 10, 17, 6, 0, 0), sunset=local(2026, 10, 17, 18, 0, 0))


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def fake_sun_provider(sun_times: SunTimes) -> FakeSunProvider:
    return FakeSunProvider(sun_times)


@pytest.fixture
def config(tmp_path: Path) -> LauncherConfig:
    """Config with zero pauses and a handoff file under tmp_path."""
    return LauncherConfig(
        handoff_file=tmp_path / "broadcast_id.txt",
        credentials_dir=tmp_path,
        timing={"testing_pause_seconds": 0, "obs_warmup_seconds": 0, "countdown_tick_seconds": 30},
    )


@pytest.fixture
def sample_config_dict() -> dict:
    return {
        "version": "1",
        "log_level": "INFO",
        "broadcast": {"title_template": "Station (%m/%d/%Y)", "privacy": "unlisted"},
        "schedule": {"time": "SUNSET", "city": "Denver", "start_offset": -15, "end_offset": 20},
    }
