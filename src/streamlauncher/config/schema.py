"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
PrivacyStatus = Literal["public", "unlisted", "private"]
EndpointNaming = Literal["fixed", "per-broadcast"]


class BroadcastConfig(BaseModel):
    """Broadcast defaults."""

    title_template: str = "Live Stream (%m/%d/%Y)"  # strftime on today's date
    description: str = ""
    privacy: PrivacyStatus = "public"

    # Ingest endpoint
    endpoint_name: str = "Stream Launcher - Stream"  # Differs from the broadcast title
    endpoint_naming: EndpointNaming = "fixed"

    # Probe the broadcast when a transition is rejected
    verify_broadcast_exists: bool = True


class ScheduleConfig(BaseModel):
    """Defaults for `stream schedule`."""

    time: str = "SUNRISE"  # SUNRISE, SUNSET or YYYY-MM-DDTHH:MM:SS
    city: str | None = None  # None: locate by IP address
    start_offset: int = -30
    end_offset: int = 30


class TimingConfig(BaseModel):
    """Fixed pauses used by the stream workflow."""

    testing_pause_seconds: float = Field(default=2.0, ge=0)
    obs_warmup_seconds: float = Field(default=30.0, ge=0)
    countdown_tick_seconds: float = Field(default=30.0, gt=0)


class ObsConfig(BaseModel):
    """Local broadcasting software."""

    path: Path | None = None  # None: platform default location
    args: list[str] = Field(default_factory=lambda: ["--startstreaming"])
    skip_launch: bool = False


class TaskConfig(BaseModel):
    """Names of the OS-level deferred tasks."""

    start_task_name: str = "StartYouTubeStream"
    end_task_name: str = "EndYouTubeStream"


class GeoConfig(BaseModel):
    """Geolocation and sun-times services."""

    ip_lookup_url: str = "http://ip-api.com/json/"
    geocode_url: str = "https://nominatim.openstreetmap.org/search"
    sun_times_url: str = "https://api.sunrise-sunset.org/json"
    user_agent: str = "streamlauncher/0.1"
    timeout_seconds: float = 10.0


class WeatherConfig(BaseModel):
    """Weather station overlay."""

    base_url: str = "https://www.flymarshall.com/wx/betaTwo/wx"
    url_suffix: str = ".dat"
    update_interval_seconds: int = Field(default=60, ge=10, le=3600)
    begin_at: str = "06:30"
    end_at: str = "17:30"

    @field_validator("begin_at", "end_at")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate HH:MM clock values."""
        hours, _, minutes = value.partition(":")
        if not (hours.isdigit() and minutes.isdigit()):
            raise ValueError(f"Expected HH:MM, got '{value}'")
        if int(hours) > 23 or int(minutes) > 59:
            raise ValueError(f"Clock value out of range: '{value}'")
        return value


class UpdateConfig(BaseModel):
    """Self-update source."""

    repository: str = "matsuzen/obs-andy-jackson"
    api_url: str = "https://api.github.com/repos"


class LauncherConfig(BaseModel):
    """Global streamlauncher configuration."""

    version: str = "1"
    log_level: LogLevel = "WARNING"
    credentials_dir: Path | None = None  # None: the config directory
    handoff_file: Path | None = None  # None: <data dir>/broadcast_id.txt

    broadcast: BroadcastConfig = Field(default_factory=BroadcastConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    obs: ObsConfig = Field(default_factory=ObsConfig)
    tasks: TaskConfig = Field(default_factory=TaskConfig)
    geo: GeoConfig = Field(default_factory=GeoConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    update: UpdateConfig = Field(default_factory=UpdateConfig)
