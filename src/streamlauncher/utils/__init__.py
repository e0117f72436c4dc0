"""Utility functions and helpers for streamlauncher."""

from streamlauncher.utils.errors import (
    AuthenticationError,
    BindError,
    BroadcastCreateError,
    BroadcastError,
    ConfigError,
    EndStreamError,
    GoLiveError,
    HandoffReadError,
    InvalidConfigError,
    InvalidTimeFormatError,
    LauncherError,
    LocationUnresolvedError,
    PlatformError,
    StreamCreateError,
    StreamLookupError,
    SunDataUnavailableError,
    TaskRegistrationError,
    TimeResolutionError,
    UpdateError,
    WeatherDataError,
)
from streamlauncher.utils.paths import (
    get_config_dir,
    get_config_file,
    get_data_dir,
    get_handoff_file,
)

__all__ = [
    # Errors
    "LauncherError",
    "ConfigError",
    "InvalidConfigError",
    "TimeResolutionError",
    "InvalidTimeFormatError",
    "LocationUnresolvedError",
    "SunDataUnavailableError",
    "AuthenticationError",
    "PlatformError",
    "BroadcastError",
    "BroadcastCreateError",
    "StreamLookupError",
    "StreamCreateError",
    "BindError",
    "GoLiveError",
    "EndStreamError",
    "TaskRegistrationError",
    "HandoffReadError",
    "WeatherDataError",
    "UpdateError",
    # Paths
    "get_config_dir",
    "get_data_dir",
    "get_config_file",
    "get_handoff_file",
]
