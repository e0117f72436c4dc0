"""Custom exceptions for streamlauncher."""


class LauncherError(Exception):
    """Base exception for all streamlauncher errors."""

    pass


class ConfigError(LauncherError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class TimeResolutionError(LauncherError):
    """Errors turning a time specification into a timestamp."""

    pass


class InvalidTimeFormatError(TimeResolutionError):
    """Explicit time does not match YYYY-MM-DDTHH:MM:SS."""

    pass


class LocationUnresolvedError(TimeResolutionError):
    """Geolocation by IP address or by name failed."""

    pass


class SunDataUnavailableError(TimeResolutionError):
    """Sunrise/sunset lookup failed or returned a non-OK status."""

    pass


class AuthenticationError(LauncherError):
    """OAuth credentials missing, invalid, or not obtainable."""

    pass


class PlatformError(LauncherError):
    """A call to the remote broadcast platform failed.

    Attributes:
        status: HTTP status code, when the platform answered
        reason: Machine-readable reason reported by the platform
    """

    def __init__(
        self, message: str, status: int | None = None, reason: str | None = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason

    @property
    def is_redundant_transition(self) -> bool:
        """Whether the platform rejected a transition the broadcast already made."""
        if self.reason == "redundantTransition":
            return True
        return "redundant transition" in str(self).lower()


class BroadcastError(LauncherError):
    """A broadcast lifecycle step failed.

    Attributes:
        step: Lifecycle step that failed (create, lookup, bind, ...)
        broadcast_id: Broadcast identifier, when one exists
    """

    step = "broadcast"

    def __init__(self, message: str, broadcast_id: str | None = None) -> None:
        if broadcast_id:
            message = f"{message} (step: {self.step}, broadcast: {broadcast_id})"
        else:
            message = f"{message} (step: {self.step})"
        super().__init__(message)
        self.broadcast_id = broadcast_id


class BroadcastCreateError(BroadcastError):
    """Creating the broadcast resource failed."""

    step = "create broadcast"


class StreamLookupError(BroadcastError):
    """Listing existing ingest endpoints failed."""

    step = "look up ingest endpoint"


class StreamCreateError(BroadcastError):
    """Creating the ingest endpoint failed."""

    step = "create ingest endpoint"


class BindError(BroadcastError):
    """Binding the broadcast to its ingest endpoint failed."""

    step = "bind"


class GoLiveError(BroadcastError):
    """Transitioning the broadcast to live failed."""

    step = "go live"


class EndStreamError(BroadcastError):
    """Transitioning the broadcast to complete failed."""

    step = "end stream"


class TaskRegistrationError(LauncherError):
    """Registering an OS-level deferred task failed."""

    pass


class HandoffReadError(LauncherError):
    """No broadcast identifier could be read from the handoff file."""

    pass


class WeatherDataError(LauncherError):
    """Weather station data could not be fetched or parsed."""

    pass


class UpdateError(LauncherError):
    """Self-update failed."""

    pass
