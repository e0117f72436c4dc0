"""Broadcast lifecycle controller.

Drives a broadcast through Created -> Bound -> Testing -> Live -> Ended.

The controller does not poll the broadcast before transitioning; it relies
on the platform rejecting transitions that do not apply. The one tolerated
rejection is the Testing transition, which the platform refuses once a
broadcast has moved past it. The Live transition must succeed.
"""

import logging
import time
from collections.abc import Callable

from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
)
from streamlauncher.broadcast.platform import BroadcastPlatform
from streamlauncher.config.schema import EndpointNaming, LauncherConfig
from streamlauncher.utils.errors import (
    BindError,
    BroadcastCreateError,
    EndStreamError,
    GoLiveError,
    PlatformError,
    StreamCreateError,
    StreamLookupError,
)

logger = logging.getLogger(__name__)


class LifecycleController:
    """Owns the remote broadcast lifecycle.

    Example:
        >>> controller = LifecycleController(platform, endpoint_name="Station - Stream")
        >>> broadcast, endpoint = controller.schedule_stream(spec)
        >>> controller.go_live(broadcast.id)
        >>> controller.end_stream(broadcast.id)
    """

    def __init__(
        self,
        platform: BroadcastPlatform,
        endpoint_name: str,
        endpoint_naming: EndpointNaming = "fixed",
        testing_pause_seconds: float = 2.0,
        verify_broadcast_exists: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the controller.

        Args:
            platform: Remote broadcast platform
            endpoint_name: Display name of the shared ingest endpoint
            endpoint_naming: "fixed" reuses ``endpoint_name`` for every
                broadcast; "per-broadcast" uses "<title> - Stream"
            testing_pause_seconds: Pause between the Testing and Live transitions
            verify_broadcast_exists: Probe the broadcast when a transition is
                rejected, to tell an unknown identifier from one that already
                moved on
            sleep: Sleep function (injectable for tests)
        """
        self.platform = platform
        self.endpoint_name = endpoint_name
        self.endpoint_naming = endpoint_naming
        self.testing_pause_seconds = testing_pause_seconds
        self.verify_broadcast_exists = verify_broadcast_exists
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        platform: BroadcastPlatform,
        config: LauncherConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "LifecycleController":
        """Create a controller from configuration."""
        return cls(
            platform,
            endpoint_name=config.broadcast.endpoint_name,
            endpoint_naming=config.broadcast.endpoint_naming,
            testing_pause_seconds=config.timing.testing_pause_seconds,
            verify_broadcast_exists=config.broadcast.verify_broadcast_exists,
            sleep=sleep,
        )

    def endpoint_title(self, spec: BroadcastSpec) -> str:
        """Display name of the ingest endpoint a broadcast binds to."""
        if self.endpoint_naming == "per-broadcast":
            return f"{spec.title} - Stream"
        return self.endpoint_name

    def schedule_stream(self, spec: BroadcastSpec) -> tuple[Broadcast, IngestEndpoint]:
        """Create a broadcast and bind it to an ingest endpoint.

        Any failure aborts the operation. A broadcast created before the
        failure is left in place for manual inspection.

        Args:
            spec: Title, description, privacy and scheduled start

        Returns:
            The bound broadcast and its ingest endpoint

        Raises:
            BroadcastCreateError: Creating the broadcast failed
            StreamLookupError: Listing ingest endpoints failed
            StreamCreateError: Creating the ingest endpoint failed
            BindError: Binding failed
        """
        logger.info(
            f"Scheduling live stream '{spec.title}' for "
            f"{spec.scheduled_start:%Y-%m-%d %H:%M:%S} ({spec.privacy.value})"
        )

        try:
            broadcast = self.platform.create_broadcast(spec)
        except PlatformError as e:
            raise BroadcastCreateError(f"Error creating broadcast: {e}") from e
        logger.info(f"Broadcast created with ID: {broadcast.id}")

        title = self.endpoint_title(spec)
        try:
            endpoints = self.platform.list_ingest_endpoints()
        except PlatformError as e:
            raise StreamLookupError(f"Error listing streams: {e}", broadcast.id) from e

        endpoint = next((item for item in endpoints if item.title == title), None)
        if endpoint is None:
            logger.info(f"No ingest endpoint named '{title}', creating one")
            try:
                endpoint = self.platform.create_ingest_endpoint(title)
            except PlatformError as e:
                raise StreamCreateError(f"Error creating new stream: {e}", broadcast.id) from e
        else:
            logger.debug(f"Reusing ingest endpoint {endpoint.id}")

        try:
            self.platform.bind(broadcast.id, endpoint.id)
        except PlatformError as e:
            raise BindError(f"Error binding broadcast to stream: {e}", broadcast.id) from e
        logger.info(f"Stream bound with ID: {endpoint.id}, Title: {endpoint.title}")

        return broadcast.model_copy(update={"state": BroadcastState.BOUND}), endpoint

    def go_live(self, broadcast_id: str) -> None:
        """Transition a broadcast to live, via testing.

        Safe to call again on a broadcast that is already live.

        Raises:
            GoLiveError: The live transition failed, or the broadcast does not exist
        """
        logger.info("Transitioning broadcast to LIVE...")

        try:
            self.platform.transition(broadcast_id, BroadcastState.TESTING)
        except PlatformError as e:
            logger.info("Broadcast already in testing or live mode")
            logger.debug(f"Testing transition rejected: {e}")
            if self._exists(broadcast_id) is False:
                raise GoLiveError("Broadcast not found", broadcast_id) from e
        else:
            logger.info("Broadcast in testing mode")
            self._sleep(self.testing_pause_seconds)

        try:
            self.platform.transition(broadcast_id, BroadcastState.LIVE)
        except PlatformError as e:
            if e.is_redundant_transition or self._is_live(broadcast_id):
                logger.info("Broadcast is already live")
                return
            raise GoLiveError(f"Error transitioning to live: {e}", broadcast_id) from e

        logger.info("Broadcast is now LIVE!")

    def end_stream(self, broadcast_id: str) -> None:
        """Transition a broadcast to complete.

        Raises:
            EndStreamError: The transition failed
        """
        logger.info("Ending broadcast...")
        try:
            self.platform.transition(broadcast_id, BroadcastState.ENDED)
        except PlatformError as e:
            if e.is_redundant_transition:
                logger.info("Broadcast already ended")
                return
            raise EndStreamError(f"Error ending stream: {e}", broadcast_id) from e
        logger.info("Broadcast ended")

    def probe_state(self, broadcast_id: str) -> BroadcastState | None:
        """Current remote state, or None if the broadcast does not exist.

        Raises:
            PlatformError: The lookup failed
        """
        return self.platform.get_state(broadcast_id)

    def _exists(self, broadcast_id: str) -> bool | None:
        """True/False when known; None when not checked or the probe failed."""
        if not self.verify_broadcast_exists:
            return None
        try:
            return self.platform.get_state(broadcast_id) is not None
        except PlatformError as e:
            logger.debug(f"State probe failed: {e}")
            return None

    def _is_live(self, broadcast_id: str) -> bool:
        if not self.verify_broadcast_exists:
            return False
        try:
            return self.platform.get_state(broadcast_id) is BroadcastState.LIVE
        except PlatformError as e:
            logger.debug(f"State probe failed: {e}")
            return False
