"""Broadcast platform interface.

The lifecycle controller talks to the remote platform only through this
interface. Implementations raise PlatformError for any failed call.
"""

from abc import ABC, abstractmethod

from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
)


class BroadcastPlatform(ABC):
    """Remote resources a broadcast is made of."""

    @abstractmethod
    def create_broadcast(self, spec: BroadcastSpec) -> Broadcast:
        """Create a scheduled broadcast with auto-start and auto-stop disabled."""

    @abstractmethod
    def list_ingest_endpoints(self) -> list[IngestEndpoint]:
        """List the caller's own ingest endpoints."""

    @abstractmethod
    def create_ingest_endpoint(self, title: str) -> IngestEndpoint:
        """Create an RTMP ingest endpoint with variable frame rate and resolution."""

    @abstractmethod
    def bind(self, broadcast_id: str, endpoint_id: str) -> None:
        """Bind a broadcast to an ingest endpoint."""

    @abstractmethod
    def transition(self, broadcast_id: str, target: BroadcastState) -> None:
        """Move a broadcast to ``target`` (testing, live or ended)."""

    @abstractmethod
    def get_state(self, broadcast_id: str) -> BroadcastState | None:
        """Current state of a broadcast, or None if it does not exist."""
