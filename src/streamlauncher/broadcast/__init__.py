"""Broadcast lifecycle on the remote platform."""

from streamlauncher.broadcast.controller import LifecycleController
from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
    Privacy,
    mask_secret,
)
from streamlauncher.broadcast.platform import BroadcastPlatform

__all__ = [
    "Broadcast",
    "BroadcastPlatform",
    "BroadcastSpec",
    "BroadcastState",
    "IngestEndpoint",
    "LifecycleController",
    "Privacy",
    "mask_secret",
]
