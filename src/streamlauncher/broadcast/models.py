"""Data models for broadcasts and ingest endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Privacy(str, Enum):
    """Broadcast visibility."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class BroadcastState(str, Enum):
    """Lifecycle of a broadcast.

    Unscheduled -> Created -> Bound -> Testing -> Live -> Ended, with
    Bound -> Live allowed when the testing step is rejected.
    """

    UNSCHEDULED = "unscheduled"
    CREATED = "created"
    BOUND = "bound"
    TESTING = "testing"
    LIVE = "live"
    ENDED = "ended"

    @property
    def transition_name(self) -> str:
        """Name the platform uses for a transition into this state."""
        if self is BroadcastState.ENDED:
            return "complete"
        return self.value

    @classmethod
    def from_lifecycle_status(cls, status: str) -> "BroadcastState":
        """Map a YouTube ``lifeCycleStatus`` value to a state."""
        return _LIFECYCLE_STATUS.get(status, cls.UNSCHEDULED)


_LIFECYCLE_STATUS = {
    "created": BroadcastState.CREATED,
    "ready": BroadcastState.BOUND,
    "testStarting": BroadcastState.TESTING,
    "testing": BroadcastState.TESTING,
    "liveStarting": BroadcastState.LIVE,
    "live": BroadcastState.LIVE,
    "complete": BroadcastState.ENDED,
    "revoked": BroadcastState.ENDED,
}


class BroadcastSpec(BaseModel):
    """What the operator asked for."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    privacy: Privacy = Privacy.PUBLIC
    scheduled_start: datetime

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        """Reject blank titles."""
        if not value.strip():
            raise ValueError("Title cannot be blank")
        return value

    @classmethod
    def with_default_title(
        cls,
        title: str | None,
        template: str,
        today: datetime,
        **kwargs,
    ) -> "BroadcastSpec":
        """Build a spec, formatting ``template`` with today's date when no title is given.

        A blank title counts as no title.
        """
        if title is None or not title.strip():
            title = today.strftime(template)
        return cls(title=title, **kwargs)


class Broadcast(BaseModel):
    """Local reference to the remote broadcast resource."""

    id: str
    title: str = ""
    state: BroadcastState = BroadcastState.CREATED
    scheduled_start: datetime | None = None
    privacy: Privacy | None = None

    @property
    def watch_url(self) -> str:
        return f"https://youtube.com/watch?v={self.id}"

    @property
    def studio_url(self) -> str:
        return f"https://studio.youtube.com/video/{self.id}/livestreaming"


class IngestEndpoint(BaseModel):
    """Reusable ingest target that feeds a bound broadcast."""

    id: str
    title: str
    ingestion_address: str = ""
    stream_key: str = ""

    @property
    def rtmp_url(self) -> str:
        """Full publish URL (contains the stream key)."""
        return f"{self.ingestion_address}/{self.stream_key}"


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the first and last ``visible`` characters."""
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}…{value[-visible:]}"
