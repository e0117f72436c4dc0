"""YouTube Data API v3 implementation of the broadcast platform."""

import json
import logging
from typing import Any

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
    Privacy,
)
from streamlauncher.broadcast.platform import BroadcastPlatform
from streamlauncher.utils.errors import PlatformError

logger = logging.getLogger(__name__)


def _error_reason(error: HttpError) -> str | None:
    """Extract the machine-readable reason from an API error."""
    details = getattr(error, "error_details", None)
    if isinstance(details, list):
        for detail in details:
            if isinstance(detail, dict) and detail.get("reason"):
                return str(detail["reason"])
    try:
        content = json.loads(error.content.decode("utf-8"))
        return content["error"]["errors"][0]["reason"]
    except (AttributeError, ValueError, KeyError, IndexError, TypeError):
        return None


def _to_platform_error(error: HttpError, action: str) -> PlatformError:
    status = getattr(error.resp, "status", None)
    message = error.reason if hasattr(error, "reason") else str(error)
    return PlatformError(
        f"YouTube API error during {action}: {message}",
        status=int(status) if status is not None else None,
        reason=_error_reason(error),
    )


def _endpoint_from_resource(item: dict[str, Any]) -> IngestEndpoint:
    ingestion = item.get("cdn", {}).get("ingestionInfo", {})
    return IngestEndpoint(
        id=item["id"],
        title=item.get("snippet", {}).get("title", ""),
        ingestion_address=ingestion.get("ingestionAddress", ""),
        stream_key=ingestion.get("streamName", ""),
    )


class YouTubePlatform(BroadcastPlatform):
    """liveBroadcasts / liveStreams resources of the YouTube Data API."""

    def __init__(self, service: Any):
        """Initialize the platform.

        Args:
            service: Client built by googleapiclient.discovery.build("youtube", "v3")
        """
        self.service = service

    def _execute(self, request: Any, action: str) -> dict[str, Any]:
        try:
            return request.execute() or {}
        except HttpError as e:
            raise _to_platform_error(e, action) from e
        except (GoogleAuthError, OSError) as e:
            raise PlatformError(f"YouTube API request failed during {action}: {e}") from e

    def create_broadcast(self, spec: BroadcastSpec) -> Broadcast:
        body = {
            "snippet": {
                "title": spec.title,
                "description": spec.description,
                "scheduledStartTime": spec.scheduled_start.isoformat(),
            },
            "contentDetails": {
                "enableAutoStart": False,
                # A dropped connection must not end the broadcast
                "enableAutoStop": False,
            },
            "status": {
                "privacyStatus": spec.privacy.value,
                "selfDeclaredMadeForKids": False,
            },
        }
        response = self._execute(
            self.service.liveBroadcasts().insert(
                part="snippet,contentDetails,status", body=body
            ),
            "broadcast insert",
        )
        return Broadcast(
            id=response["id"],
            title=response.get("snippet", {}).get("title", spec.title),
            state=BroadcastState.CREATED,
            scheduled_start=spec.scheduled_start,
            privacy=Privacy(response.get("status", {}).get("privacyStatus", spec.privacy.value)),
        )

    def list_ingest_endpoints(self) -> list[IngestEndpoint]:
        endpoints: list[IngestEndpoint] = []
        streams = self.service.liveStreams()
        request = streams.list(part="snippet,cdn", mine=True, maxResults=50)
        while request is not None:
            response = self._execute(request, "stream list")
            endpoints.extend(_endpoint_from_resource(item) for item in response.get("items", []))
            request = streams.list_next(request, response)
        return endpoints

    def create_ingest_endpoint(self, title: str) -> IngestEndpoint:
        body = {
            "snippet": {"title": title},
            "cdn": {
                "frameRate": "variable",
                "ingestionType": "rtmp",
                "resolution": "variable",
            },
        }
        response = self._execute(
            self.service.liveStreams().insert(part="snippet,cdn", body=body),
            "stream insert",
        )
        return _endpoint_from_resource(response)

    def bind(self, broadcast_id: str, endpoint_id: str) -> None:
        self._execute(
            self.service.liveBroadcasts().bind(
                id=broadcast_id, part="id,contentDetails", streamId=endpoint_id
            ),
            "broadcast bind",
        )

    def transition(self, broadcast_id: str, target: BroadcastState) -> None:
        self._execute(
            self.service.liveBroadcasts().transition(
                broadcastStatus=target.transition_name, id=broadcast_id, part="status"
            ),
            f"transition to {target.transition_name}",
        )

    def get_state(self, broadcast_id: str) -> BroadcastState | None:
        response = self._execute(
            self.service.liveBroadcasts().list(part="status", id=broadcast_id),
            "broadcast list",
        )
        items = response.get("items", [])
        if not items:
            return None
        status = items[0].get("status", {}).get("lifeCycleStatus", "")
        return BroadcastState.from_lifecycle_status(status)
