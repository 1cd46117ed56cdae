"""
Event names, payload models and the wire frame codec.

Three vocabularies meet here:
- ServerEvent: frame types the server pushes over the socket.
- ClientEvent: names dispatched on the EventRouter (server events after
  normalization, plus lifecycle events synthesized by the manager).
- Command: frame types the client sends to the server.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from live_shared.utils.exceptions import ProtocolError


class ServerEvent(str, Enum):
    """Frame types pushed by the server."""

    # Application-level handshake (session authenticated and ready)
    CONNECTED = "connected"

    # Notification events
    NEW_NOTIFICATION = "new_notification"
    NOTIFICATION_MARKED_READ = "notification_marked_read"
    ALL_NOTIFICATIONS_MARKED_READ = "all_notifications_marked_read"

    # Internship events
    NEW_INTERNSHIP_AVAILABLE = "new_internship_available"
    INTERNSHIP_UPDATED = "internship_updated"
    DEADLINE_REMINDER = "deadline_reminder"
    SEARCH_RESULTS_UPDATED = "search_results_updated"

    # Server events
    SERVER_SHUTDOWN = "server_shutdown"
    PONG = "pong"
    ERROR = "error"


class ClientEvent(str, Enum):
    """Event names dispatched on the EventRouter."""

    # Lifecycle (synthesized by ConnectionManager)
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    RECONNECTED = "reconnected"
    RECONNECT_ERROR = "reconnect_error"
    RECONNECT_FAILED = "reconnect_failed"

    # Domain (forwarded from the server)
    NEW_NOTIFICATION = "new_notification"
    NOTIFICATION_MARKED_READ = "notification_marked_read"
    ALL_NOTIFICATIONS_MARKED_READ = "all_notifications_marked_read"
    NEW_INTERNSHIP = "new_internship"
    INTERNSHIP_UPDATED = "internship_updated"
    DEADLINE_REMINDER = "deadline_reminder"
    SEARCH_RESULTS_UPDATED = "search_results_updated"
    SERVER_SHUTDOWN = "server_shutdown"
    PONG = "pong"
    ERROR = "error"


class Command(str, Enum):
    """Frame types the client sends."""

    UPDATE_NOTIFICATION_PREFERENCES = "update_notification_preferences"
    MARK_NOTIFICATION_READ = "mark_notification_read"
    MARK_ALL_NOTIFICATIONS_READ = "mark_all_notifications_read"
    JOIN_INTERNSHIP_UPDATES = "join_internship_updates"
    LEAVE_INTERNSHIP_UPDATES = "leave_internship_updates"
    PING = "ping"


# Server frame types whose router name differs from the wire name
_EVENT_NAME_MAP: dict[str, str] = {
    ServerEvent.NEW_INTERNSHIP_AVAILABLE.value: ClientEvent.NEW_INTERNSHIP.value,
}


def normalize_event_name(wire_name: str) -> str:
    """
    Map a server frame type to the name dispatched on the router.

    Unknown names pass through unchanged so new server events reach ad hoc
    subscribers without a client release.
    """
    return _EVENT_NAME_MAP.get(wire_name, wire_name)


class NotificationType(str, Enum):
    """Known notification types. The server may send others."""

    NEW_MATCH = "new_match"
    DEADLINE_REMINDER = "deadline_reminder"
    STATUS_CHANGE = "status_change"
    NEW_INTERNSHIP = "new_internship"
    INTERNSHIP_UPDATED = "internship_updated"


DEFAULT_ENABLED_TYPES: frozenset[str] = frozenset({
    NotificationType.NEW_MATCH.value,
    NotificationType.DEADLINE_REMINDER.value,
    NotificationType.NEW_INTERNSHIP.value,
})


class Notification(BaseModel):
    """
    A notification delivered by the server.

    Field names are Pythonic; the server's names are accepted as aliases
    (notification_type -> type). Only is_read changes after creation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    user_id: int | None = None
    internship_id: int | None = None
    type: str = Field(alias="notification_type")
    title: str = ""
    message: str = ""
    is_read: bool = False
    sent_at: datetime | None = None
    delivery_method: str = "websocket"
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _parse_metadata(cls, value: Any) -> Any:
        # The REST history returns metadata as stored: NULL or a JSON string
        if value is None:
            return {}
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return {"raw": value}
        return value

    @property
    def known_type(self) -> NotificationType | None:
        """The type as an enum member, or None for types this client doesn't know."""
        try:
            return NotificationType(self.type)
        except ValueError:
            return None


class NotificationPreferences(BaseModel):
    """
    Client-local notification preferences.

    Pushed to the server on change; the server filters what it sends.
    """

    model_config = ConfigDict(populate_by_name=True)

    enabled_types: set[str] = Field(
        default_factory=lambda: set(DEFAULT_ENABLED_TYPES), alias="enabledTypes"
    )
    enable_sound: bool = Field(default=True, alias="enableSound")
    enable_desktop: bool = Field(default=True, alias="enableDesktop")

    def is_enabled(self, notification_type: str) -> bool:
        return notification_type in self.enabled_types

    def to_wire(self) -> dict[str, Any]:
        """Payload for the update_notification_preferences command."""
        return {
            "enabledTypes": sorted(self.enabled_types),
            "enableSound": self.enable_sound,
            "enableDesktop": self.enable_desktop,
        }


class InternshipSummary(BaseModel):
    """The part of an internship the client needs for a toast."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    title: str = "Untitled internship"
    company_name: str = "Unknown company"


class NewInternshipPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    internship: InternshipSummary


class DeadlineReminderPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    internship_title: str
    company_name: str
    internship_id: int | None = None


@dataclass(frozen=True, slots=True)
class WireFrame:
    """
    One JSON text frame: {"type": <event>, "data": <payload>}.

    The payload is opaque here; consumers validate the shapes they use.
    """

    event: str
    data: Any = None

    @classmethod
    def decode(cls, raw: str | bytes) -> Self:
        """
        Parse a raw frame.

        Raises:
            ProtocolError: Not JSON, not an object, or missing a string "type".
        """
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProtocolError(f"invalid JSON ({e.__class__.__name__})") from e

        if not isinstance(payload, dict):
            raise ProtocolError("frame is not a JSON object")

        event = payload.get("type")
        if not isinstance(event, str) or not event:
            raise ProtocolError("frame missing 'type'")

        return cls(event=event, data=payload.get("data"))

    def encode(self) -> str:
        frame: dict[str, Any] = {"type": self.event}
        if self.data is not None:
            frame["data"] = self.data
        return json.dumps(frame, default=str)
