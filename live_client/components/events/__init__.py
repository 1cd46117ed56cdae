"""
Event handling components.
"""

from live_client.components.events.router import EventCallback, EventRouter, event_key
from live_client.components.events.types import (
    ClientEvent,
    Command,
    DeadlineReminderPayload,
    NewInternshipPayload,
    Notification,
    NotificationPreferences,
    NotificationType,
    ServerEvent,
    WireFrame,
    normalize_event_name,
)

__all__ = [
    # Router
    "EventCallback",
    "EventRouter",
    "event_key",
    # Types
    "ClientEvent",
    "Command",
    "DeadlineReminderPayload",
    "NewInternshipPayload",
    "Notification",
    "NotificationPreferences",
    "NotificationType",
    "ServerEvent",
    "WireFrame",
    "normalize_event_name",
]
