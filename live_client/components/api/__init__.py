"""
REST clients.
"""

from live_client.components.api.history import (
    ApiEnvelope,
    NotificationHistoryClient,
    NotificationPage,
)

__all__ = ["ApiEnvelope", "NotificationHistoryClient", "NotificationPage"]
