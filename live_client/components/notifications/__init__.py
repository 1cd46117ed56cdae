"""
Notification ledger.
"""

from live_client.components.notifications.ledger import NotificationLedger

__all__ = ["NotificationLedger"]
