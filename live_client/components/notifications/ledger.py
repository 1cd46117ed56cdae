"""
Notification Ledger - client-side record of received notifications.

Newest-first, bounded: when an insert exceeds the retention cap the oldest
entries fall off the tail. The unread count is maintained on every
mutation rather than recomputed.
"""

from __future__ import annotations

from collections import deque
from typing import Callable

from live_client.components.core.constants import WSConstants
from live_client.components.events.types import Notification
from live_shared.config.logging import get_logger

logger = get_logger(__name__)

LedgerListener = Callable[["NotificationLedger"], None]


class NotificationLedger:
    """
    Ordered, capped notification history with read/unread tracking.

    Invariants after every mutation:
    - len(ledger) <= capacity
    - ids are unique
    - unread_count == number of entries with is_read False

    All mutation is synchronous; the ledger is only touched from the event
    loop, so no locking is needed.
    """

    def __init__(self, capacity: int = WSConstants.NOTIFICATION_RETENTION) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._entries: deque[Notification] = deque(maxlen=capacity)
        self._unread_count = 0
        self._listeners: list[LedgerListener] = []

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def notifications(self) -> tuple[Notification, ...]:
        """Snapshot of the entries, newest first."""
        return tuple(self._entries)

    def get(self, notification_id: int) -> Notification | None:
        for entry in self._entries:
            if entry.id == notification_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, notification_id: object) -> bool:
        return any(entry.id == notification_id for entry in self._entries)

    # =========================================================================
    # Mutations
    # =========================================================================

    def insert(self, notification: Notification) -> None:
        """
        Prepend a notification.

        An entry with the same id is replaced (and moves to the front).
        If the ledger is full, the oldest entry is discarded.
        """
        existing = self.get(notification.id)
        if existing is not None:
            self._entries.remove(existing)
            if not existing.is_read:
                self._unread_count -= 1
            logger.debug("Replacing notification with duplicate id", notification_id=notification.id)

        if len(self._entries) == self._capacity:
            evicted = self._entries[-1]
            if not evicted.is_read:
                self._unread_count -= 1

        # deque(maxlen) drops the tail entry on appendleft when full
        self._entries.appendleft(notification)
        if not notification.is_read:
            self._unread_count += 1

        self._notify()

    def mark_read(self, notification_id: int) -> bool:
        """
        Mark one notification read.

        An unknown id is a no-op: the entry may have aged out of retention.

        Returns:
            True if an unread entry was flipped.
        """
        entry = self.get(notification_id)
        if entry is None or entry.is_read:
            return False

        entry.is_read = True
        self._unread_count = max(0, self._unread_count - 1)
        self._notify()
        return True

    def mark_all_read(self) -> int:
        """
        Mark every entry read.

        Returns:
            Number of entries that were unread.
        """
        flipped = 0
        for entry in self._entries:
            if not entry.is_read:
                entry.is_read = True
                flipped += 1
        self._unread_count = 0
        self._notify()
        return flipped

    def clear(self) -> None:
        """Empty the ledger. Local only; nothing is deleted on the server."""
        self._entries.clear()
        self._unread_count = 0
        self._notify()

    # =========================================================================
    # Change listeners
    # =========================================================================

    def add_listener(self, listener: LedgerListener) -> None:
        """Call listener(ledger) after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: LedgerListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("Error in ledger listener", error=str(e), exc_info=True)
