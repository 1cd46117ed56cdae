"""
Process-wide instances for the real-time client.

One notification center per process: every caller of
get_notification_center() shares the same session and ledger. Tests call
reset_singletons() or build their own NotificationCenter instead.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from live_shared.config.logging import get_logger
from live_shared.config.settings import settings

if TYPE_CHECKING:
    from live_client.notification_center import NotificationCenter


logger = get_logger(__name__)


# =============================================================================
# Singleton Instances
# =============================================================================

_notification_center: NotificationCenter | None = None
_singleton_lock = threading.Lock()


def get_notification_center() -> NotificationCenter:
    """
    Get singleton NotificationCenter instance.

    Thread-safe with double-check locking.
    """
    global _notification_center
    if _notification_center is None:
        with _singleton_lock:
            if _notification_center is None:
                from live_client.notification_center import NotificationCenter

                _notification_center = NotificationCenter(settings=settings)
    return _notification_center


def reset_singletons() -> None:
    """
    Tear down and drop the singleton.

    Use in tests to get a fresh instance.
    """
    global _notification_center
    with _singleton_lock:
        if _notification_center is not None:
            _notification_center.teardown()
        _notification_center = None
    logger.debug("Singletons reset")


__all__ = [
    "get_notification_center",
    "reset_singletons",
]
