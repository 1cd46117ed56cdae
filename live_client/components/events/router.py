"""
Event Router - fans out dispatched events to registered callbacks.

Decouples the transport's frame names from the components and UI code
that react to them. The ledger, the side-effect dispatcher and any ad hoc
subscriber all register here.

Usage:
    router = EventRouter()
    router.on(ClientEvent.NEW_NOTIFICATION, ledger_callback)
    router.dispatch(ClientEvent.NEW_NOTIFICATION, payload)
"""

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable

from live_shared.config.logging import get_logger

logger = get_logger(__name__)

EventCallback = Callable[[Any], Any]


def event_key(event: str | Enum) -> str:
    """Registry key for an event name; str enums and plain strings are interchangeable."""
    if isinstance(event, Enum):
        return str(event.value)
    return event


class EventRouter:
    """
    Publish/subscribe registry: event name -> ordered list of callbacks.

    Rules:
    - Callbacks run synchronously, in registration order.
    - A callback registered twice runs twice.
    - off() removes the first registration matching by identity.
    - A callback that raises is logged with the event name; the remaining
      callbacks still run and dispatch() never raises.
    """

    def __init__(self) -> None:
        self._callbacks: defaultdict[str, list[EventCallback]] = defaultdict(list)

    def on(self, event: str | Enum, callback: EventCallback) -> None:
        """Register a callback for an event."""
        self._callbacks[event_key(event)].append(callback)

    def off(self, event: str | Enum, callback: EventCallback) -> None:
        """
        Unregister a callback.

        Removing a callback that is not registered is a no-op.
        """
        key = event_key(event)
        callbacks = self._callbacks.get(key)
        if not callbacks:
            return
        for index, registered in enumerate(callbacks):
            if registered is callback:
                del callbacks[index]
                break
        if not callbacks:
            del self._callbacks[key]

    def dispatch(self, event: str | Enum, data: Any = None) -> int:
        """
        Invoke every callback registered for the event.

        Iterates over a snapshot, so callbacks may subscribe or unsubscribe
        while the event is being delivered; changes apply to the next dispatch.

        Returns:
            Number of callbacks that completed without raising.
        """
        key = event_key(event)
        callbacks = tuple(self._callbacks.get(key, ()))
        delivered = 0

        for callback in callbacks:
            try:
                callback(data)
                delivered += 1
            except Exception as e:
                logger.error(
                    "Error in event callback",
                    event_name=key,
                    callback=getattr(callback, "__qualname__", repr(callback)),
                    error=str(e),
                    exc_info=True,
                )

        return delivered

    def listener_count(self, event: str | Enum) -> int:
        """Number of registrations for an event."""
        return len(self._callbacks.get(event_key(event), ()))

    def clear(self) -> None:
        """Drop every registration."""
        self._callbacks.clear()
