"""
Pytest configuration and fixtures for the real-time client tests.

FakeTransport stands in for the WebSocket: tests push server frames into
it and inspect what the client sent.
"""

import asyncio
from typing import Any

import pytest

from live_client.components.core.constants import WSCloseCode
from live_client.components.events.router import EventRouter
from live_client.components.events.types import Notification, WireFrame
from live_client.components.resilience.retry import RetryConfig
from live_client.connection_manager import ConnectionManager
from live_shared.config.settings import Settings
from live_shared.utils.exceptions import TransportClosedError


class FakeTransport:
    """
    In-memory transport.

    open_errors: exceptions raised by successive open() calls; None in the
    list means that attempt succeeds.
    auto_handshake: queue a "connected" frame on every successful open.
    """

    def __init__(self, *, auto_handshake: bool = True, open_errors: list | None = None):
        self.auto_handshake = auto_handshake
        self.open_errors = list(open_errors or [])
        self.open_calls: list[tuple[str, str]] = []
        self.close_calls: list[int] = []
        self.sent: list[WireFrame] = []
        self.is_open = False
        self._opens = 0
        self._inbox: asyncio.Queue = asyncio.Queue()

    @property
    def session_id(self) -> str | None:
        return f"fake-{self._opens}" if self.is_open else None

    async def open(self, url: str, token: str) -> None:
        self.open_calls.append((url, token))
        if self.open_errors:
            error = self.open_errors.pop(0)
            if error is not None:
                raise error
        self._opens += 1
        self._inbox = asyncio.Queue()
        self.is_open = True
        if self.auto_handshake:
            self.push("connected", {"timestamp": "2024-01-01T00:00:00Z"})

    async def receive(self) -> WireFrame:
        item = await self._inbox.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def send(self, frame: WireFrame) -> None:
        if not self.is_open:
            raise TransportClosedError("not open")
        self.sent.append(frame)

    async def close(self, code: int = WSCloseCode.NORMAL, reason: str = "") -> None:
        self.close_calls.append(int(code))
        if self.is_open:
            self.is_open = False
            self._inbox.put_nowait(TransportClosedError(reason or "closed", code=int(code)))

    # Test helpers

    def push(self, event: str, data: Any = None) -> None:
        """Deliver a server frame."""
        self._inbox.put_nowait(WireFrame(event=event, data=data))

    def push_error(self, error: Exception) -> None:
        self._inbox.put_nowait(error)

    def drop(self, code: int | None = None, reason: str = "connection lost") -> None:
        """Simulate the server side going away."""
        self.is_open = False
        self._inbox.put_nowait(TransportClosedError(reason, code=code))

    def sent_types(self) -> list[str]:
        return [frame.event for frame in self.sent]


class FakeTransportFactory:
    """Counts transport creations; every transport gets the same options."""

    def __init__(self, **options: Any):
        self.options = options
        self.created: list[FakeTransport] = []

    def __call__(self) -> FakeTransport:
        transport = FakeTransport(**self.options)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


async def settle(rounds: int = 10) -> None:
    """Let pending callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_notification(
    notification_id: int,
    notification_type: str = "new_match",
    is_read: bool = False,
    **fields: Any,
) -> Notification:
    return Notification(
        id=notification_id,
        user_id=1,
        notification_type=notification_type,
        title=fields.pop("title", f"Notification {notification_id}"),
        message=fields.pop("message", f"Message {notification_id}"),
        is_read=is_read,
        **fields,
    )


def notification_payload(notification_id: int, notification_type: str = "new_match", **fields: Any) -> dict:
    """Wire shape of a new_notification frame."""
    payload = {
        "id": notification_id,
        "user_id": 1,
        "internship_id": None,
        "notification_type": notification_type,
        "title": f"Notification {notification_id}",
        "message": f"Message {notification_id}",
        "is_read": False,
        "sent_at": "2024-01-01T12:00:00Z",
        "delivery_method": "websocket",
        "metadata": None,
    }
    payload.update(fields)
    return payload


def make_manager(
    factory: FakeTransportFactory,
    router: EventRouter | None = None,
    **overrides: Any,
) -> ConnectionManager:
    options: dict[str, Any] = {
        "url": "ws://test/ws",
        "transport_factory": factory,
        "handshake_timeout": 1.0,
        "retry_config": RetryConfig(delay=0.0, max_attempts=5),
        "heartbeat_interval": 0.0,
    }
    options.update(overrides)
    return ConnectionManager(router or EventRouter(), **options)


@pytest.fixture
def router():
    return EventRouter()


@pytest.fixture
def test_settings():
    """Settings tuned for fast tests: no heartbeat, no reconnect delay."""
    return Settings(
        ws_url="ws://test/ws",
        api_url="http://api.test",
        access_token="",
        ws_handshake_timeout=1.0,
        ws_reconnect_attempts=5,
        ws_reconnect_delay=0.0,
        ws_heartbeat_interval=0.0,
        notification_retention=100,
        _env_file=None,
    )
