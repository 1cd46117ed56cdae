"""
Transport abstraction and the websockets-based implementation.

The ConnectionManager only talks to the Transport protocol, so tests can
drive it with an in-memory transport and the session logic never touches
socket details.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidStatus, InvalidURI

from live_client.components.core.constants import WSCloseCode
from live_client.components.events.types import WireFrame
from live_shared.config.logging import get_logger
from live_shared.config.settings import Settings
from live_shared.utils.exceptions import ConnectionFailedError, TransportClosedError

logger = get_logger(__name__)


class Transport(Protocol):
    """
    One bidirectional push channel.

    A transport instance can be opened again after it closed; the manager
    reuses it across reconnection attempts.
    """

    @property
    def session_id(self) -> str | None: ...

    async def open(self, url: str, token: str) -> None:
        """
        Open the channel authenticated with a bearer token.

        Raises:
            ConnectionFailedError: The channel could not be opened.
        """
        ...

    async def receive(self) -> WireFrame:
        """
        Wait for the next inbound frame.

        Raises:
            TransportClosedError: The channel closed.
            ProtocolError: The frame could not be decoded (channel still usable).
        """
        ...

    async def send(self, frame: WireFrame) -> None:
        """
        Raises:
            TransportClosedError: The channel closed.
        """
        ...

    async def close(self, code: int = WSCloseCode.NORMAL, reason: str = "") -> None: ...


TransportFactory = Callable[[], Transport]


def _close_details(exc: ConnectionClosed) -> tuple[int | None, str]:
    # rcvd is None when the connection dropped without a close frame
    if exc.rcvd is not None:
        return exc.rcvd.code, exc.rcvd.reason or "closed by server"
    return None, "connection lost"


class WebsocketsTransport:
    """
    Transport over a WebSocket using the websockets library.

    Frames are JSON text messages ({"type": ..., "data": ...}). The token
    travels in the Authorization header of the upgrade request.
    """

    def __init__(
        self,
        *,
        open_timeout: float = 10.0,
        close_timeout: float = 5.0,
        max_size: int = 1024 * 1024,
    ) -> None:
        self._open_timeout = open_timeout
        self._close_timeout = close_timeout
        self._max_size = max_size
        self._ws: ClientConnection | None = None

    @property
    def session_id(self) -> str | None:
        if self._ws is None:
            return None
        return str(self._ws.id)

    async def open(self, url: str, token: str) -> None:
        if self._ws is not None:
            await self.close()

        try:
            self._ws = await connect(
                url,
                additional_headers={"Authorization": f"Bearer {token}"},
                open_timeout=self._open_timeout,
                close_timeout=self._close_timeout,
                max_size=self._max_size,
            )
        except InvalidStatus as e:
            status = e.response.status_code
            raise ConnectionFailedError(
                f"server rejected upgrade with HTTP {status}", url=url, status_code=status
            ) from e
        except (InvalidHandshake, InvalidURI) as e:
            raise ConnectionFailedError(str(e), url=url) from e
        except (OSError, asyncio.TimeoutError) as e:
            raise ConnectionFailedError(f"{type(e).__name__}: {e}", url=url) from e

        logger.debug("WebSocket opened", url=url, session_id=self.session_id)

    async def receive(self) -> WireFrame:
        if self._ws is None:
            raise TransportClosedError("not open")
        try:
            raw = await self._ws.recv()
        except ConnectionClosed as e:
            code, reason = _close_details(e)
            raise TransportClosedError(reason, code=code) from e
        return WireFrame.decode(raw)

    async def send(self, frame: WireFrame) -> None:
        if self._ws is None:
            raise TransportClosedError("not open")
        try:
            await self._ws.send(frame.encode())
        except ConnectionClosed as e:
            code, reason = _close_details(e)
            raise TransportClosedError(reason, code=code) from e

    async def close(self, code: int = WSCloseCode.NORMAL, reason: str = "") -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        try:
            await ws.close(code=code, reason=reason)
        except (ConnectionClosed, OSError) as e:
            logger.debug("Error closing WebSocket", error=str(e))


def websocket_transport_factory(settings: Settings) -> TransportFactory:
    """Factory producing WebsocketsTransport instances configured from settings."""

    def factory() -> Transport:
        return WebsocketsTransport(
            open_timeout=settings.ws_handshake_timeout,
            close_timeout=settings.ws_close_timeout,
            max_size=settings.ws_max_message_size,
        )

    return factory


__all__ = [
    "Transport",
    "TransportFactory",
    "WebsocketsTransport",
    "websocket_transport_factory",
]
