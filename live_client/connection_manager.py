"""
Real-time Connection Manager.

Owns the single transport session of this process: connect with an
application-level handshake, reconnect with a bounded fixed-delay policy,
fire-and-forget command emission, and forwarding of server frames to the
EventRouter.

Lifecycle events dispatched on the router:
- connected        handshake acknowledged (payload from the server)
- disconnected     session lost or closed ({"reason": ...})
- reconnected      transport reopened ({"attempt_number": n})
- reconnect_error  one reconnection attempt failed ({"error": ..., "attempt": n})
- reconnect_failed attempts exhausted, terminal ({"attempts": n, "reason": ...})
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

from live_client.components.connection.heartbeat import HeartbeatTracker
from live_client.components.connection.state import ConnectionState, ConnectionStatus
from live_client.components.connection.transport import Transport, TransportFactory
from live_client.components.core.constants import (
    NON_RETRYABLE_CLOSE_CODES,
    WSCloseCode,
    WSConstants,
)
from live_client.components.events.router import EventRouter, event_key
from live_client.components.events.types import (
    ClientEvent,
    Command,
    ServerEvent,
    WireFrame,
    normalize_event_name,
)
from live_client.components.resilience.retry import (
    RetryConfig,
    calculate_delay,
    should_retry,
)
from live_shared.config.logging import get_logger, mask_token
from live_shared.infrastructure.correlation import bind_session_id
from live_shared.utils.exceptions import (
    ConnectionFailedError,
    HandshakeTimeoutError,
    ProtocolError,
    TransportClosedError,
)

logger = get_logger(__name__)


def _consume_exception(future: asyncio.Future) -> None:
    # A pending connect may fail with no caller left awaiting it
    if not future.cancelled():
        future.exception()


class ConnectionManager:
    """
    Manages the real-time session for one authenticated user.

    Concurrency contract (single event loop):
    - connect() while connected returns immediately.
    - connect() while a connect is pending awaits the same pending result;
      no second transport is created.
    - disconnect() is synchronous and idempotent; it cancels the session
      task, which closes the transport.
    - emit() while disconnected drops the command with a warning.
    """

    def __init__(
        self,
        router: EventRouter,
        *,
        url: str,
        transport_factory: TransportFactory,
        handshake_timeout: float = WSConstants.HANDSHAKE_TIMEOUT,
        retry_config: RetryConfig | None = None,
        heartbeat_interval: float = 0.0,
        heartbeat_timeout: float = WSConstants.HEARTBEAT_TIMEOUT,
    ) -> None:
        self._router = router
        self._url = url
        self._transport_factory = transport_factory
        self._handshake_timeout = handshake_timeout
        self._retry_config = retry_config or RetryConfig(
            delay=WSConstants.RECONNECT_DELAY,
            max_attempts=WSConstants.RECONNECT_ATTEMPTS,
        )
        self._heartbeat_interval = heartbeat_interval
        self._heartbeat = HeartbeatTracker(timeout_seconds=heartbeat_timeout)

        self._state = ConnectionState()
        self._pending: asyncio.Future[None] | None = None
        self._session_task: asyncio.Task[None] | None = None
        self._closing: set[asyncio.Task[None]] = set()

        # Per-connection helpers; reset whenever the connection drops
        self._outbox: asyncio.Queue[WireFrame] | None = None
        self._writer_task: asyncio.Task[None] | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None

    # =========================================================================
    # Public properties
    # =========================================================================

    @property
    def state(self) -> ConnectionState:
        """Snapshot of the connection state."""
        return self._state.snapshot()

    @property
    def is_connected(self) -> bool:
        return self._state.connected

    @property
    def heartbeat(self) -> HeartbeatTracker:
        return self._heartbeat

    # =========================================================================
    # Connection management
    # =========================================================================

    async def connect(self, token: str) -> None:
        """
        Open the session and wait for the server's handshake.

        Raises:
            HandshakeTimeoutError: The socket opened but no "connected" frame
                arrived within the handshake timeout.
            ConnectionFailedError: The socket could not be opened, closed
                before the handshake, or disconnect() was called meanwhile.
        """
        if self._state.connected:
            return

        if self._pending is None:
            loop = asyncio.get_running_loop()
            pending: asyncio.Future[None] = loop.create_future()
            pending.add_done_callback(_consume_exception)
            self._pending = pending

            # A leftover session (reconnecting or failed) is replaced
            previous = self._session_task
            transport = self._transport_factory()
            self._state.mark_connecting()

            logger.info("Connecting to real-time server", url=self._url, token=mask_token(token))
            self._session_task = loop.create_task(
                self._run_session(previous, transport, token, pending),
                name="realtime-session",
            )

        await asyncio.shield(self._pending)

    def disconnect(self) -> None:
        """
        Tear down the session.

        Synchronously flips the state to disconnected; the transport is
        closed by the cancelled session task. Safe to call repeatedly.
        """
        was_active = self._state.status is not ConnectionStatus.DISCONNECTED

        task, self._session_task = self._session_task, None
        if task is not None and not task.done():
            task.cancel()
            self._closing.add(task)
            task.add_done_callback(self._closing.discard)

        if self._pending is not None:
            self._fail_pending(ConnectionFailedError("disconnected by client"))
        self._stop_helpers()
        self._state.mark_disconnected()

        if was_active:
            logger.info("Disconnected from real-time server")
            self._router.dispatch(ClientEvent.DISCONNECTED, {"reason": "client disconnect"})

    async def wait_closed(self) -> None:
        """Wait until a cancelled session task finished closing its transport."""
        if self._closing:
            await asyncio.wait(set(self._closing))

    def acknowledge_failure(self) -> None:
        """The user saw the terminal failure indicator."""
        if self._state.status is ConnectionStatus.FAILED:
            self._state.failure_acknowledged = True

    # =========================================================================
    # Outbound commands
    # =========================================================================

    def emit(self, event: str | Enum, payload: Any = None) -> None:
        """
        Fire-and-forget send.

        While disconnected the command is dropped (logged, not raised, not
        queued for replay).
        """
        name = event_key(event)
        if not self._state.connected or self._outbox is None:
            logger.warning("Cannot emit event: not connected", event_name=name)
            return
        self._outbox.put_nowait(WireFrame(event=name, data=payload))

    # =========================================================================
    # Session task
    # =========================================================================

    async def _run_session(
        self,
        previous: asyncio.Task[None] | None,
        transport: Transport,
        token: str,
        pending: asyncio.Future[None],
    ) -> None:
        if previous is not None:
            previous.cancel()
            await asyncio.wait({previous})

        reader: asyncio.Task[TransportClosedError] | None = None
        try:
            try:
                reader = await self._open_and_handshake(transport, token, pending)
            except ConnectionFailedError as e:
                self._state.mark_disconnected()
                self._fail_pending(e)
                return

            while True:
                closed = await reader
                self._stop_helpers()
                self._state.mark_reconnecting()
                logger.warning(
                    "Real-time connection lost",
                    reason=closed.reason,
                    code=closed.code,
                )
                self._router.dispatch(
                    ClientEvent.DISCONNECTED, {"reason": closed.reason, "code": closed.code}
                )

                if closed.code in NON_RETRYABLE_CLOSE_CODES:
                    self._give_up(reason=f"server closed the session ({closed.reason})")
                    return

                reader = await self._reconnect(transport, token)
                if reader is None:
                    return
        finally:
            if reader is not None and not reader.done():
                reader.cancel()
            self._stop_helpers()
            await transport.close()

    async def _open_and_handshake(
        self,
        transport: Transport,
        token: str,
        pending: asyncio.Future[None],
    ) -> asyncio.Task[TransportClosedError]:
        """
        Open the transport and wait for the "connected" frame.

        Frames that arrive before the handshake are dispatched normally.

        Returns:
            The running reader task.
        """
        await transport.open(self._url, token)

        reader = asyncio.get_running_loop().create_task(self._read_loop(transport))
        try:
            done, _ = await asyncio.wait(
                {reader, pending},
                timeout=self._handshake_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            reader.cancel()
            raise

        if pending in done:
            return reader

        reader.cancel()
        await asyncio.wait({reader})
        if reader in done:
            raise ConnectionFailedError("transport closed before handshake", url=self._url)
        raise HandshakeTimeoutError(self._handshake_timeout, url=self._url)

    async def _reconnect(
        self,
        transport: Transport,
        token: str,
    ) -> asyncio.Task[TransportClosedError] | None:
        """
        Reopen the transport with the bounded fixed-delay policy.

        Returns:
            The new reader task, or None when attempts are exhausted.
        """
        config = self._retry_config
        attempt = 0

        while should_retry(attempt, config.max_attempts):
            delay = calculate_delay(attempt, config)
            await asyncio.sleep(delay)
            attempt += 1

            try:
                await transport.open(self._url, token)
            except ConnectionFailedError as e:
                failures = self._state.record_reconnect_failure()
                logger.warning(
                    "Reconnection attempt failed",
                    attempt=failures,
                    max_attempts=config.max_attempts,
                    error=e.reason,
                )
                self._router.dispatch(
                    ClientEvent.RECONNECT_ERROR, {"error": e.reason, "attempt": failures}
                )
                continue

            self._on_connected(transport)
            logger.info("Reconnected to real-time server", attempt_number=attempt)
            self._router.dispatch(ClientEvent.RECONNECTED, {"attempt_number": attempt})
            return asyncio.get_running_loop().create_task(self._read_loop(transport))

        self._give_up(reason="reconnection attempts exhausted")
        return None

    def _give_up(self, reason: str) -> None:
        attempts = self._state.reconnect_attempts
        self._state.mark_failed()
        logger.error(
            "Real-time connection failed permanently",
            attempts=attempts,
            reason=reason,
        )
        self._router.dispatch(
            ClientEvent.RECONNECT_FAILED, {"attempts": attempts, "reason": reason}
        )

    # =========================================================================
    # Inbound frames
    # =========================================================================

    async def _read_loop(self, transport: Transport) -> TransportClosedError:
        """
        Receive frames until the transport closes.

        Returns:
            The close error describing why the loop ended.
        """
        with bind_session_id(transport.session_id):
            while True:
                try:
                    frame = await transport.receive()
                except ProtocolError:
                    # Already logged; the socket itself is still usable
                    continue
                except TransportClosedError as e:
                    return e
                self._handle_frame(frame, transport)

    def _handle_frame(self, frame: WireFrame, transport: Transport) -> None:
        if frame.event == ServerEvent.CONNECTED.value:
            pending = self._pending
            if pending is not None and not pending.done():
                self._on_connected(transport)
                self._pending = None
                pending.set_result(None)
                logger.info("Real-time session ready", session_id=transport.session_id)
            self._router.dispatch(ClientEvent.CONNECTED, frame.data or {})
            return

        if frame.event == ServerEvent.PONG.value:
            self._heartbeat.record_pong()

        self._router.dispatch(normalize_event_name(frame.event), frame.data)

    # =========================================================================
    # Per-connection helpers
    # =========================================================================

    def _on_connected(self, transport: Transport) -> None:
        self._state.mark_connected(transport.session_id)
        self._start_helpers(transport)

    def _start_helpers(self, transport: Transport) -> None:
        self._stop_helpers()
        loop = asyncio.get_running_loop()

        outbox: asyncio.Queue[WireFrame] = asyncio.Queue()
        self._outbox = outbox
        self._writer_task = loop.create_task(self._write_loop(transport, outbox))

        self._heartbeat.record()
        if self._heartbeat_interval > 0:
            self._heartbeat_task = loop.create_task(self._heartbeat_loop(transport))

    def _stop_helpers(self) -> None:
        self._outbox = None
        for task in (self._writer_task, self._heartbeat_task):
            if task is not None and not task.done():
                task.cancel()
        self._writer_task = None
        self._heartbeat_task = None
        self._heartbeat.reset()

    async def _write_loop(self, transport: Transport, outbox: asyncio.Queue[WireFrame]) -> None:
        while True:
            frame = await outbox.get()
            try:
                await transport.send(frame)
            except TransportClosedError:
                logger.warning("Dropping command, transport closed", event_name=frame.event)
                return

    async def _heartbeat_loop(self, transport: Transport) -> None:
        while True:
            await asyncio.sleep(self._heartbeat_interval)
            if self._heartbeat.is_stale():
                logger.warning(
                    "Heartbeat timed out, closing connection",
                    **self._heartbeat.get_stats(),
                )
                await transport.close(WSCloseCode.HEARTBEAT_TIMEOUT, "heartbeat timeout")
                return
            self.emit(Command.PING)

    def _fail_pending(self, error: ConnectionFailedError) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.set_exception(error)
