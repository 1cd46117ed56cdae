"""
Connection state for the real-time session.

Mutated only by ConnectionManager; UI code reads snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class ConnectionStatus(str, Enum):
    """Lifecycle status shown to the user."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    # Reconnection attempts exhausted; needs a manual reconnect
    FAILED = "failed"


@dataclass(slots=True)
class ConnectionState:
    """
    Mutable connection state owned by the ConnectionManager.

    reconnect_attempts is reset to 0 whenever the session becomes connected;
    use mark_connected() rather than setting connected directly.
    """

    connected: bool = False
    reconnect_attempts: int = 0
    session_id: str | None = None
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    failure_acknowledged: bool = False

    def mark_connecting(self) -> None:
        self.connected = False
        self.status = ConnectionStatus.CONNECTING

    def mark_connected(self, session_id: str | None = None) -> None:
        self.connected = True
        self.reconnect_attempts = 0
        self.status = ConnectionStatus.CONNECTED
        self.failure_acknowledged = False
        if session_id is not None:
            self.session_id = session_id

    def mark_reconnecting(self) -> None:
        self.connected = False
        self.status = ConnectionStatus.RECONNECTING

    def record_reconnect_failure(self) -> int:
        self.reconnect_attempts += 1
        return self.reconnect_attempts

    def mark_failed(self) -> None:
        self.connected = False
        self.session_id = None
        self.status = ConnectionStatus.FAILED
        self.failure_acknowledged = False

    def mark_disconnected(self) -> None:
        """Explicit disconnect: back to the initial state."""
        self.connected = False
        self.reconnect_attempts = 0
        self.session_id = None
        self.status = ConnectionStatus.DISCONNECTED
        self.failure_acknowledged = False

    @property
    def needs_attention(self) -> bool:
        """True while a terminal failure has not been acknowledged by the user."""
        return self.status is ConnectionStatus.FAILED and not self.failure_acknowledged

    def snapshot(self) -> ConnectionState:
        """Independent copy for observers."""
        return replace(self)

    def describe(self) -> str:
        """Short status text for indicators."""
        if self.status is ConnectionStatus.CONNECTED:
            return "Connected"
        if self.status is ConnectionStatus.CONNECTING:
            return "Connecting..."
        if self.status is ConnectionStatus.RECONNECTING:
            if self.reconnect_attempts:
                return f"Reconnecting... ({self.reconnect_attempts})"
            return "Reconnecting..."
        if self.status is ConnectionStatus.FAILED:
            return "Connection lost. Please refresh the page."
        return "Disconnected"
