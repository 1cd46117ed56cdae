"""
Real-time client constants.

Centralized constants with documentation explaining the value of each.
Runtime values come from live_shared.config.settings; the constants here
are the compile-time defaults those settings fall back to.
"""

from enum import IntEnum
from typing import Final

__all__ = [
    "NON_RETRYABLE_CLOSE_CODES",
    "WSCloseCode",
    "WSConstants",
]


class WSCloseCode(IntEnum):
    """
    WebSocket close codes the client sends or understands.

    Standard codes (1000-1999) from RFC 6455.
    Custom codes (4000-4999) for application-specific errors.
    """

    # Standard codes (RFC 6455)
    NORMAL = 1000  # Normal closure (explicit disconnect)
    GOING_AWAY = 1001  # Server shutting down or client leaving
    PROTOCOL_ERROR = 1002
    POLICY_VIOLATION = 1008
    MESSAGE_TOO_BIG = 1009
    SERVER_ERROR = 1011

    # Custom application codes (4000-4999)
    AUTH_FAILED = 4001  # Token rejected; reconnecting with the same token is pointless
    FORBIDDEN = 4003
    HEARTBEAT_TIMEOUT = 4008  # Client closed the socket after missing pongs


# Close codes after which the reconnection policy must not run
NON_RETRYABLE_CLOSE_CODES: Final[frozenset[int]] = frozenset({
    WSCloseCode.AUTH_FAILED,
    WSCloseCode.FORBIDDEN,
})


class WSConstants:
    """
    Real-time client operational constants.

    These are defaults; Settings fields with the same meaning take
    precedence at runtime.
    """

    # ==========================================================================
    # Session Constants
    # ==========================================================================

    # HANDSHAKE_TIMEOUT: 10 seconds
    # The socket being open only means the TCP/upgrade succeeded. The session
    # is usable once the server authenticated the token and sent "connected".
    HANDSHAKE_TIMEOUT: Final[float] = 10.0

    # RECONNECT_ATTEMPTS: 5 / RECONNECT_DELAY: 1 second
    # Fixed delay, bounded attempts. After the last failure the user gets a
    # terminal "connection lost" status instead of silent retries.
    RECONNECT_ATTEMPTS: Final[int] = 5
    RECONNECT_DELAY: Final[float] = 1.0

    # HEARTBEAT_INTERVAL: 25 seconds / HEARTBEAT_TIMEOUT: 60 seconds
    # Timeout is more than 2x the interval so a single lost pong is tolerated.
    HEARTBEAT_INTERVAL: Final[float] = 25.0
    HEARTBEAT_TIMEOUT: Final[float] = 60.0

    # ==========================================================================
    # Ledger Constants
    # ==========================================================================

    # NOTIFICATION_RETENTION: 100
    # Most recent notifications kept in memory; older ones are discarded.
    NOTIFICATION_RETENTION: Final[int] = 100

    # ==========================================================================
    # Toast Durations (seconds)
    # ==========================================================================

    TOAST_NOTIFICATION_DURATION: Final[float] = 5.0
    TOAST_NEW_INTERNSHIP_DURATION: Final[float] = 7.0
    TOAST_DEADLINE_DURATION: Final[float] = 10.0
    TOAST_CONNECTION_DURATION: Final[float] = 3.0
    TOAST_ERROR_DURATION: Final[float] = 5.0
