"""
Centralized exceptions for the real-time client.

Usage:
    from live_shared.utils.exceptions import ConnectionFailedError, HandshakeTimeoutError

    raise HandshakeTimeoutError(timeout=10.0)
    raise ConnectionFailedError("Transport closed before handshake", url=url)
"""

from typing import Any

from live_shared.config.logging import get_logger

logger = get_logger(__name__)


class RealtimeError(Exception):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class so every failure leaves
    one structured log line with its context.
    """

    def __init__(
        self,
        detail: str,
        log_level: str = "warning",
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, error_type=type(self).__name__, **log_context)

        self.detail = detail
        self.context = log_context
        super().__init__(detail)


# =============================================================================
# Transport Errors
# =============================================================================


class ConnectionFailedError(RealtimeError):
    """
    The transport could not be opened, or closed before the session was ready.

    Usage:
        raise ConnectionFailedError("Connection refused", url=url)
    """

    def __init__(self, reason: str, **log_context: Any):
        super().__init__(
            f"Connection failed: {reason}",
            log_level="error",
            reason=reason,
            **log_context,
        )
        self.reason = reason


class HandshakeTimeoutError(ConnectionFailedError):
    """The socket opened but the server never sent the "connected" frame."""

    def __init__(self, timeout: float, **log_context: Any):
        super().__init__(
            f"no handshake acknowledgement within {timeout:g}s",
            timeout=timeout,
            **log_context,
        )
        self.timeout = timeout


class ProtocolError(RealtimeError):
    """
    An inbound frame could not be decoded.

    Raised by the transport codec; the reader logs it and skips the frame.
    """

    def __init__(self, reason: str, **log_context: Any):
        super().__init__(f"Malformed frame: {reason}", reason=reason, **log_context)
        self.reason = reason


class TransportClosedError(RealtimeError):
    """The transport closed while a receive or send was in progress."""

    def __init__(self, reason: str = "closed", code: int | None = None, **log_context: Any):
        super().__init__(
            f"Transport closed: {reason}",
            log_level="info",
            reason=reason,
            code=code,
            **log_context,
        )
        self.reason = reason
        self.code = code


# =============================================================================
# REST Errors
# =============================================================================


class ApiError(RealtimeError):
    """
    REST call failed: HTTP error status or an envelope with success=false.

    Usage:
        raise ApiError("Failed to retrieve notifications", code="NOTIFICATIONS_ERROR", status_code=500)
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        **log_context: Any,
    ):
        super().__init__(
            message,
            log_level="error",
            code=code,
            status_code=status_code,
            **log_context,
        )
        self.code = code
        self.status_code = status_code
