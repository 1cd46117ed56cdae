"""
Utilities: exception hierarchy.
"""

from live_shared.utils.exceptions import (
    ApiError,
    ConnectionFailedError,
    HandshakeTimeoutError,
    ProtocolError,
    RealtimeError,
    TransportClosedError,
)

__all__ = [
    "ApiError",
    "ConnectionFailedError",
    "HandshakeTimeoutError",
    "ProtocolError",
    "RealtimeError",
    "TransportClosedError",
]
