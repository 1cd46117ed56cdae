"""
Connection lifecycle components: state, transport, heartbeat.
"""

from live_client.components.connection.heartbeat import HeartbeatTracker
from live_client.components.connection.state import ConnectionState, ConnectionStatus
from live_client.components.connection.transport import (
    Transport,
    TransportFactory,
    WebsocketsTransport,
    websocket_transport_factory,
)

__all__ = [
    "ConnectionState",
    "ConnectionStatus",
    "HeartbeatTracker",
    "Transport",
    "TransportFactory",
    "WebsocketsTransport",
    "websocket_transport_factory",
]
