"""
Infrastructure helpers shared by the client components.
"""

from live_shared.infrastructure.correlation import (
    SessionIdFilter,
    bind_session_id,
    get_session_id,
)

__all__ = ["SessionIdFilter", "bind_session_id", "get_session_id"]
