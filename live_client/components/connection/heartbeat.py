"""
Heartbeat tracking for the real-time session.

The server answers every "ping" command with a "pong" frame. The tracker
records when the last pong (or the session start) was seen; the manager's
heartbeat loop closes the socket when that gets older than the timeout so
the reconnection policy can take over.
"""

from __future__ import annotations

import time
from typing import Callable


class HeartbeatTracker:
    """
    Tracks the last pong time for one session.

    Activity is recorded when:
    - The session becomes connected
    - A pong frame is received
    """

    def __init__(
        self,
        timeout_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize heartbeat tracker.

        Args:
            timeout_seconds: Seconds without a pong before the session is stale.
            clock: Monotonic time source (injectable for tests).
        """
        self._timeout = timeout_seconds
        self._clock = clock
        self._last_heartbeat: float | None = None
        self._pongs_received = 0

    @property
    def timeout(self) -> float:
        """Get the heartbeat timeout in seconds."""
        return self._timeout

    @property
    def last_activity(self) -> float | None:
        """Clock value of the last recorded activity, or None if not tracking."""
        return self._last_heartbeat

    def record(self, timestamp: float | None = None) -> None:
        """
        Record activity.

        Args:
            timestamp: Optional clock value. If None, uses the current time.
        """
        self._last_heartbeat = timestamp if timestamp is not None else self._clock()

    def record_pong(self) -> None:
        self._pongs_received += 1
        self.record()

    def reset(self) -> None:
        """Stop tracking (session closed)."""
        self._last_heartbeat = None

    def is_stale(self) -> bool:
        """
        True if no activity was seen within the timeout.

        Not tracking at all is not stale: there is no session to judge.
        """
        if self._last_heartbeat is None:
            return False
        return self._clock() - self._last_heartbeat > self._timeout

    def get_stats(self) -> dict[str, float | int | None]:
        """Get heartbeat tracker statistics."""
        age = None
        if self._last_heartbeat is not None:
            age = self._clock() - self._last_heartbeat
        return {
            "timeout_seconds": self._timeout,
            "last_heartbeat_age": age,
            "pongs_received": self._pongs_received,
        }
