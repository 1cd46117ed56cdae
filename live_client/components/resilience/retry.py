"""
Retry utilities for the reconnection loop.

The policy is a fixed delay between a bounded number of attempts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from live_shared.config.settings import Settings


# =============================================================================
# Constants
# =============================================================================


# Default delay between attempts in seconds
DEFAULT_DELAY: Final[float] = 1.0

# Default number of attempts before giving up
DEFAULT_MAX_ATTEMPTS: Final[int] = 5


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        delay: Seconds to wait before every attempt (default: 1.0).
        max_attempts: Maximum attempts; 0 disables retrying (default: 5).
    """

    delay: float = DEFAULT_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.delay < 0:
            raise ValueError("delay must not be negative")
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")


# =============================================================================
# Retry Functions
# =============================================================================


def calculate_delay(attempt: int, config: RetryConfig | None = None) -> float:
    """
    Delay before an attempt. The same for every attempt.

    Args:
        attempt: Current attempt number (0-indexed).
        config: Retry configuration (uses defaults if None).

    Example:
        >>> calculate_delay(0, RetryConfig(delay=2.0))
        2.0
        >>> calculate_delay(4, RetryConfig(delay=2.0))
        2.0
    """
    if config is None:
        config = RetryConfig()
    return config.delay


def should_retry(attempt: int, max_attempts: int) -> bool:
    """
    Determine if another retry attempt should be made.

    Args:
        attempt: Attempts made so far.
        max_attempts: Maximum allowed attempts.

    Returns:
        True if should retry, False if max attempts reached.
    """
    return attempt < max_attempts


# =============================================================================
# Factory Functions
# =============================================================================


def create_reconnect_config(settings: Settings) -> RetryConfig:
    """Build the reconnection policy: ws_reconnect_delay, at most ws_reconnect_attempts tries."""
    return RetryConfig(
        delay=settings.ws_reconnect_delay,
        max_attempts=settings.ws_reconnect_attempts,
    )
