"""
Reconnection policy.
"""

from live_client.components.resilience.retry import (
    RetryConfig,
    calculate_delay,
    create_reconnect_config,
    should_retry,
)

__all__ = [
    "RetryConfig",
    "calculate_delay",
    "create_reconnect_config",
    "should_retry",
]
