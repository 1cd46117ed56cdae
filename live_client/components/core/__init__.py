"""
Core components: constants and process-wide instances.
"""

from live_client.components.core.constants import (
    NON_RETRYABLE_CLOSE_CODES,
    WSCloseCode,
    WSConstants,
)
from live_client.components.core.dependencies import (
    get_notification_center,
    reset_singletons,
)

__all__ = [
    # Constants
    "NON_RETRYABLE_CLOSE_CODES",
    "WSCloseCode",
    "WSConstants",
    # Dependencies
    "get_notification_center",
    "reset_singletons",
]
