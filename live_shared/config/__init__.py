"""
Configuration module: settings and logging.
"""

from live_shared.config.settings import Settings, get_settings, settings
from live_shared.config.logging import get_logger, mask_token, setup_logging

__all__ = [
    # settings
    "Settings",
    "get_settings",
    "settings",
    # logging
    "get_logger",
    "mask_token",
    "setup_logging",
]
