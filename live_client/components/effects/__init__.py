"""
User-visible side effects and the host capabilities they use.
"""

from live_client.components.effects.capabilities import (
    DesktopNotifier,
    NullDesktopNotifier,
    NullSoundPlayer,
    NullToaster,
    PermissionState,
    SoundPlayer,
    Toaster,
    ToastSeverity,
)
from live_client.components.effects.dispatcher import DesktopPermission, SideEffectDispatcher

__all__ = [
    "DesktopNotifier",
    "DesktopPermission",
    "NullDesktopNotifier",
    "NullSoundPlayer",
    "NullToaster",
    "PermissionState",
    "SideEffectDispatcher",
    "SoundPlayer",
    "Toaster",
    "ToastSeverity",
]
