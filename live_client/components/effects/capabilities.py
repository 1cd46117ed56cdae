"""
Host capabilities used by the side-effect dispatcher.

The dispatcher depends only on these protocols. Adapters for a terminal
live in effects.console; the Null* adapters are used when a capability
is not available (headless runs, tests).
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class ToastSeverity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class PermissionState(str, Enum):
    """Desktop notification permission as reported by the host."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class Toaster(Protocol):
    def show(self, message: str, severity: ToastSeverity, *, duration: float) -> None: ...


class SoundPlayer(Protocol):
    def play(self) -> None:
        """
        Play the notification sound.

        May raise when the host refuses playback; callers treat that as
        a non-event.
        """
        ...


class DesktopNotifier(Protocol):
    @property
    def supported(self) -> bool: ...

    async def request_permission(self) -> PermissionState:
        """Prompt the user. Only called while the permission is DEFAULT."""
        ...

    def show(self, title: str, body: str, *, tag: str) -> None: ...


class NullToaster:
    def show(self, message: str, severity: ToastSeverity, *, duration: float) -> None:
        return None


class NullSoundPlayer:
    def play(self) -> None:
        return None


class NullDesktopNotifier:
    """A host without desktop notifications."""

    @property
    def supported(self) -> bool:
        return False

    async def request_permission(self) -> PermissionState:
        return PermissionState.DENIED

    def show(self, title: str, body: str, *, tag: str) -> None:
        return None


__all__ = [
    "DesktopNotifier",
    "NullDesktopNotifier",
    "NullSoundPlayer",
    "NullToaster",
    "PermissionState",
    "SoundPlayer",
    "Toaster",
    "ToastSeverity",
]
