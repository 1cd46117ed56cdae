"""
Terminal adapters for the side-effect capabilities, built on rich.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel

from live_client.components.effects.capabilities import PermissionState, ToastSeverity

_SEVERITY_STYLES: dict[ToastSeverity, str] = {
    ToastSeverity.SUCCESS: "bold green",
    ToastSeverity.INFO: "cyan",
    ToastSeverity.WARNING: "bold yellow",
    ToastSeverity.ERROR: "bold red",
}


class RichToaster:
    """Prints toasts as styled one-liners. Duration has no meaning on a terminal."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def show(self, message: str, severity: ToastSeverity, *, duration: float) -> None:
        style = _SEVERITY_STYLES.get(severity, "")
        self._console.print(f"[{style}]{severity.value.upper():>7}[/] {message}", highlight=False)


class BellSoundPlayer:
    def __init__(self, console: Console) -> None:
        self._console = console

    def play(self) -> None:
        self._console.bell()


class RichDesktopNotifier:
    """
    Renders "desktop" notifications as panels.

    Permission is decided up front by the caller (the --desktop flag of the
    CLI); request_permission() reports that decision.
    """

    def __init__(self, console: Console, *, grant: bool = False) -> None:
        self._console = console
        self._grant = grant

    @property
    def supported(self) -> bool:
        return self._console.is_terminal

    async def request_permission(self) -> PermissionState:
        return PermissionState.GRANTED if self._grant else PermissionState.DENIED

    def show(self, title: str, body: str, *, tag: str) -> None:
        self._console.print(Panel(body, title=title, subtitle=tag, expand=False))


__all__ = ["BellSoundPlayer", "RichDesktopNotifier", "RichToaster"]
