"""
Side-Effect Dispatcher - turns pushed events into toasts, sounds and
desktop notifications.

Every effect is best-effort: a failing capability is logged and the
event pipeline carries on. Nothing here raises back into the router.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import ValidationError

from live_client.components.core.constants import WSConstants
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
from live_client.components.events.router import EventRouter
from live_client.components.events.types import (
    ClientEvent,
    DeadlineReminderPayload,
    NewInternshipPayload,
    Notification,
    NotificationPreferences,
    NotificationType,
)
from live_shared.config.logging import get_logger

logger = get_logger(__name__)


# Toast severity per notification type; anything else is INFO
NOTIFICATION_SEVERITY: dict[str, ToastSeverity] = {
    NotificationType.NEW_MATCH.value: ToastSeverity.SUCCESS,
    NotificationType.DEADLINE_REMINDER.value: ToastSeverity.WARNING,
    NotificationType.STATUS_CHANGE.value: ToastSeverity.INFO,
}

CONNECTION_LOST_MESSAGE = "Connection lost. Please refresh the page."


def severity_for(notification_type: str) -> ToastSeverity:
    return NOTIFICATION_SEVERITY.get(notification_type, ToastSeverity.INFO)


class DesktopPermission:
    """
    Desktop notification permission: DEFAULT -> GRANTED | DENIED.

    DENIED is sticky: once refused, request() never prompts again.
    An unsupported host starts (and stays) DENIED.
    """

    def __init__(self, notifier: DesktopNotifier) -> None:
        self._notifier = notifier
        self._state = PermissionState.DEFAULT if notifier.supported else PermissionState.DENIED

    @property
    def state(self) -> PermissionState:
        return self._state

    @property
    def granted(self) -> bool:
        return self._state is PermissionState.GRANTED

    async def request(self) -> PermissionState:
        if self._state is not PermissionState.DEFAULT:
            return self._state

        try:
            result = await self._notifier.request_permission()
        except Exception as e:
            logger.warning("Desktop permission request failed", error=str(e))
            return self._state

        # A prompt dismissed without a choice leaves the state at DEFAULT
        self._state = PermissionState(result)
        logger.info("Desktop notification permission", permission=self._state.value)
        return self._state


class SideEffectDispatcher:
    """
    Subscribes to the router and performs the user-visible effects.

    Handled events:
    - new_notification: toast by type, sound, desktop notification
    - new_internship: success toast, sound
    - deadline_reminder: warning toast, sound
    - server_shutdown: info toast
    - reconnected: success toast
    - reconnect_failed: one error toast until the next successful connect
    """

    def __init__(
        self,
        toaster: Toaster | None = None,
        sound_player: SoundPlayer | None = None,
        desktop_notifier: DesktopNotifier | None = None,
        preferences: NotificationPreferences | None = None,
    ) -> None:
        self._toaster = toaster or NullToaster()
        self._sound_player = sound_player or NullSoundPlayer()
        self._desktop_notifier = desktop_notifier or NullDesktopNotifier()
        self._permission = DesktopPermission(self._desktop_notifier)
        self.preferences = preferences or NotificationPreferences()

        self._failure_toast_shown = False
        self._handlers: dict[ClientEvent, Callable[[Any], None]] = {
            ClientEvent.NEW_NOTIFICATION: self._on_new_notification,
            ClientEvent.NEW_INTERNSHIP: self._on_new_internship,
            ClientEvent.DEADLINE_REMINDER: self._on_deadline_reminder,
            ClientEvent.SERVER_SHUTDOWN: self._on_server_shutdown,
            ClientEvent.CONNECTED: self._on_connected,
            ClientEvent.RECONNECTED: self._on_reconnected,
            ClientEvent.RECONNECT_FAILED: self._on_reconnect_failed,
        }

    @property
    def permission(self) -> DesktopPermission:
        return self._permission

    def register(self, router: EventRouter) -> None:
        for event, handler in self._handlers.items():
            router.on(event, handler)

    def unregister(self, router: EventRouter) -> None:
        for event, handler in self._handlers.items():
            router.off(event, handler)

    async def request_desktop_permission(self) -> PermissionState:
        return await self._permission.request()

    # =========================================================================
    # Effects
    # =========================================================================

    def toast(
        self,
        message: str,
        severity: ToastSeverity = ToastSeverity.INFO,
        *,
        duration: float = WSConstants.TOAST_NOTIFICATION_DURATION,
    ) -> None:
        try:
            self._toaster.show(message, severity, duration=duration)
        except Exception as e:
            logger.warning("Could not show toast", error=str(e), severity=severity.value)

    def play_sound(self) -> None:
        if not self.preferences.enable_sound:
            return
        try:
            self._sound_player.play()
        except Exception as e:
            logger.warning("Could not play notification sound", error=str(e))

    def show_desktop(self, notification: Notification) -> None:
        if not self.preferences.enable_desktop or not self._permission.granted:
            return
        try:
            self._desktop_notifier.show(
                notification.title,
                notification.message,
                tag=f"notification-{notification.id}",
            )
        except Exception as e:
            logger.warning(
                "Could not show desktop notification",
                error=str(e),
                notification_id=notification.id,
            )

    # =========================================================================
    # Event handlers
    # =========================================================================

    def _on_new_notification(self, data: Any) -> None:
        try:
            notification = Notification.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring malformed notification", error_count=e.error_count())
            return

        self.toast(
            notification.message,
            severity_for(notification.type),
            duration=WSConstants.TOAST_NOTIFICATION_DURATION,
        )
        self.play_sound()
        self.show_desktop(notification)

    def _on_new_internship(self, data: Any) -> None:
        try:
            payload = NewInternshipPayload.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring malformed internship event", error_count=e.error_count())
            return

        internship = payload.internship
        self.toast(
            f"New internship: {internship.title} at {internship.company_name}",
            ToastSeverity.SUCCESS,
            duration=WSConstants.TOAST_NEW_INTERNSHIP_DURATION,
        )
        self.play_sound()

    def _on_deadline_reminder(self, data: Any) -> None:
        try:
            payload = DeadlineReminderPayload.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring malformed deadline reminder", error_count=e.error_count())
            return

        self.toast(
            f"Deadline approaching: {payload.internship_title} at {payload.company_name}",
            ToastSeverity.WARNING,
            duration=WSConstants.TOAST_DEADLINE_DURATION,
        )
        self.play_sound()

    def _on_server_shutdown(self, data: Any) -> None:
        message = "Server is shutting down"
        if isinstance(data, dict) and data.get("message"):
            message = str(data["message"])
        self.toast(message, ToastSeverity.INFO)

    def _on_connected(self, data: Any) -> None:
        self._failure_toast_shown = False

    def _on_reconnected(self, data: Any) -> None:
        self._failure_toast_shown = False
        self.toast(
            "Reconnected to real-time updates",
            ToastSeverity.SUCCESS,
            duration=WSConstants.TOAST_CONNECTION_DURATION,
        )

    def _on_reconnect_failed(self, data: Any) -> None:
        if self._failure_toast_shown:
            return
        self._failure_toast_shown = True
        self.toast(
            CONNECTION_LOST_MESSAGE,
            ToastSeverity.ERROR,
            duration=WSConstants.TOAST_ERROR_DURATION,
        )
