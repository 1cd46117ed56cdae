"""
Tests for SideEffectDispatcher and the desktop permission state machine.

Tests verify:
- Toast severity per notification type
- Sound and desktop notifications respect preferences and permission
- DENIED permission is sticky
- Capability failures never reach the router
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from live_client.components.effects.capabilities import PermissionState, ToastSeverity
from live_client.components.effects.dispatcher import (
    CONNECTION_LOST_MESSAGE,
    DesktopPermission,
    SideEffectDispatcher,
    severity_for,
)
from live_client.components.events.router import EventRouter
from live_client.components.events.types import ClientEvent, NotificationPreferences
from tests.conftest import notification_payload


def _desktop(supported: bool = True, answer: PermissionState = PermissionState.GRANTED):
    notifier = MagicMock()
    notifier.supported = supported
    notifier.request_permission = AsyncMock(return_value=answer)
    return notifier


@pytest.fixture
def toaster():
    return MagicMock()


@pytest.fixture
def sound():
    return MagicMock()


@pytest.fixture
def desktop():
    return _desktop()


@pytest.fixture
def wired(toaster, sound, desktop):
    router = EventRouter()
    effects = SideEffectDispatcher(toaster=toaster, sound_player=sound, desktop_notifier=desktop)
    effects.register(router)
    return router, effects


class TestSeverity:
    @pytest.mark.parametrize(
        "notification_type,expected",
        [
            ("new_match", ToastSeverity.SUCCESS),
            ("deadline_reminder", ToastSeverity.WARNING),
            ("status_change", ToastSeverity.INFO),
            ("internship_updated", ToastSeverity.INFO),
            ("something_new", ToastSeverity.INFO),
        ],
    )
    def test_severity_for(self, notification_type, expected):
        assert severity_for(notification_type) is expected


class TestNewNotification:
    def test_toast_and_sound(self, wired, toaster, sound, desktop):
        router, _ = wired

        router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1, message="You matched!"))

        toaster.show.assert_called_once_with("You matched!", ToastSeverity.SUCCESS, duration=5.0)
        sound.play.assert_called_once()
        # Permission still DEFAULT
        desktop.show.assert_not_called()

    @pytest.mark.asyncio
    async def test_desktop_after_permission_granted(self, wired, desktop):
        router, effects = wired

        assert await effects.request_desktop_permission() is PermissionState.GRANTED
        router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(7, title="Hello"))

        desktop.show.assert_called_once_with("Hello", "Message 7", tag="notification-7")

    @pytest.mark.asyncio
    async def test_desktop_disabled_by_preference(self, wired, desktop):
        router, effects = wired
        await effects.request_desktop_permission()
        effects.preferences = NotificationPreferences(enable_desktop=False)

        router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1))

        desktop.show.assert_not_called()

    def test_sound_disabled_by_preference(self, wired, sound):
        router, effects = wired
        effects.preferences = NotificationPreferences(enable_sound=False)

        router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1))

        sound.play.assert_not_called()

    def test_sound_failure_is_swallowed(self, wired, toaster, sound):
        router, _ = wired
        sound.play.side_effect = RuntimeError("autoplay blocked")

        delivered = router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1))

        assert delivered == 1
        toaster.show.assert_called_once()

    @pytest.mark.asyncio
    async def test_desktop_failure_is_swallowed(self, wired, desktop):
        router, effects = wired
        await effects.request_desktop_permission()
        desktop.show.side_effect = OSError("no display")

        assert router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1)) == 1

    def test_toast_failure_is_swallowed(self, wired, toaster, sound):
        router, _ = wired
        toaster.show.side_effect = RuntimeError("ui gone")

        assert router.dispatch(ClientEvent.NEW_NOTIFICATION, notification_payload(1)) == 1
        sound.play.assert_called_once()

    def test_malformed_notification_is_ignored(self, wired, toaster):
        router, _ = wired

        assert router.dispatch(ClientEvent.NEW_NOTIFICATION, {"title": "no id"}) == 1
        toaster.show.assert_not_called()


class TestInternshipEvents:
    def test_new_internship(self, wired, toaster, sound):
        router, _ = wired

        router.dispatch(
            ClientEvent.NEW_INTERNSHIP,
            {"internship": {"id": 3, "title": "Data Intern", "company_name": "Acme"}},
        )

        toaster.show.assert_called_once_with(
            "New internship: Data Intern at Acme", ToastSeverity.SUCCESS, duration=7.0
        )
        sound.play.assert_called_once()

    def test_deadline_reminder(self, wired, toaster, sound):
        router, _ = wired

        router.dispatch(
            ClientEvent.DEADLINE_REMINDER,
            {"internship_title": "Backend Intern", "company_name": "Globex", "internship_id": 9},
        )

        toaster.show.assert_called_once_with(
            "Deadline approaching: Backend Intern at Globex", ToastSeverity.WARNING, duration=10.0
        )
        sound.play.assert_called_once()

    def test_server_shutdown(self, wired, toaster):
        router, _ = wired

        router.dispatch(ClientEvent.SERVER_SHUTDOWN, {"message": "Maintenance in 5 minutes"})

        toaster.show.assert_called_once_with(
            "Maintenance in 5 minutes", ToastSeverity.INFO, duration=5.0
        )


class TestConnectionToasts:
    def test_reconnect_failed_toasts_once(self, wired, toaster):
        router, _ = wired

        router.dispatch(ClientEvent.RECONNECT_FAILED, {"attempts": 5})
        router.dispatch(ClientEvent.RECONNECT_FAILED, {"attempts": 5})

        toaster.show.assert_called_once_with(
            CONNECTION_LOST_MESSAGE, ToastSeverity.ERROR, duration=5.0
        )

    def test_failure_toast_rearmed_after_connect(self, wired, toaster):
        router, _ = wired

        router.dispatch(ClientEvent.RECONNECT_FAILED, {})
        router.dispatch(ClientEvent.CONNECTED, {})
        router.dispatch(ClientEvent.RECONNECT_FAILED, {})

        assert toaster.show.call_count == 2

    def test_reconnected(self, wired, toaster):
        router, _ = wired

        router.dispatch(ClientEvent.RECONNECTED, {"attempt_number": 2})

        toaster.show.assert_called_once_with(
            "Reconnected to real-time updates", ToastSeverity.SUCCESS, duration=3.0
        )

    def test_unregister(self, wired, toaster):
        router, effects = wired
        effects.unregister(router)

        router.dispatch(ClientEvent.RECONNECTED, {})

        toaster.show.assert_not_called()
        assert router.listener_count(ClientEvent.NEW_NOTIFICATION) == 0


class TestDesktopPermission:
    @pytest.mark.asyncio
    async def test_default_to_granted(self):
        permission = DesktopPermission(_desktop(answer=PermissionState.GRANTED))

        assert permission.state is PermissionState.DEFAULT
        assert await permission.request() is PermissionState.GRANTED
        assert permission.granted

    @pytest.mark.asyncio
    async def test_denied_is_sticky(self):
        notifier = _desktop(answer=PermissionState.DENIED)
        permission = DesktopPermission(notifier)

        assert await permission.request() is PermissionState.DENIED
        assert await permission.request() is PermissionState.DENIED

        notifier.request_permission.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dismissed_prompt_can_be_asked_again(self):
        notifier = _desktop(answer=PermissionState.DEFAULT)
        permission = DesktopPermission(notifier)

        await permission.request()
        await permission.request()

        assert notifier.request_permission.await_count == 2

    @pytest.mark.asyncio
    async def test_unsupported_host_is_denied_without_prompt(self):
        notifier = _desktop(supported=False)
        permission = DesktopPermission(notifier)

        assert permission.state is PermissionState.DENIED
        assert await permission.request() is PermissionState.DENIED
        notifier.request_permission.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_request_failure_keeps_state(self):
        notifier = _desktop()
        notifier.request_permission.side_effect = RuntimeError("prompt failed")
        permission = DesktopPermission(notifier)

        assert await permission.request() is PermissionState.DEFAULT
