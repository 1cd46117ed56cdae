"""
Notification Center - the composition root of the real-time client.

Owns one EventRouter, one ConnectionManager, one NotificationLedger and
one SideEffectDispatcher, and exposes the operations UI code calls.
Construct one per process (see components.core.dependencies) or one per
test for isolation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from live_client.components.api.history import NotificationHistoryClient
from live_client.components.connection.state import ConnectionState
from live_client.components.connection.transport import (
    TransportFactory,
    websocket_transport_factory,
)
from live_client.components.core.constants import WSConstants
from live_client.components.effects.capabilities import (
    DesktopNotifier,
    PermissionState,
    SoundPlayer,
    Toaster,
    ToastSeverity,
)
from live_client.components.effects.dispatcher import SideEffectDispatcher
from live_client.components.events.router import EventCallback, EventRouter
from live_client.components.events.types import (
    ClientEvent,
    Command,
    Notification,
    NotificationPreferences,
)
from live_client.components.notifications.ledger import NotificationLedger
from live_client.components.resilience.retry import create_reconnect_config
from live_client.connection_manager import ConnectionManager
from live_shared.auth import EnvTokenProvider, TokenProvider
from live_shared.config.logging import get_logger
from live_shared.config.settings import Settings, settings as default_settings
from live_shared.utils.exceptions import ConnectionFailedError

logger = get_logger(__name__)


class NotificationCenter:
    """
    Real-time notifications for one user session.

    Lifecycle: init() -> connect() ... disconnect() -> teardown().
    init() and teardown() are idempotent.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        token_provider: TokenProvider | None = None,
        transport_factory: TransportFactory | None = None,
        toaster: Toaster | None = None,
        sound_player: SoundPlayer | None = None,
        desktop_notifier: DesktopNotifier | None = None,
        preferences: NotificationPreferences | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._token_provider = token_provider or EnvTokenProvider(self._settings)

        self.router = EventRouter()
        self.ledger = NotificationLedger(capacity=self._settings.notification_retention)
        self.manager = ConnectionManager(
            self.router,
            url=self._settings.ws_url,
            transport_factory=transport_factory or websocket_transport_factory(self._settings),
            handshake_timeout=self._settings.ws_handshake_timeout,
            retry_config=create_reconnect_config(self._settings),
            heartbeat_interval=self._settings.ws_heartbeat_interval,
            heartbeat_timeout=self._settings.ws_heartbeat_timeout,
        )
        self.effects = SideEffectDispatcher(
            toaster=toaster,
            sound_player=sound_player,
            desktop_notifier=desktop_notifier,
            preferences=preferences,
        )

        self._initialized = False
        self._ledger_handlers: dict[ClientEvent, Callable[[Any], None]] = {
            ClientEvent.NEW_NOTIFICATION: self._on_new_notification,
            ClientEvent.NOTIFICATION_MARKED_READ: self._on_notification_marked_read,
            ClientEvent.ALL_NOTIFICATIONS_MARKED_READ: self._on_all_notifications_marked_read,
        }

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self) -> None:
        """Wire the ledger and the side effects to the router."""
        if self._initialized:
            return
        # Ledger first, so effects and UI subscribers see the updated state
        for event, handler in self._ledger_handlers.items():
            self.router.on(event, handler)
        self.effects.register(self.router)
        self._initialized = True

    def teardown(self) -> None:
        if not self._initialized:
            return
        self.manager.disconnect()
        self.effects.unregister(self.router)
        for event, handler in self._ledger_handlers.items():
            self.router.off(event, handler)
        self._initialized = False

    async def connect(self) -> bool:
        """
        Connect with the provider's current token.

        Returns:
            True once the session is ready. Failures are toasted and logged,
            never raised.
        """
        token = self._token_provider.get_access_token()
        if not token:
            logger.warning("No access token available for WebSocket connection")
            return False

        self.init()
        try:
            await self.manager.connect(token)
        except ConnectionFailedError as e:
            self.effects.toast(
                "Failed to connect to real-time updates",
                ToastSeverity.ERROR,
                duration=WSConstants.TOAST_ERROR_DURATION,
            )
            logger.error("Real-time connection failed", reason=e.reason)
            return False

        self.effects.toast(
            "Connected to real-time updates",
            ToastSeverity.SUCCESS,
            duration=WSConstants.TOAST_CONNECTION_DURATION,
        )
        return True

    def disconnect(self) -> None:
        """Disconnect and forget the local notification history."""
        self.manager.disconnect()
        self.ledger.clear()

    async def sync_auth(self, is_authenticated: bool) -> None:
        """Follow the authentication state: connect on login, disconnect on logout."""
        if is_authenticated and not self.manager.is_connected:
            await self.connect()
        elif not is_authenticated:
            self.disconnect()

    # =========================================================================
    # Notifications
    # =========================================================================

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self.ledger.notifications

    @property
    def unread_count(self) -> int:
        return self.ledger.unread_count

    def mark_notification_read(self, notification_id: int) -> None:
        """Update the ledger right away and tell the server."""
        self.ledger.mark_read(notification_id)
        self.manager.emit(Command.MARK_NOTIFICATION_READ, notification_id)

    def mark_all_notifications_read(self) -> None:
        self.ledger.mark_all_read()
        self.manager.emit(Command.MARK_ALL_NOTIFICATIONS_READ)

    def clear_notifications(self) -> None:
        self.ledger.clear()

    async def load_history(self, client: NotificationHistoryClient, limit: int = 50) -> int:
        """
        Seed the ledger with stored notifications.

        Returns:
            Number of notifications inserted.
        """
        page = await client.fetch_notifications(limit=limit)
        # The server returns newest first; insert oldest first to keep that order
        for notification in reversed(page.notifications):
            self.ledger.insert(notification)
        logger.info(
            "Loaded notification history",
            loaded=len(page.notifications),
            total_count=page.total_count,
        )
        return len(page.notifications)

    # =========================================================================
    # Preferences and subscriptions
    # =========================================================================

    @property
    def preferences(self) -> NotificationPreferences:
        return self.effects.preferences

    def update_notification_preferences(self, preferences: NotificationPreferences) -> None:
        self.effects.preferences = preferences
        self.manager.emit(Command.UPDATE_NOTIFICATION_PREFERENCES, preferences.to_wire())

    def join_internship_updates(self, internship_id: int) -> None:
        self.manager.emit(Command.JOIN_INTERNSHIP_UPDATES, internship_id)

    def leave_internship_updates(self, internship_id: int) -> None:
        self.manager.emit(Command.LEAVE_INTERNSHIP_UPDATES, internship_id)

    def ping(self) -> None:
        self.manager.emit(Command.PING)

    async def request_notification_permission(self) -> PermissionState:
        return await self.effects.request_desktop_permission()

    # =========================================================================
    # Ad hoc subscribers and status
    # =========================================================================

    def on(self, event: str | Enum, callback: EventCallback) -> None:
        self.router.on(event, callback)

    def off(self, event: str | Enum, callback: EventCallback) -> None:
        self.router.off(event, callback)

    def connection_status(self) -> ConnectionState:
        return self.manager.state

    def acknowledge_failure(self) -> None:
        self.manager.acknowledge_failure()

    # =========================================================================
    # Ledger handlers
    # =========================================================================

    def _on_new_notification(self, data: Any) -> None:
        try:
            notification = Notification.model_validate(data)
        except ValidationError as e:
            logger.warning("Dropping malformed notification", error_count=e.error_count())
            return
        self.ledger.insert(notification)

    def _on_notification_marked_read(self, data: Any) -> None:
        # Server echo of a read made on another device
        if isinstance(data, dict) and isinstance(data.get("notificationId"), int):
            self.ledger.mark_read(data["notificationId"])

    def _on_all_notifications_marked_read(self, data: Any) -> None:
        self.ledger.mark_all_read()
