"""
REST client for notification history and preferences.

The push channel only carries what happens while connected; this client
reads what was stored server-side so the ledger can be seeded on startup.

Envelope shape: {"success": bool, "data": ..., "error": {"code", "message"}}
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from live_client.components.events.types import Notification, NotificationPreferences
from live_shared.auth import TokenProvider
from live_shared.config.logging import get_logger
from live_shared.utils.exceptions import ApiError

logger = get_logger(__name__)

NOTIFICATIONS_PATH = "/api/websocket/notifications"
UNREAD_COUNT_PATH = "/api/websocket/notifications/unread-count"
PREFERENCES_PATH = "/api/websocket/preferences"


class ApiErrorBody(BaseModel):
    code: str | None = None
    message: str = "Unknown error"


class ApiEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    data: Any = None
    error: ApiErrorBody | None = None


class NotificationPage(BaseModel):
    """One page of stored notifications, newest first."""

    model_config = ConfigDict(extra="ignore")

    notifications: list[Notification] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


class NotificationHistoryClient:
    """
    Async REST client over httpx.

    Usage:
        async with NotificationHistoryClient(settings.api_url, provider) as client:
            page = await client.fetch_notifications(limit=20)
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> NotificationHistoryClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def fetch_notifications(
        self,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> NotificationPage:
        params = {
            "unread_only": "true" if unread_only else "false",
            "limit": limit,
            "offset": offset,
        }
        data = await self._get(NOTIFICATIONS_PATH, params=params)
        try:
            return NotificationPage.model_validate(data)
        except ValidationError as e:
            raise ApiError(
                "Malformed notification page", code="INVALID_RESPONSE", errors=e.error_count()
            ) from e

    async def fetch_unread_count(self) -> int:
        data = await self._get(UNREAD_COUNT_PATH)
        try:
            return int(data["unread_count"])
        except (TypeError, KeyError, ValueError) as e:
            raise ApiError("Malformed unread count", code="INVALID_RESPONSE") from e

    async def fetch_preferences(self) -> NotificationPreferences:
        data = await self._get(PREFERENCES_PATH)
        try:
            return NotificationPreferences.model_validate(data["preferences"])
        except (TypeError, KeyError, ValidationError) as e:
            raise ApiError("Malformed preferences", code="INVALID_RESPONSE") from e

    # =========================================================================
    # Internal
    # =========================================================================

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET an endpoint and unwrap the envelope.

        Raises:
            ApiError: Not authenticated, network failure, HTTP error status,
                or an envelope with success=false.
        """
        token = self._token_provider.get_access_token()
        if not token:
            raise ApiError("Not authenticated", code="UNAUTHORIZED", status_code=401)

        try:
            response = await self._client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}", code="NETWORK_ERROR", path=path) from e

        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError):
            envelope = None

        if response.is_error or envelope is None or not envelope.success:
            error = envelope.error if envelope is not None and envelope.error else None
            raise ApiError(
                error.message if error else f"HTTP {response.status_code}",
                code=error.code if error else None,
                status_code=response.status_code,
                path=path,
            )

        logger.debug("API call succeeded", path=path, status_code=response.status_code)
        return envelope.data
