"""
Access token providers.

The real-time client never refreshes tokens itself: it asks a provider
for the current bearer token right before connecting. Whatever owns the
login flow (REST auth service, a test, the CLI) supplies the provider.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from live_shared.config.settings import Settings, settings as default_settings


class TokenProvider(Protocol):
    """Returns the current bearer token, or None when not authenticated."""

    def get_access_token(self) -> str | None: ...


class StaticTokenProvider:
    """Provider holding a token in memory. Tests and embedding apps use this."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get_access_token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        """Replace the token (login/logout)."""
        self._token = token or None


class EnvTokenProvider:
    """Reads ACCESS_TOKEN from settings (environment or .env)."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or default_settings

    def get_access_token(self) -> str | None:
        return self._settings.access_token.strip() or None


class FileTokenProvider:
    """
    Reads the token from a file on every call.

    Lets a separate login process rotate the token without restarting the
    client. A missing or empty file means "not authenticated".
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    def get_access_token(self) -> str | None:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None
