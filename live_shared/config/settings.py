"""
Client settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Real-time client settings with defaults for development."""

    # Server endpoints
    # REST API base URL (history, preferences, health)
    api_url: str = "http://localhost:3000"
    # WebSocket endpoint for the push channel
    ws_url: str = "ws://localhost:3000/ws"

    # Bearer token used by EnvTokenProvider (empty = not authenticated)
    access_token: str = ""

    # WebSocket session
    # Seconds to wait for the "connected" frame after the socket opens
    ws_handshake_timeout: float = 10.0
    # Reconnection: bounded attempts with a fixed delay, no infinite retry
    ws_reconnect_attempts: int = 5
    ws_reconnect_delay: float = 1.0
    # Heartbeat: ping interval (0 disables) and pong staleness threshold
    ws_heartbeat_interval: float = 25.0
    ws_heartbeat_timeout: float = 60.0
    # Seconds allowed for the closing handshake
    ws_close_timeout: float = 5.0
    # Max inbound frame size in bytes
    ws_max_message_size: int = 1024 * 1024

    # Notification ledger retention (most recent N kept)
    notification_retention: int = 100

    # REST client
    http_timeout: float = 5.0

    # Environment
    environment: str = "development"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def validate_settings(self) -> list[str]:
        """
        Validate numeric limits.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.ws_handshake_timeout <= 0:
            errors.append("WS_HANDSHAKE_TIMEOUT must be positive")
        if self.ws_reconnect_attempts < 0:
            errors.append("WS_RECONNECT_ATTEMPTS must not be negative")
        if self.ws_reconnect_delay < 0:
            errors.append("WS_RECONNECT_DELAY must not be negative")
        if self.ws_heartbeat_interval < 0:
            errors.append("WS_HEARTBEAT_INTERVAL must not be negative (0 disables)")
        if self.ws_heartbeat_interval > 0 and self.ws_heartbeat_timeout <= self.ws_heartbeat_interval:
            errors.append("WS_HEARTBEAT_TIMEOUT must be greater than WS_HEARTBEAT_INTERVAL")
        if self.ws_max_message_size < 1:
            errors.append("WS_MAX_MESSAGE_SIZE must be positive")
        if self.notification_retention < 1:
            errors.append("NOTIFICATION_RETENTION must be at least 1")
        if self.http_timeout <= 0:
            errors.append("HTTP_TIMEOUT must be positive")

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")
            if self.ws_url.startswith("ws://"):
                errors.append("WS_URL must use wss:// in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
