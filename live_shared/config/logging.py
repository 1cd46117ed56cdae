"""
Centralized structured logging for the real-time client.
Uses Python's standard logging with JSON formatting for production.

Every record carries the current transport session id (see
live_shared.infrastructure.correlation) so a reconnect storm can be traced
session by session.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from live_shared.config.settings import settings


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Outputs logs in a format easily parseable by log aggregation tools.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        session_id = getattr(record, "session_id", None)
        if session_id and session_id != "-":
            log_data["session_id"] = session_id

        if hasattr(record, "extra_data") and record.extra_data:
            log_data["data"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")

        session_id = getattr(record, "session_id", None)
        if session_id and session_id != "-":
            session_str = f"{self.DIM}[{session_id[:8]}]{self.RESET} "
        else:
            session_str = ""

        message = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {session_str}{record.name}: {record.getMessage()}"

        if hasattr(record, "extra_data") and record.extra_data:
            data_str = " | ".join(f"{k}={v}" for k, v in record.extra_data.items())
            message += f" ({data_str})"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


class StructuredLogger(logging.Logger):
    """
    Custom logger that supports structured data.

    Keyword arguments other than exc_info become the record's extra_data.
    """

    def _log_with_data(
        self,
        level: int,
        msg: str,
        args: tuple,
        exc_info: Any = None,
        extra: dict | None = None,
        **kwargs: Any,
    ) -> None:
        """Log with optional structured data."""
        if not self.isEnabledFor(level):
            return
        if extra is None:
            extra = {}
        extra["extra_data"] = kwargs if kwargs else None
        super()._log(level, msg, args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.INFO, msg, args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.WARNING, msg, args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        exc_info = kwargs.pop("exc_info", None)
        self._log_with_data(logging.ERROR, msg, args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.pop("exc_info", None)
        self._log_with_data(logging.ERROR, msg, args, exc_info=True, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        exc_info = kwargs.pop("exc_info", None)
        self._log_with_data(logging.CRITICAL, msg, args, exc_info=exc_info, **kwargs)


# Set custom logger class
logging.setLoggerClass(StructuredLogger)


def setup_logging(level: int | None = None) -> None:
    """
    Configure logging for the client.
    Call this once at startup (the CLI does it before connecting).
    """
    # Import here to avoid circular imports
    from live_shared.infrastructure.correlation import SessionIdFilter

    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(SessionIdFilter())

    if settings.environment == "production":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = DevelopmentFormatter()

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a logger instance with the given name.

    Usage:
        from live_shared.config.logging import get_logger
        logger = get_logger(__name__)

        logger.info("Notification received", notification_id=42)
        logger.error("Handshake failed", token=mask_token(token), exc_info=True)
    """
    logger = logging.getLogger(name)
    if not isinstance(logger, StructuredLogger):
        # Logger was created before this module set the logger class
        logger.__class__ = StructuredLogger
    return logger  # type: ignore[return-value]


def mask_token(token: str | None) -> str:
    """
    Mask a bearer token for logging.

    Shows only the first 6 characters so two log lines can be correlated
    without leaking the credential.
    """
    if not token:
        return "<no-token>"
    if len(token) <= 6:
        return "***"
    return f"{token[:6]}..."
