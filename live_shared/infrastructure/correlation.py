"""
Session correlation for log records.

The connection manager binds the current transport session id to a
context variable; SessionIdFilter copies it onto every log record so the
formatters can print it.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Context variable for the active transport session id
session_id_var: ContextVar[str] = ContextVar("session_id", default="")


def get_session_id() -> str:
    """Get the session id bound to the current context."""
    return session_id_var.get()


@contextmanager
def bind_session_id(session_id: str | None) -> Iterator[None]:
    """
    Bind a session id for the duration of the block.

    Tasks created inside the block inherit the binding (asyncio copies the
    context at task creation).
    """
    token = session_id_var.set(session_id or "")
    try:
        yield
    finally:
        session_id_var.reset(token)


class SessionIdFilter(logging.Filter):
    """
    Logging filter that adds session_id to log records.

    Usage:
        handler = logging.StreamHandler()
        handler.addFilter(SessionIdFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = session_id_var.get() or "-"
        return True
