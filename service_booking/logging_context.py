"""Session ID logging context for tracing a booking or admin session.

Provides a session-aware logger that attaches a correlation ID to every
log record, so one customer's booking attempt (or one staff member's
dashboard session) can be followed across the calendar, booking state,
store, and notification modules.

Usage:
    from service_booking.logging_context import get_session_logger, set_session_id

    set_session_id("BOOK-1a2b3c")
    logger = get_session_logger(__name__)
    logger.info("Slot selected")  # record.session_id == "BOOK-1a2b3c"
"""

import logging
import uuid
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def set_session_id(session_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current correlation ID."""
    return _session_id.get()


def new_session_id(prefix: str = "BOOK") -> str:
    """Generate and set a fresh correlation ID, returning it."""
    session_id = f"{prefix}-{uuid.uuid4().hex[:6]}"
    set_session_id(session_id)
    return session_id


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
