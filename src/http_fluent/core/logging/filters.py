"""
Log filters that attach request context to records.

The correlation id lives in a ContextVar, so every asyncio task (and every
send() running in it) sees its own value.
"""

import logging
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


_correlation_id: ContextVar[Optional[str]] = ContextVar("http_fluent_correlation_id", default=None)


def set_correlation_id(correlation_id: str) -> Token:
    """
    Set correlation ID for the current context.

    Returns:
        Token that can be passed to reset_correlation_id()

    Example:
        >>> token = set_correlation_id("req-12345")
        >>> logger.info("Processing request")  # includes correlation_id
        >>> reset_correlation_id(token)
    """
    return _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for the current context (None if unset)."""
    return _correlation_id.get()


def reset_correlation_id(token: Token) -> None:
    """Restore the correlation ID that was active before set_correlation_id()."""
    _correlation_id.reset(token)


def clear_correlation_id() -> None:
    """Drop the correlation ID for the current context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """
    Adds `correlation_id` to every record emitted inside a send().
    """

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, 'correlation_id'):
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, version...) to all records.

    Fields already present on the record win.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
