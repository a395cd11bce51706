"""Correlation ID management for lifecycle operations.

Every public controller operation runs inside its own correlation scope so
all log lines for one Create, Sync or Verify (including the nested Sync a
Create or Verify triggers) share an id. The id lives in a ContextVar and is
therefore isolated between concurrently running asyncio tasks.

Usage:
    with correlation_scope() as correlation_id:
        log = structlog.get_logger().bind(correlation_id=correlation_id)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string means "no active scope"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation ID (UUID4)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID, or an empty string outside a scope."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current context."""
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of a block.

    An enclosing scope is reused so nested operations stay correlated with
    the operation that triggered them.

    Args:
        correlation_id: Explicit ID to bind; generated if omitted.

    Yields:
        The active correlation ID.
    """
    current = _correlation_id.get()
    if correlation_id is None and current:
        yield current
        return
    token = _correlation_id.set(correlation_id or generate_correlation_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the active correlation_id to each entry."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
