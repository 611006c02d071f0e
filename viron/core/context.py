"""Correlation id of the request being handled.

The id is kept in a context variable so it follows the request across awaits
and into tasks spawned from it. ``correlation_scope`` makes an id current for
a block and restores whatever was current before, so nothing has to be
cleared by hand.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Correlation id of the current request, or None outside one."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Make ``correlation_id`` current for the duration of the block.

    Args:
        correlation_id: Id taken from the request or freshly generated.

    Yields:
        str: The same id.
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


def new_correlation_id() -> str:
    """Plain UUID4 string, used when the client sent no correlation id."""
    return str(uuid.uuid4())


def new_request_id() -> str:
    """``req-<uuid4>``, identifying a single request or error response."""
    return f"req-{uuid.uuid4()}"
