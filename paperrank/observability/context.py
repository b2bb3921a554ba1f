"""Correlation ID context for tracing one scoring or reranking request.

The ID lives in a ContextVar, so it follows the request across ``await``
points and into batch tasks spawned with ``asyncio.gather``.

Usage:
    from paperrank.observability.context import correlation_id_context

    with correlation_id_context() as corr_id:
        result = await service.rerank(papers, profile, request)
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        corr_id: Explicit ID. A UUID4 is generated if None.

    Returns:
        The ID that was set.
    """
    if corr_id is None:
        corr_id = str(uuid.uuid4())
    _correlation_id_var.set(corr_id)
    return corr_id


def get_correlation_id() -> Optional[str]:
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


@contextmanager
def correlation_id_context(
    corr_id: Optional[str] = None,
) -> Generator[str, None, None]:
    """Scope a correlation ID, restoring the previous one on exit.

    An already-set ID is reused when ``corr_id`` is None, so nested entry
    points (rerank called from a CLI command) share one ID.

    Args:
        corr_id: Explicit ID. Inherits the current one, or generates a
            UUID4, if None.

    Yields:
        The correlation ID in effect inside the block.
    """
    if corr_id is None:
        corr_id = get_correlation_id() or str(uuid.uuid4())

    token = _correlation_id_var.set(corr_id)
    try:
        yield corr_id
    finally:
        _correlation_id_var.reset(token)
