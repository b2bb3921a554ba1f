"""Structured logging setup for the engine.

All modules log through structlog with snake_case event names and
key/value context:

    logger = structlog.get_logger()
    logger.info("rerank_batch_completed", offset=8, scored=8)

``configure_logging`` installs the processor chain once at startup (the
CLI calls it from the loaded ``LoggingSettings``). Every entry carries the
current correlation ID so the batches of one rerank run can be grouped.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from paperrank.observability.context import get_correlation_id


def add_correlation_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Inject the current correlation ID ("none" when unset)."""
    event_dict["correlation_id"] = get_correlation_id() or "none"
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: JSON lines if True, colored console output otherwise.
        add_timestamp: Add an ISO timestamp to each entry.

    Logs go to stderr so that ``paperrank score --json`` keeps stdout
    clean for the result document.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(
    component: Optional[str] = None,
    **initial_context: Any,
) -> Any:
    """Get a structlog logger bound to a component name and extra context.

    Example:
        logger = get_logger("reranker", provider="google")
        logger.info("rerank_started", papers=40)
    """
    logger = structlog.get_logger()
    if component:
        logger = logger.bind(component=component)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
