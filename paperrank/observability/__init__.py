"""Observability for the relevance engine.

Provides:
- Correlation ID context for tracing a request across rerank batches
- structlog configuration with correlation ID injection
- Prometheus metrics for scoring and reranking
"""

from paperrank.observability.context import (
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    correlation_id_context,
)
from paperrank.observability.logging import (
    get_logger,
    configure_logging,
    add_correlation_id_processor,
)
from paperrank.observability.metrics import (
    PAPERS_SCORED,
    RERANK_BATCHES,
    RERANK_RUNS,
    RELEVANCE_SCORE,
    LLM_REQUEST_DURATION,
    get_metrics_text,
)

__all__ = [
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
    "get_logger",
    "configure_logging",
    "add_correlation_id_processor",
    "PAPERS_SCORED",
    "RERANK_BATCHES",
    "RERANK_RUNS",
    "RELEVANCE_SCORE",
    "LLM_REQUEST_DURATION",
    "get_metrics_text",
]
