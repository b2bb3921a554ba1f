"""Prometheus metrics for scoring and reranking.

Defines:
- Papers scored and the distribution of final relevance scores
- Rerank batch and run outcomes
- LLM request latency per provider

Usage:
    from paperrank.observability.metrics import RERANK_BATCHES

    RERANK_BATCHES.labels(status="success").inc()

The engine has no HTTP surface of its own; callers embedding it expose
``get_metrics_text()`` wherever they serve metrics.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so embedding applications and tests stay isolated
REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS
# =============================================================================

PAPERS_SCORED = Counter(
    name="paperrank_papers_scored_total",
    documentation="Total number of papers scored by the taxonomy pass",
    registry=REGISTRY,
)

RERANK_BATCHES = Counter(
    name="paperrank_rerank_batches_total",
    documentation="AI rerank batches by outcome",
    labelnames=["status"],  # success, failed, skipped
    registry=REGISTRY,
)

RERANK_RUNS = Counter(
    name="paperrank_rerank_runs_total",
    documentation="AI rerank runs by outcome",
    labelnames=["outcome"],  # full_blend, unchanged, aborted
    registry=REGISTRY,
)

# =============================================================================
# HISTOGRAMS
# =============================================================================

RELEVANCE_SCORE = Histogram(
    name="paperrank_relevance_score",
    documentation="Distribution of final taxonomy relevance scores",
    buckets=(1, 2, 3, 4, 5, 6, 7, 8, 9, 10),
    registry=REGISTRY,
)

LLM_REQUEST_DURATION = Histogram(
    name="paperrank_llm_request_duration_seconds",
    documentation="LLM scoring request duration in seconds",
    labelnames=["provider"],  # google, anthropic
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, float("inf")),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Metrics in Prometheus exposition format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
