"""Tests for Prometheus metrics definitions."""

from paperrank.models.paper import Paper
from paperrank.models.profile import UserProfile
from paperrank.observability.metrics import (
    PAPERS_SCORED,
    RERANK_BATCHES,
    get_metrics_content_type,
    get_metrics_text,
)
from paperrank.services.scoring.composer import RelevanceScorer


class TestMetrics:
    """Tests for metric updates and exposition."""

    def test_scoring_counts_papers(self):
        before = PAPERS_SCORED._value.get()
        RelevanceScorer(UserProfile()).score_papers(
            [Paper(id="W1"), Paper(id="W2")]
        )
        assert PAPERS_SCORED._value.get() == before + 2

    def test_batch_counter_labels(self):
        before = RERANK_BATCHES.labels(status="skipped")._value.get()
        RERANK_BATCHES.labels(status="skipped").inc()
        assert RERANK_BATCHES.labels(status="skipped")._value.get() == before + 1

    def test_exposition(self):
        text = get_metrics_text().decode()
        assert "paperrank_papers_scored_total" in text
        assert "paperrank_relevance_score_bucket" in text
        assert "text/plain" in get_metrics_content_type()
