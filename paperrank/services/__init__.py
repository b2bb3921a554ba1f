"""Scoring, reranking, configuration and reference-data services."""

from paperrank.services.recommendation_service import (
    RecommendationService,
    rerank,
    score,
    validate_api_key,
)

__all__ = ["RecommendationService", "score", "rerank", "validate_api_key"]
