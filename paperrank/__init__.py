"""paperrank: relevance scoring and AI-blended reranking for academic papers.

Usage:
    from paperrank import score, rerank

    result = score(profile, papers)
    reranked = await rerank(result.papers, profile, RerankRequest(api_key=key))
"""

from paperrank.models import RerankRequest, RerankResult, ScoringResult, UserProfile
from paperrank.services.recommendation_service import (
    RecommendationService,
    rerank,
    score,
    validate_api_key,
)

__version__ = "0.1.0"

__all__ = [
    "RecommendationService",
    "RerankRequest",
    "RerankResult",
    "ScoringResult",
    "UserProfile",
    "score",
    "rerank",
    "validate_api_key",
    "__version__",
]
