"""Result models returned by the scoring and reranking entry points."""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from paperrank.models.paper import MatchTier, ScoredPaper


class MatchScore(BaseModel):
    """Score breakdown for a single paper"""

    model_config = ConfigDict(frozen=True)

    total: float = Field(..., ge=1.0, le=10.0)
    baseline_score: float
    concept_score: float = Field(0.0, ge=0.0, le=1.0)
    keyword_score: float = Field(0.0, ge=0.0, le=1.0)
    method_score: float = Field(0.0, ge=0.0, le=1.0)
    approach_score: float = Field(0.0, ge=0.0, le=1.0)
    quality_score: float = Field(0.0, ge=0.0, le=1.0)
    field_relevance_score: float = Field(1.0, gt=0.0, le=1.0)
    matched_interests: List[str] = Field(default_factory=list)
    matched_methods: List[str] = Field(default_factory=list)
    matched_topics: List[str] = Field(default_factory=list)
    explanation: str = ""
    is_adjacent_field: bool = False
    match_tier: MatchTier = MatchTier.DISCOVERY


class ScoringResult(BaseModel):
    """Output of the taxonomy scoring pass"""

    papers: List[ScoredPaper] = Field(default_factory=list)
    summary: str = ""
    high_relevance_count: int = 0
    error: Optional[str] = None


class RerankRequest(BaseModel):
    """Caller-supplied credentials and model choice for AI reranking"""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    api_key: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None


class AIScore(BaseModel):
    """One parsed entry of an LLM scoring response"""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    relevance: float = Field(..., ge=1.0, le=10.0)
    discovery: float = Field(..., ge=1.0, le=10.0)
    reason: str = ""


class RerankResult(BaseModel):
    """Output of AI reranking"""

    papers: List[ScoredPaper] = Field(default_factory=list)
    ai_enhanced: bool = False
    ai_papers_scored: int = 0
    batches_succeeded: int = 0
    batches_failed: int = 0
    aborted: bool = False
    error: Optional[str] = None
