from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


class CitationBucket(BaseModel):
    """Citation count threshold and the score it earns"""

    min_citations: int = Field(..., ge=1)
    score: float = Field(..., ge=0.0, le=1.0)


class PreferenceWeighting(BaseModel):
    """Position decay and combination rules for an ordered preference list

    Position weight is ``max(decay_floor, 1 - idx * decay_step)``. Matched
    sub-scores combine as ``best * best_weight + mean * (1 - best_weight)``,
    then the bonus for the largest threshold <= matched count applies.
    """

    decay_step: float = Field(..., ge=0.0, le=1.0)
    decay_floor: float = Field(..., ge=0.0, le=1.0)
    best_weight: float = Field(..., ge=0.0, le=1.0)
    match_bonuses: Dict[int, float] = Field(default_factory=dict)

    @field_validator("match_bonuses")
    @classmethod
    def validate_bonuses(cls, v: Dict[int, float]) -> Dict[int, float]:
        for count, multiplier in v.items():
            if count < 1:
                raise ValueError("match bonus thresholds must be >= 1")
            if multiplier < 1.0:
                raise ValueError("match bonus multipliers must be >= 1.0")
        return v


def _default_interest_weighting() -> PreferenceWeighting:
    return PreferenceWeighting(
        decay_step=0.08, decay_floor=0.6, best_weight=0.6, match_bonuses={3: 1.2, 2: 1.1}
    )


def _default_method_weighting() -> PreferenceWeighting:
    return PreferenceWeighting(
        decay_step=0.1, decay_floor=0.5, best_weight=0.7, match_bonuses={2: 1.15}
    )


def _default_citation_buckets() -> List[CitationBucket]:
    return [
        CitationBucket(min_citations=50, score=1.0),
        CitationBucket(min_citations=20, score=0.85),
        CitationBucket(min_citations=10, score=0.7),
        CitationBucket(min_citations=5, score=0.55),
        CitationBucket(min_citations=1, score=0.4),
    ]


class ScoringSettings(BaseModel):
    """Weights and thresholds for the taxonomy scoring pass"""

    model_config = ConfigDict(extra="forbid")

    # Baseline (quality floor)
    tier_scores: Dict[int, float] = Field(
        default_factory=lambda: {1: 1.0, 2: 0.8, 3: 0.6}
    )
    default_tier_score: float = Field(0.3, ge=0.0, le=1.0)
    citation_buckets: List[CitationBucket] = Field(
        default_factory=_default_citation_buckets
    )
    uncited_score: float = Field(
        0.3, ge=0.0, le=1.0, description="New papers get the benefit of the doubt"
    )
    tier_weight: float = Field(0.6, ge=0.0, le=1.0)
    baseline_floor: float = Field(3.0, ge=1.0, le=10.0)
    baseline_span: float = Field(2.0, ge=0.0, le=5.0)

    # Topic / method additions
    title_repeat: int = Field(2, ge=1, le=5, description="Title weight in the text blob")
    topic_scale: float = Field(3.0, ge=0.0)
    generalist_concept_scale: float = Field(1.0, ge=0.0)
    method_scale: float = Field(2.0, ge=0.0)
    method_share: float = Field(0.8, ge=0.0, le=1.0)
    topic_synergy_threshold: float = Field(0.3, ge=0.0, le=1.0)
    topic_synergy_multiplier: float = Field(1.15, ge=1.0)
    concept_saturation: float = Field(1.5, gt=0.0)
    max_matched_topics: int = Field(5, ge=0)
    interest_weighting: PreferenceWeighting = Field(
        default_factory=_default_interest_weighting
    )
    method_weighting: PreferenceWeighting = Field(
        default_factory=_default_method_weighting
    )
    approach_signal_threshold: int = Field(2, ge=0)

    # Field relevance
    adjacent_opted_in_modifier: float = Field(0.95, gt=0.0, le=1.0)
    adjacent_penalty_modifier: float = Field(0.7, gt=0.0, le=1.0)

    # Presentation
    high_relevance_threshold: float = Field(7.0, ge=1.0, le=10.0)
    core_tier_threshold: float = Field(7.0, ge=1.0, le=10.0)
    explore_tier_threshold: float = Field(4.0, ge=1.0, le=10.0)

    @field_validator("citation_buckets")
    @classmethod
    def sort_buckets(cls, v: List[CitationBucket]) -> List[CitationBucket]:
        return sorted(v, key=lambda b: b.min_citations, reverse=True)

    @model_validator(mode="after")
    def validate_tier_thresholds(self) -> "ScoringSettings":
        if self.explore_tier_threshold > self.core_tier_threshold:
            raise ValueError("explore_tier_threshold must not exceed core_tier_threshold")
        return self


class RerankSettings(BaseModel):
    """AI reranking configuration"""

    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    provider: Literal["google", "anthropic"] = Field(
        "google", description="LLM provider"
    )
    model: str = Field("gemini-2.5-flash", description="Model identifier")
    batch_size: int = Field(8, ge=1, le=25, description="Papers per LLM request")
    max_papers: int = Field(40, ge=1, le=200, description="Top-N papers eligible")
    timeout_seconds: float = Field(30.0, gt=0.0, le=300.0)
    max_concurrent_batches: int = Field(
        1, ge=1, le=8, description="1 = sequential dispatch"
    )
    temperature: float = Field(0.1, ge=0.0, le=1.0)
    max_output_tokens: int = Field(1024, gt=0, le=8192)
    abstract_chars: int = Field(250, ge=0, le=4000)
    reason_chars: int = Field(80, ge=0, le=500)

    # Blend weights
    taxonomy_weight_base: float = Field(0.55, ge=0.0, le=1.0)
    taxonomy_weight_span: float = Field(0.2, ge=0.0, le=1.0)
    discovery_weight_span: float = Field(0.4, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_blend(self) -> "RerankSettings":
        if self.taxonomy_weight_span > self.taxonomy_weight_base:
            raise ValueError("taxonomy_weight_span must not exceed taxonomy_weight_base")
        return self


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True


class EngineConfig(BaseModel):
    """Root configuration model"""

    model_config = ConfigDict(extra="forbid")

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    rerank: RerankSettings = Field(default_factory=RerankSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api_key: Optional[str] = Field(
        None, description="LLM API key (from environment)"
    )
    reference_data_dir: Optional[str] = Field(
        None, description="Directory holding vocabulary.yaml and journals.yaml"
    )

    @field_validator("api_key")
    @classmethod
    def blank_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        # Unset ${VAR} placeholders survive safe_substitute
        if v is None or not v.strip() or v.strip().startswith("${"):
            return None
        return v.strip()
