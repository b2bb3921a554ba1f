"""Data models for profiles, papers, reference data, configuration and results."""

from paperrank.models.profile import ApproachPreference, ExperienceType, UserProfile
from paperrank.models.paper import ConceptTag, MatchTier, Paper, ScoredPaper
from paperrank.models.vocabulary import Journal, KeywordEntry
from paperrank.models.config import (
    CitationBucket,
    EngineConfig,
    LoggingSettings,
    PreferenceWeighting,
    RerankSettings,
    ScoringSettings,
)
from paperrank.models.results import (
    AIScore,
    MatchScore,
    RerankRequest,
    RerankResult,
    ScoringResult,
)

__all__ = [
    "ApproachPreference",
    "ExperienceType",
    "UserProfile",
    "ConceptTag",
    "MatchTier",
    "Paper",
    "ScoredPaper",
    "Journal",
    "KeywordEntry",
    "CitationBucket",
    "EngineConfig",
    "LoggingSettings",
    "PreferenceWeighting",
    "RerankSettings",
    "ScoringSettings",
    "AIScore",
    "MatchScore",
    "RerankRequest",
    "RerankResult",
    "ScoringResult",
]
