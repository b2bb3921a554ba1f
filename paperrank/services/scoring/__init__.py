"""Taxonomy scoring components."""

from paperrank.services.scoring.text import normalize_text
from paperrank.services.scoring.keyword_matcher import match_keywords
from paperrank.services.scoring.concept_matcher import ConceptMatcher
from paperrank.services.scoring.preference_scorer import PreferenceScorer
from paperrank.services.scoring.approach_aligner import ApproachAligner, DetectedApproach
from paperrank.services.scoring.quality_scorer import QualityScorer
from paperrank.services.scoring.field_modifier import FieldModifier
from paperrank.services.scoring.composer import RelevanceScorer

__all__ = [
    "normalize_text",
    "match_keywords",
    "ConceptMatcher",
    "PreferenceScorer",
    "ApproachAligner",
    "DetectedApproach",
    "QualityScorer",
    "FieldModifier",
    "RelevanceScorer",
]
