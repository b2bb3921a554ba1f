"""
Relevance composer: the additive baseline model.

Every paper starts from a quality baseline (3.0-5.0) and earns additions
for matching the researcher's profile:

- Topic addition (0-3.0): best of concept and interest-keyword match, with
  a synergy bonus when both are solid. Generalists without interests get a
  smaller concept-only addition so diverse topics can still surface.
- Method addition (0-2.0): method keyword match blended with approach
  alignment, only when the profile lists methods.
- Field modifier (0.7-1.0): multiplicative penalty for adjacent fields.

Final score is clamped to [1, 10] and rounded half-up to one decimal.
"""

from typing import List, Optional, Sequence

import structlog

from paperrank.models.config import ScoringSettings
from paperrank.models.paper import MatchTier, Paper, ScoredPaper
from paperrank.models.profile import UserProfile
from paperrank.models.results import MatchScore
from paperrank.observability.metrics import PAPERS_SCORED, RELEVANCE_SCORE
from paperrank.services.reference_data import ReferenceData, get_default_reference_data
from paperrank.services.scoring.approach_aligner import ApproachAligner
from paperrank.services.scoring.concept_matcher import ConceptMatcher
from paperrank.services.scoring.field_modifier import FieldModifier
from paperrank.services.scoring.preference_scorer import PreferenceScorer
from paperrank.services.scoring.quality_scorer import QualityScorer
from paperrank.utils.scores import clamp_score, round_half_up

logger = structlog.get_logger()

EXPLANATION_SEPARATOR = " · "
GENERALIST_FALLBACK = "Recent quality research"
SPECIALIST_FALLBACK = "Related to your field"
TIER_LABELS = {1: "Top journal", 2: "Top field journal"}


class RelevanceScorer:
    """Score papers against one researcher profile.

    Profile-derived state (concept targets, generalist flag, scorers) is
    built once in the constructor; ``score_paper`` is pure and never
    mutates its input.
    """

    def __init__(
        self,
        profile: UserProfile,
        reference: Optional[ReferenceData] = None,
        settings: Optional[ScoringSettings] = None,
    ):
        """Initialize relevance scorer.

        Args:
            profile: Researcher profile.
            reference: Vocabularies and journal catalog. Bundled data if None.
            settings: Scoring weights and thresholds. Defaults if None.
        """
        self.profile = profile
        self.reference = reference or get_default_reference_data()
        self.settings = settings or ScoringSettings()

        s = self.settings
        self.is_generalist = self.reference.is_generalist(profile)
        self.concept_matcher = ConceptMatcher(
            profile,
            self.reference,
            is_generalist=self.is_generalist,
            saturation=s.concept_saturation,
            max_matches=s.max_matched_topics,
        )
        self.interest_scorer = PreferenceScorer(
            profile.interests,
            self.reference.interest_keywords,
            s.interest_weighting,
            kind="interest",
        )
        self.method_scorer = PreferenceScorer(
            profile.methods,
            self.reference.method_keywords,
            s.method_weighting,
            kind="method",
        )
        self.approach_aligner = ApproachAligner(
            self.reference.quantitative_signals,
            self.reference.qualitative_signals,
            threshold=s.approach_signal_threshold,
        )
        self.quality_scorer = QualityScorer(s)
        self.field_modifier = FieldModifier(profile, self.reference, s)

    def _text_blob(self, paper: Paper) -> str:
        # Title repeated for extra weight
        parts = [paper.title] * self.settings.title_repeat + [paper.abstract]
        return " ".join(parts)

    def score_paper(self, paper: Paper) -> MatchScore:
        """Compute the full score breakdown for a paper.

        Args:
            paper: Paper to score.

        Returns:
            MatchScore with the final total and every component.
        """
        s = self.settings
        text = self._text_blob(paper)

        baseline = self.quality_scorer.baseline(paper)

        concept_score, matched_topics = self.concept_matcher.match(paper.concepts)
        keyword_score, matched_interests = self.interest_scorer.score(text)
        topic_bonus = max(concept_score, keyword_score)
        if (
            concept_score > s.topic_synergy_threshold
            and keyword_score > s.topic_synergy_threshold
        ):
            topic_bonus = min(1.0, topic_bonus * s.topic_synergy_multiplier)

        method_score, matched_methods = self.method_scorer.score(text)
        approach_score = self.approach_aligner.score(
            text, self.profile.approach_preference
        )

        field_relevance, is_adjacent = self.field_modifier.modify(paper)

        topic_addition = 0.0
        if self.profile.has_interests:
            topic_addition = topic_bonus * s.topic_scale
        elif self.is_generalist:
            topic_addition = concept_score * s.generalist_concept_scale

        method_addition = 0.0
        if self.profile.has_methods:
            method_bonus = method_score * s.method_share + approach_score * (
                1.0 - s.method_share
            )
            method_addition = method_bonus * s.method_scale

        raw = (baseline + topic_addition + method_addition) * field_relevance
        total = clamp_score(raw)

        return MatchScore(
            total=total,
            baseline_score=round_half_up(baseline, 2),
            concept_score=round_half_up(concept_score, 3),
            keyword_score=round_half_up(keyword_score, 3),
            method_score=round_half_up(method_score, 3),
            approach_score=round_half_up(approach_score, 3),
            quality_score=round_half_up(self.quality_scorer.quality(paper), 3),
            field_relevance_score=round_half_up(field_relevance, 3),
            matched_interests=matched_interests,
            matched_methods=matched_methods,
            matched_topics=matched_topics,
            explanation=self.build_explanation(
                matched_interests, matched_methods, paper, is_adjacent
            ),
            is_adjacent_field=is_adjacent,
            match_tier=self.match_tier(total),
        )

    def build_explanation(
        self,
        matched_interests: Sequence[str],
        matched_methods: Sequence[str],
        paper: Paper,
        is_adjacent: bool,
    ) -> str:
        """Short human-readable reason the paper ranks where it does."""
        parts: List[str] = []

        if matched_interests:
            parts.append(", ".join(matched_interests[:2]))

        if matched_methods:
            if len(matched_methods) == 1:
                parts.append(f"Uses {matched_methods[0]}")
            else:
                parts.append(f"Uses {matched_methods[0]} + more")

        tier_label = TIER_LABELS.get(paper.journal_tier)
        if tier_label:
            parts.append(tier_label)

        if is_adjacent:
            parts.append("Related field")

        if not parts:
            return GENERALIST_FALLBACK if self.is_generalist else SPECIALIST_FALLBACK
        return EXPLANATION_SEPARATOR.join(parts)

    def match_tier(self, score: float) -> MatchTier:
        if score >= self.settings.core_tier_threshold:
            return MatchTier.CORE
        if score >= self.settings.explore_tier_threshold:
            return MatchTier.EXPLORE
        return MatchTier.DISCOVERY

    def to_scored_paper(self, paper: Paper, match: MatchScore) -> ScoredPaper:
        """Attach a score breakdown to a copy of the paper.

        Annotations from a previous pass (including AI fields) are dropped.
        """
        data = paper.model_dump(include=set(Paper.model_fields))
        return ScoredPaper(
            **data,
            relevance_score=match.total,
            matched_interests=match.matched_interests,
            matched_methods=match.matched_methods,
            matched_topics=match.matched_topics,
            match_explanation=match.explanation,
            is_adjacent_field=match.is_adjacent_field,
            match_tier=match.match_tier,
        )

    def score_papers(self, papers: Sequence[Paper]) -> List[ScoredPaper]:
        """Score and rank papers.

        Args:
            papers: Papers to score.

        Returns:
            Scored papers sorted by relevance (highest first). Ties keep
            input order.
        """
        if not papers:
            return []

        scored = [self.to_scored_paper(p, self.score_paper(p)) for p in papers]
        scored.sort(key=lambda p: p.relevance_score, reverse=True)

        PAPERS_SCORED.inc(len(scored))
        for paper in scored:
            RELEVANCE_SCORE.observe(paper.relevance_score)

        logger.info(
            "papers_scored",
            total=len(scored),
            generalist=self.is_generalist,
            top_score=scored[0].relevance_score,
            bottom_score=scored[-1].relevance_score,
        )
        return scored
