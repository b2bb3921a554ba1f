"""
Position-weighted scoring of ordered preference lists.

The same shape serves interests and methods: each label is matched with the
keyword matcher, its sub-score is discounted by position (earlier labels
weigh more), and the matched sub-scores are combined as a blend of the best
and the mean with a bonus for several matches. Only the constants differ,
and they come from ``PreferenceWeighting``.
"""

from typing import Dict, List, Sequence, Tuple

import structlog

from paperrank.models.config import PreferenceWeighting
from paperrank.models.vocabulary import KeywordEntry
from paperrank.services.scoring.keyword_matcher import match_keywords

logger = structlog.get_logger()


class PreferenceScorer:
    """Score text against an ordered list of profile labels."""

    def __init__(
        self,
        labels: Sequence[str],
        dictionary: Dict[str, KeywordEntry],
        weighting: PreferenceWeighting,
        kind: str = "interest",
    ):
        """Initialize preference scorer.

        Args:
            labels: Profile labels in priority order.
            dictionary: Label -> keyword entry. Labels missing from it are
                skipped but keep their position.
            weighting: Decay and combination constants.
            kind: Label kind for log context ("interest" or "method").
        """
        self.labels = list(labels)
        self.dictionary = dictionary
        self.weighting = weighting
        self.kind = kind

        unknown = [label for label in self.labels if label not in dictionary]
        if unknown:
            logger.debug("preference_labels_unknown", kind=kind, labels=unknown)

    def position_weight(self, idx: int) -> float:
        w = self.weighting
        return max(w.decay_floor, 1.0 - idx * w.decay_step)

    def match_bonus(self, matched_count: int) -> float:
        """Multiplier for the largest bonus threshold <= matched_count."""
        eligible = [t for t in self.weighting.match_bonuses if t <= matched_count]
        if not eligible:
            return 1.0
        return self.weighting.match_bonuses[max(eligible)]

    def score(self, text: str) -> Tuple[float, List[str]]:
        """Score a text blob.

        Args:
            text: Text to match (title repeated + abstract).

        Returns:
            Tuple of (score in [0, 1], matched labels in profile order).
        """
        if not self.labels:
            return 0.0, []

        matched: List[str] = []
        sub_scores: List[float] = []

        for idx, label in enumerate(self.labels):
            entry = self.dictionary.get(label)
            if entry is None:
                continue

            count, sub_score = match_keywords(text, entry)
            if count > 0:
                matched.append(label)
                sub_scores.append(sub_score * self.position_weight(idx))

        if not sub_scores:
            return 0.0, []

        best = max(sub_scores)
        mean = sum(sub_scores) / len(sub_scores)
        w = self.weighting
        combined = best * w.best_weight + mean * (1.0 - w.best_weight)
        combined *= self.match_bonus(len(matched))

        return min(1.0, combined), matched
