"""
Baseline (quality) scorer.

Every paper starts from a quality floor so that nothing is perpetually
disadvantaged when the profile is sparse:
- Journal tier (60% weight)
- Citation count bucket (40% weight)

The weighted signal in [0, 1] maps onto the baseline range
[baseline_floor, baseline_floor + baseline_span], 3.0 to 5.0 by default.
Tier and citation tables live in ``ScoringSettings``.
"""

from typing import Optional

import structlog

from paperrank.models.config import ScoringSettings
from paperrank.models.paper import Paper

logger = structlog.get_logger()


class QualityScorer:
    """Calculate the quality baseline for papers."""

    def __init__(self, settings: Optional[ScoringSettings] = None):
        """Initialize quality scorer.

        Args:
            settings: Scoring settings holding the tier and citation tables.
                Defaults are used if None.
        """
        self.settings = settings or ScoringSettings()

    def tier_score(self, paper: Paper) -> float:
        """Journal tier score (0-1).

        Tiers missing from the table (including tier 4, "other") get the
        default tier score.

        Args:
            paper: Paper to score.

        Returns:
            Score between 0 and 1.
        """
        return self.settings.tier_scores.get(
            paper.journal_tier, self.settings.default_tier_score
        )

    def citation_score(self, paper: Paper) -> float:
        """Citation bucket score (0-1).

        Buckets are checked from the highest threshold down:
        - >= 50 citations: 1.0
        - >= 20: 0.85
        - >= 10: 0.7
        - >= 5: 0.55
        - >= 1: 0.4
        - uncited: 0.3 (new papers get the benefit of the doubt)

        Args:
            paper: Paper to score.

        Returns:
            Score between 0 and 1.
        """
        for bucket in self.settings.citation_buckets:
            if paper.cited_by_count >= bucket.min_citations:
                return bucket.score
        return self.settings.uncited_score

    def quality(self, paper: Paper) -> float:
        """Weighted tier/citation signal in [0, 1]."""
        w = self.settings.tier_weight
        return self.tier_score(paper) * w + self.citation_score(paper) * (1.0 - w)

    def baseline(self, paper: Paper) -> float:
        """Baseline score on the 1-10 scale.

        Args:
            paper: Paper to score.

        Returns:
            Baseline between baseline_floor and baseline_floor + baseline_span.
        """
        s = self.settings
        return s.baseline_floor + self.quality(paper) * s.baseline_span
