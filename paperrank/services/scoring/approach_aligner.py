"""
Quantitative/qualitative approach alignment.

This is a coarse keyword heuristic, not a classifier: it counts how many
signal terms of each kind appear in the text and compares the detected
approach with the researcher's stated preference through a lookup table.
"""

from enum import Enum
from typing import Dict, Sequence, Tuple

from paperrank.models.profile import ApproachPreference


class DetectedApproach(str, Enum):
    QUANTITATIVE = "quantitative"
    QUALITATIVE = "qualitative"
    MIXED = "mixed"
    UNKNOWN = "unknown"


# Preferences that are indifferent to the detected approach
NEUTRAL_SCORE = 0.5
_INDIFFERENT = {ApproachPreference.NO_PREFERENCE, ApproachPreference.BOTH}

# (preference, detected) -> alignment
ALIGNMENT: Dict[Tuple[ApproachPreference, DetectedApproach], float] = {
    (ApproachPreference.QUANTITATIVE, DetectedApproach.QUANTITATIVE): 1.0,
    (ApproachPreference.QUANTITATIVE, DetectedApproach.QUALITATIVE): 0.3,
    (ApproachPreference.QUANTITATIVE, DetectedApproach.MIXED): 0.7,
    (ApproachPreference.QUANTITATIVE, DetectedApproach.UNKNOWN): NEUTRAL_SCORE,
    (ApproachPreference.QUALITATIVE, DetectedApproach.QUALITATIVE): 1.0,
    (ApproachPreference.QUALITATIVE, DetectedApproach.QUANTITATIVE): 0.3,
    (ApproachPreference.QUALITATIVE, DetectedApproach.MIXED): 0.7,
    (ApproachPreference.QUALITATIVE, DetectedApproach.UNKNOWN): NEUTRAL_SCORE,
}


class ApproachAligner:
    """Detect a paper's approach and score it against a preference."""

    def __init__(
        self,
        quantitative_signals: Sequence[str],
        qualitative_signals: Sequence[str],
        threshold: int = 2,
    ):
        """Initialize aligner.

        Args:
            quantitative_signals: Terms suggesting a quantitative paper.
            qualitative_signals: Terms suggesting a qualitative paper.
            threshold: A kind is detected when strictly more than this many
                of its signals occur.
        """
        self.quantitative_signals = [s.lower() for s in quantitative_signals]
        self.qualitative_signals = [s.lower() for s in qualitative_signals]
        self.threshold = threshold

    def detect(self, text: str) -> DetectedApproach:
        lowered = (text or "").lower()
        quant = sum(1 for s in self.quantitative_signals if s in lowered)
        qual = sum(1 for s in self.qualitative_signals if s in lowered)

        if quant > self.threshold and qual > self.threshold:
            return DetectedApproach.MIXED
        if quant > self.threshold:
            return DetectedApproach.QUANTITATIVE
        if qual > self.threshold:
            return DetectedApproach.QUALITATIVE
        return DetectedApproach.UNKNOWN

    def score(self, text: str, preference: ApproachPreference) -> float:
        """Alignment in [0, 1] between the text's approach and the preference."""
        if preference in _INDIFFERENT:
            return NEUTRAL_SCORE
        return ALIGNMENT[(preference, self.detect(text))]
