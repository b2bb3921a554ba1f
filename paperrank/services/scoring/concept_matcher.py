"""Match a paper's classifier tags against the concepts a profile implies."""

from typing import FrozenSet, List, Sequence, Tuple

from paperrank.models.paper import ConceptTag
from paperrank.models.profile import UserProfile
from paperrank.services.reference_data import ReferenceData
from paperrank.services.scoring.text import normalize_text


class ConceptMatcher:
    """Bidirectional containment match between tags and target concepts.

    The target set is the union of the primary field's concepts (skipped
    for generalists) and the concepts of every selected interest, all
    normalized. A tag matches when its normalized name contains a target
    or a target contains it; each tag is counted once.
    """

    def __init__(
        self,
        profile: UserProfile,
        reference: ReferenceData,
        is_generalist: bool = False,
        saturation: float = 1.5,
        max_matches: int = 5,
    ):
        self.saturation = saturation
        self.max_matches = max_matches
        self.targets: FrozenSet[str] = self._build_targets(
            profile, reference, is_generalist
        )

    @staticmethod
    def _build_targets(
        profile: UserProfile, reference: ReferenceData, is_generalist: bool
    ) -> FrozenSet[str]:
        concepts: List[str] = []
        if not is_generalist:
            concepts.extend(reference.field_concepts.get(profile.primary_field, []))
        for interest in profile.interests:
            concepts.extend(reference.interest_concepts.get(interest, []))

        normalized = (normalize_text(c) for c in concepts)
        return frozenset(c for c in normalized if c)

    def match(self, tags: Sequence[ConceptTag]) -> Tuple[float, List[str]]:
        """Score tags against the target set.

        Args:
            tags: Classifier tags of a paper.

        Returns:
            Tuple of (score in [0, 1], matched tag names in original
            spelling, at most ``max_matches``). Score is the summed
            confidence of matched tags divided by the saturation point.
        """
        if not tags or not self.targets:
            return 0.0, []

        matched: List[str] = []
        confidence = 0.0
        for tag in tags:
            name = normalize_text(tag.name)
            if not name:
                continue
            if any(name in target or target in name for target in self.targets):
                matched.append(tag.name)
                confidence += tag.score

        return min(1.0, confidence / self.saturation), matched[: self.max_matches]
