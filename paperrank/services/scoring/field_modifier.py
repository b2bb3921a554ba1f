"""Multiplicative modifier for papers from fields adjacent to the core ones."""

from typing import Tuple

from paperrank.models.config import ScoringSettings
from paperrank.models.paper import Paper
from paperrank.models.profile import UserProfile
from paperrank.services.reference_data import ReferenceData


class FieldModifier:
    """Compute (modifier, is_adjacent) for a paper's journal field.

    - no field, or a core field: (1.0, False)
    - adjacent field the researcher opted into: (0.95, True)
    - adjacent field otherwise: (0.7, True)

    Opting in needs both ``include_adjacent_fields`` and the field in
    ``selected_adjacent_fields``.
    """

    def __init__(
        self, profile: UserProfile, reference: ReferenceData, settings: ScoringSettings
    ):
        self.reference = reference
        self.settings = settings
        self.opted_in = (
            set(profile.selected_adjacent_fields)
            if profile.include_adjacent_fields
            else set()
        )

    def modify(self, paper: Paper) -> Tuple[float, bool]:
        field = paper.journal_field
        if not field or not self.reference.is_adjacent_field(field):
            return 1.0, False
        if field.strip().lower() in self.opted_in:
            return self.settings.adjacent_opted_in_modifier, True
        return self.settings.adjacent_penalty_modifier, True
