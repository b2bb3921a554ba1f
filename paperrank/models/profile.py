from enum import Enum
from typing import List
from pydantic import BaseModel, Field, ConfigDict, field_validator


class ApproachPreference(str, Enum):
    QUANTITATIVE = "quantitative"
    QUALITATIVE = "qualitative"
    BOTH = "both"
    NO_PREFERENCE = "no_preference"


class ExperienceType(str, Enum):
    SPECIALIST = "specialist"
    GENERALIST = "generalist"
    EXPLORER = "explorer"


class UserProfile(BaseModel):
    """Researcher profile used to score papers.

    Order of ``interests`` and ``methods`` is meaningful: the first entry
    carries the highest weight.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    academic_level: str = ""
    primary_field: str = ""
    interests: List[str] = Field(default_factory=list)
    methods: List[str] = Field(default_factory=list)
    approach_preference: ApproachPreference = ApproachPreference.NO_PREFERENCE
    region: str = "Global / No Preference"
    experience_type: ExperienceType = ExperienceType.SPECIALIST
    include_adjacent_fields: bool = True
    selected_adjacent_fields: List[str] = Field(default_factory=list)
    exploration_level: float = Field(
        0.5, ge=0.0, le=1.0, description="0 = narrow, 0.5 = balanced, 1 = exploratory"
    )

    @field_validator("interests", "methods")
    @classmethod
    def drop_blank_labels(cls, v: List[str]) -> List[str]:
        # Order is priority, so only blanks are removed
        return [label.strip() for label in v if label.strip()]

    @field_validator("selected_adjacent_fields")
    @classmethod
    def lowercase_fields(cls, v: List[str]) -> List[str]:
        return [f.strip().lower() for f in v if f.strip()]

    @property
    def has_interests(self) -> bool:
        return bool(self.interests)

    @property
    def has_methods(self) -> bool:
        return bool(self.methods)
