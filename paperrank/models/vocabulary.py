"""Reference data models: keyword dictionaries and the journal catalog."""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class KeywordEntry(BaseModel):
    """Canonical term plus synonyms used by the keyword matcher"""

    model_config = ConfigDict(frozen=True)

    canonical: str = Field(..., min_length=1)
    synonyms: List[str] = Field(default_factory=list)
    weight: float = Field(1.0, gt=0.0, le=1.0)

    @property
    def terms(self) -> List[str]:
        return [self.canonical, *self.synonyms]


class Journal(BaseModel):
    """Journal catalog entry"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    field: str
    tier: int = Field(..., ge=1, le=3)
    issn: Optional[str] = None
    alt_names: List[str] = Field(default_factory=list)
