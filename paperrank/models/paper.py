from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import date


class MatchTier(str, Enum):
    """Presentation bucket derived from the final score"""

    CORE = "core"
    EXPLORE = "explore"
    DISCOVERY = "discovery"


class ConceptTag(BaseModel):
    """Classifier tag attached to a paper by the metadata source"""

    model_config = ConfigDict(frozen=True)

    name: str
    score: float = Field(0.0, ge=0.0, le=1.0, description="Classifier confidence")


class Paper(BaseModel):
    """Normalized metadata for a candidate paper"""

    model_config = ConfigDict(frozen=True)

    # Identifiers
    id: str = Field(..., min_length=1)
    doi: Optional[str] = None
    doi_url: Optional[str] = None

    # Content
    title: str = ""
    abstract: str = ""
    authors: List[str] = Field(default_factory=list)
    institutions: List[str] = Field(default_factory=list)

    # Venue
    journal: str = "Unknown Journal"
    journal_tier: int = Field(
        4, ge=1, le=4, description="1 = flagship, 2 = top field, 3 = excellent, 4 = other"
    )
    journal_field: Optional[str] = None

    # Metadata
    publication_date: Optional[date] = None
    concepts: List[ConceptTag] = Field(default_factory=list)
    cited_by_count: int = Field(0, ge=0)

    # Access
    is_open_access: bool = False
    oa_url: Optional[str] = None


class ScoredPaper(Paper):
    """Paper with relevance score, explanation and optional AI annotations"""

    relevance_score: float = Field(..., ge=1.0, le=10.0)
    matched_interests: List[str] = Field(default_factory=list)
    matched_methods: List[str] = Field(default_factory=list)
    matched_topics: List[str] = Field(default_factory=list)
    match_explanation: str = ""
    is_adjacent_field: bool = False
    match_tier: Optional[MatchTier] = None

    # Set by the AI reranker
    ai_score: Optional[float] = Field(None, ge=1.0, le=10.0)
    ai_discovery: Optional[float] = Field(None, ge=1.0, le=10.0)
    original_score: Optional[float] = None
    ai_explanation: Optional[str] = None
