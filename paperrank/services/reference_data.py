"""
Reference data for relevance scoring.

Vocabularies (interest/method keyword dictionaries, concept maps, approach
signal terms, generalist and adjacent field lists) and the journal catalog
are externalized to YAML so they can be edited without touching the
scoring code.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from paperrank.models.profile import UserProfile
from paperrank.models.vocabulary import Journal, KeywordEntry
from paperrank.utils.exceptions import ReferenceDataError

logger = structlog.get_logger()

# Default location of the bundled YAML files
DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"
VOCABULARY_FILE = "vocabulary.yaml"
JOURNALS_FILE = "journals.yaml"


class ReferenceData(BaseModel):
    """Read-only vocabularies and journal catalog.

    Built once and injected into the scorers. Label lookups are exact
    (profile labels come from a fixed option list); field and journal
    lookups are case-insensitive.
    """

    model_config = ConfigDict(frozen=True)

    interest_keywords: Dict[str, KeywordEntry] = Field(default_factory=dict)
    method_keywords: Dict[str, KeywordEntry] = Field(default_factory=dict)
    interest_concepts: Dict[str, List[str]] = Field(default_factory=dict)
    field_concepts: Dict[str, List[str]] = Field(default_factory=dict)
    quantitative_signals: List[str] = Field(default_factory=list)
    qualitative_signals: List[str] = Field(default_factory=list)
    adjacent_fields: List[str] = Field(default_factory=list)
    generalist_fields: List[str] = Field(default_factory=list)
    generalist_levels: List[str] = Field(default_factory=list)
    generalist_experience_types: List[str] = Field(default_factory=list)
    journals: List[Journal] = Field(default_factory=list)

    _journal_index: Dict[str, Journal] = PrivateAttr(default_factory=dict)
    _journal_alias_index: Dict[str, Journal] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for journal in self.journals:
            self._journal_index.setdefault(journal.name, journal)
            for alias in [journal.name, *journal.alt_names]:
                self._journal_alias_index.setdefault(alias.strip().lower(), journal)

    def find_journal(self, name: Optional[str]) -> Optional[Journal]:
        """Look up a journal by display name.

        Exact name first, then a case-insensitive match against canonical
        and alternate names.

        Args:
            name: Journal name as reported by the metadata source.

        Returns:
            Matching catalog entry, or None if unknown.
        """
        if not name:
            return None
        exact = self._journal_index.get(name)
        if exact is not None:
            return exact
        return self._journal_alias_index.get(name.strip().lower())

    def is_adjacent_field(self, field: Optional[str]) -> bool:
        if not field:
            return False
        return field.strip().lower() in {f.lower() for f in self.adjacent_fields}

    def is_generalist(self, profile: UserProfile) -> bool:
        """Whether the profile should be scored as a generalist.

        True for a generalist primary field, a generalist academic level,
        or a generalist/explorer experience type.
        """
        return (
            profile.primary_field in self.generalist_fields
            or profile.academic_level in self.generalist_levels
            or profile.experience_type.value in self.generalist_experience_types
        )


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.error("reference_data_file_not_found", path=str(path))
        raise ReferenceDataError(f"Reference data file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("reference_data_parse_error", path=str(path), error=str(e))
        raise ReferenceDataError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        logger.warning("reference_data_file_empty", path=str(path))
        return {}
    if not isinstance(data, dict):
        raise ReferenceDataError(f"Expected a mapping at the top of {path}")
    return data


def load_reference_data(data_dir: Optional[Path] = None) -> ReferenceData:
    """Load vocabularies and the journal catalog from YAML.

    Args:
        data_dir: Directory holding vocabulary.yaml and journals.yaml.
            Uses the bundled data if None.

    Returns:
        Validated ReferenceData.

    Raises:
        ReferenceDataError: If a file is missing, unparseable, or an entry
            has the wrong shape.
    """
    base = Path(data_dir) if data_dir else DEFAULT_DATA_DIR

    vocabulary = _read_yaml(base / VOCABULARY_FILE)
    catalog = _read_yaml(base / JOURNALS_FILE)
    signals = vocabulary.get("approach_signals") or {}

    try:
        reference = ReferenceData(
            interest_keywords=vocabulary.get("interest_keywords") or {},
            method_keywords=vocabulary.get("method_keywords") or {},
            interest_concepts=vocabulary.get("interest_concepts") or {},
            field_concepts=vocabulary.get("field_concepts") or {},
            quantitative_signals=signals.get("quantitative") or [],
            qualitative_signals=signals.get("qualitative") or [],
            adjacent_fields=vocabulary.get("adjacent_fields") or [],
            generalist_fields=vocabulary.get("generalist_fields") or [],
            generalist_levels=vocabulary.get("generalist_levels") or [],
            generalist_experience_types=(
                vocabulary.get("generalist_experience_types") or []
            ),
            journals=catalog.get("journals") or [],
        )
    except ValidationError as e:
        logger.error("reference_data_invalid", path=str(base), error=str(e))
        raise ReferenceDataError(f"Invalid reference data in {base}: {e}") from e

    logger.info(
        "reference_data_loaded",
        path=str(base),
        interests=len(reference.interest_keywords),
        methods=len(reference.method_keywords),
        journals=len(reference.journals),
    )
    return reference


@lru_cache(maxsize=1)
def get_default_reference_data() -> ReferenceData:
    """Bundled reference data, loaded once per process."""
    return load_reference_data()
