"""
OpenAlex work normalization.

Turns raw OpenAlex work dicts (as returned by the /works endpoint) into
``Paper`` records. Pure functions only: fetching, paging and rate limiting
belong to the caller.
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog
from pydantic import ValidationError

from paperrank.models.paper import ConceptTag, Paper
from paperrank.services.reference_data import ReferenceData
from paperrank.utils.scores import round_half_up

logger = structlog.get_logger()

OPENALEX_ID_PREFIX = "https://openalex.org/"
DOI_PREFIX = "https://doi.org/"
UNKNOWN_JOURNAL = "Unknown Journal"
UNRANKED_TIER = 4

MIN_ABSTRACT_CHARS = 80
MAX_AUTHORS = 10
INSTITUTION_AUTHORSHIPS = 5
MAX_INSTITUTIONS = 3
MIN_CONCEPT_SCORE = 0.2
MAX_CONCEPTS = 8


def reconstruct_abstract(inverted_index: Optional[Dict[str, List[int]]]) -> str:
    """Rebuild abstract text from OpenAlex's inverted index.

    Args:
        inverted_index: Word -> list of positions.

    Returns:
        Words joined by single spaces in position order, "" if absent.
    """
    if not inverted_index:
        return ""

    positioned = [
        (pos, word)
        for word, positions in inverted_index.items()
        for pos in positions or []
        if isinstance(pos, int)
    ]
    positioned.sort(key=lambda item: item[0])
    return " ".join(word for _, word in positioned)


def _authors(authorships: List[Dict[str, Any]]) -> List[str]:
    names = []
    for authorship in authorships[:MAX_AUTHORS]:
        name = (authorship.get("author") or {}).get("display_name")
        if name:
            names.append(name)
    return names


def _institutions(authorships: List[Dict[str, Any]]) -> List[str]:
    # First institution of each of the first few authors, deduplicated
    names: List[str] = []
    for authorship in authorships[:INSTITUTION_AUTHORSHIPS]:
        for institution in (authorship.get("institutions") or [])[:1]:
            name = institution.get("display_name")
            if name and name not in names:
                names.append(name)
    return names[:MAX_INSTITUTIONS]


def _concepts(raw: List[Dict[str, Any]]) -> List[ConceptTag]:
    strong = [c for c in raw if (c.get("score") or 0) > MIN_CONCEPT_SCORE]
    return [
        ConceptTag(
            name=c.get("display_name") or "",
            score=min(1.0, round_half_up(c.get("score") or 0, 2)),
        )
        for c in strong[:MAX_CONCEPTS]
    ]


def normalize_doi_url(doi: Optional[str]) -> Optional[str]:
    if not doi:
        return None
    return DOI_PREFIX + doi.replace(DOI_PREFIX, "")


def paper_from_openalex(
    work: Dict[str, Any], reference: ReferenceData
) -> Optional[Paper]:
    """Normalize one OpenAlex work.

    Works without a title, an id, or an abstract of at least 80 characters
    are skipped. Journal tier and field come from the catalog; unknown
    journals get tier 4 and no field.

    Args:
        work: Raw OpenAlex work dict.
        reference: Reference data holding the journal catalog.

    Returns:
        Paper, or None if the work is skipped.
    """
    title = work.get("title")
    if not title:
        return None

    abstract = reconstruct_abstract(work.get("abstract_inverted_index"))
    if len(abstract) < MIN_ABSTRACT_CHARS:
        return None

    paper_id = (work.get("id") or "").replace(OPENALEX_ID_PREFIX, "")
    if not paper_id:
        return None

    authorships = work.get("authorships") or []
    source = (work.get("primary_location") or {}).get("source") or {}
    journal_name = source.get("display_name") or UNKNOWN_JOURNAL
    journal = reference.find_journal(journal_name)
    open_access = work.get("open_access") or {}
    doi = work.get("doi")

    try:
        return Paper(
            id=paper_id,
            doi=doi or None,
            doi_url=normalize_doi_url(doi),
            title=title,
            abstract=abstract,
            authors=_authors(authorships),
            institutions=_institutions(authorships),
            journal=journal_name,
            journal_tier=journal.tier if journal else UNRANKED_TIER,
            journal_field=journal.field if journal else None,
            publication_date=work.get("publication_date") or None,
            concepts=_concepts(work.get("concepts") or []),
            cited_by_count=work.get("cited_by_count") or 0,
            is_open_access=bool(open_access.get("is_oa")),
            oa_url=open_access.get("oa_url") or None,
        )
    except ValidationError as e:
        logger.warning("openalex_work_invalid", work_id=paper_id, error=str(e))
        return None


def papers_from_openalex(
    works: Iterable[Dict[str, Any]], reference: ReferenceData
) -> List[Paper]:
    """Normalize a page of works, dropping the ones that are skipped."""
    works = list(works)
    papers = [
        paper
        for paper in (paper_from_openalex(w, reference) for w in works)
        if paper is not None
    ]
    logger.info(
        "openalex_works_normalized",
        total=len(works),
        kept=len(papers),
        skipped=len(works) - len(papers),
    )
    return papers
