"""
Recommendation service.

Entry points used by the CLI and by library callers:

- ``score``: validate inputs, run the taxonomy pass, build the summary
- ``rerank``: blend AI scores into an already scored list (never raises)
- ``validate_api_key``: probe a key/model pair with a trivial prompt

Profiles and papers may be passed as models or plain dicts; dicts are
validated with pydantic before any scoring happens.
"""

from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import structlog
from pydantic import ValidationError

from paperrank.models.config import EngineConfig
from paperrank.models.paper import Paper, ScoredPaper
from paperrank.models.profile import UserProfile
from paperrank.models.results import RerankRequest, RerankResult, ScoringResult
from paperrank.observability.context import correlation_id_context
from paperrank.services.llm.providers.base import LLMProvider
from paperrank.services.reference_data import ReferenceData, get_default_reference_data
from paperrank.services.reranker import AIReranker
from paperrank.services.scoring.composer import EXPLANATION_SEPARATOR, RelevanceScorer
from paperrank.utils.exceptions import ProfileValidationError

logger = structlog.get_logger()

ProfileInput = Union[UserProfile, Mapping[str, Any]]
PaperInput = Union[Paper, Mapping[str, Any]]

NO_PAPERS_SUMMARY = "No papers found."


def _coerce_profile(profile: ProfileInput) -> UserProfile:
    if isinstance(profile, UserProfile):
        return profile
    try:
        return UserProfile.model_validate(profile)
    except ValidationError as e:
        raise ProfileValidationError(f"Invalid profile: {e}") from e


def _coerce_papers(papers: Sequence[PaperInput], model: type = Paper) -> List[Any]:
    coerced = []
    for idx, paper in enumerate(papers):
        if isinstance(paper, model):
            coerced.append(paper)
            continue
        try:
            coerced.append(model.model_validate(paper))
        except ValidationError as e:
            raise ProfileValidationError(f"Invalid paper at index {idx}: {e}") from e
    return coerced


def build_summary(profile: UserProfile, total: int, high_relevance: int) -> str:
    """One-line summary of a scoring run."""
    if total == 0:
        return NO_PAPERS_SUMMARY
    counts = EXPLANATION_SEPARATOR.join(
        [f"{total} papers", f"{high_relevance} highly relevant"]
    )
    if not profile.has_interests and not profile.has_methods:
        return f"Showing quality research: {counts}"
    return f"Analyzed {counts}"


class RecommendationService:
    """Scores and reranks papers for a researcher profile."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        reference: Optional[ReferenceData] = None,
        provider: Optional[LLMProvider] = None,
    ):
        """Initialize recommendation service.

        Args:
            config: Engine configuration. Defaults if None.
            reference: Vocabularies and journal catalog. Bundled data if None.
            provider: Fixed LLM provider for reranking. Created per request
                from the request's key and model if None.
        """
        self.config = config or EngineConfig()
        self.reference = reference or get_default_reference_data()
        self.reranker = AIReranker(settings=self.config.rerank, provider=provider)

    def _request(self, request: Optional[RerankRequest]) -> RerankRequest:
        # Configured key fills in when the caller supplies none
        request = request or RerankRequest()
        if not request.api_key and self.config.api_key:
            return request.model_copy(update={"api_key": self.config.api_key})
        return request

    def score(
        self, profile: ProfileInput, papers: Sequence[PaperInput]
    ) -> ScoringResult:
        """Score and rank papers for a profile.

        Invalid input is reported on ``ScoringResult.error`` with no papers.

        Args:
            profile: Researcher profile (model or dict).
            papers: Candidate papers (models or dicts).

        Returns:
            ScoringResult with papers sorted by relevance.
        """
        with correlation_id_context():
            try:
                user = _coerce_profile(profile)
                candidates = _coerce_papers(papers)
            except ProfileValidationError as e:
                logger.warning("scoring_input_invalid", error=str(e))
                return ScoringResult(error=str(e))

            scorer = RelevanceScorer(user, self.reference, self.config.scoring)
            scored = scorer.score_papers(candidates)
            threshold = self.config.scoring.high_relevance_threshold
            high = sum(1 for p in scored if p.relevance_score >= threshold)

            return ScoringResult(
                papers=scored,
                summary=build_summary(user, len(scored), high),
                high_relevance_count=high,
            )

    async def rerank(
        self,
        papers: Sequence[Union[ScoredPaper, Mapping[str, Any]]],
        profile: ProfileInput,
        request: Optional[RerankRequest] = None,
    ) -> RerankResult:
        """Blend AI scores into a scored list. Never raises.

        Args:
            papers: Output of ``score`` (models or dicts).
            profile: Researcher profile (model or dict).
            request: API key, model and provider. The configured key is used
                when the request carries none.

        Returns:
            RerankResult; on any failure the input papers come back unchanged
            (as ScoredPaper models). If the papers themselves are invalid,
            no papers come back and the error names the bad index.
        """
        with correlation_id_context():
            scored: List[ScoredPaper] = []
            try:
                scored = _coerce_papers(papers, model=ScoredPaper)
                user = _coerce_profile(profile)
                return await self.reranker.rerank(scored, user, self._request(request))
            except ProfileValidationError as e:
                logger.warning("rerank_input_invalid", error=str(e))
                return RerankResult(papers=scored, error=str(e))
            except Exception as e:
                logger.exception("rerank_failed")
                return RerankResult(papers=scored, error=str(e))

    async def validate_api_key(
        self, request: Optional[RerankRequest] = None
    ) -> Tuple[bool, Optional[str]]:
        """Check that a key/model pair answers a trivial prompt."""
        return await self.reranker.validate_api_key(self._request(request))


@lru_cache(maxsize=1)
def get_default_service() -> RecommendationService:
    return RecommendationService()


def score(profile: ProfileInput, papers: Sequence[PaperInput]) -> ScoringResult:
    """Score papers with the default configuration."""
    return get_default_service().score(profile, papers)


async def rerank(
    papers: Sequence[Union[ScoredPaper, Mapping[str, Any]]],
    profile: ProfileInput,
    request: Optional[RerankRequest] = None,
) -> RerankResult:
    """Rerank papers with the default configuration."""
    return await get_default_service().rerank(papers, profile, request)


async def validate_api_key(
    request: Optional[RerankRequest] = None,
) -> Tuple[bool, Optional[str]]:
    return await get_default_service().validate_api_key(request)
