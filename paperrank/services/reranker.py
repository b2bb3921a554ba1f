"""
AI batch reranker.

Sends the top taxonomy-ranked papers to an LLM in fixed-size batches,
parses a relevance and a discovery score per paper, and blends them into
the taxonomy score with weights driven by the researcher's exploration
level:

    taxonomy_weight = 0.55 - exploration * 0.2      (0.35 - 0.55)
    ai_weight       = 1 - taxonomy_weight
    ai_combined     = relevance * (1 - exploration * 0.4)
                      + discovery * (exploration * 0.4)
    blended         = clamp(original * taxonomy_weight + ai_combined * ai_weight)

Outcomes:
- full_blend: at least one batch produced at least one score
- unchanged: nothing scored; the input list is returned as-is
- aborted: an authentication, quota, rate-limit or model error stopped the
  remaining batches (partial blend if something already succeeded)

``rerank`` never raises; every failure is reported on the result.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from paperrank.models.config import RerankSettings
from paperrank.models.paper import ScoredPaper
from paperrank.models.profile import UserProfile
from paperrank.models.results import AIScore, RerankRequest, RerankResult
from paperrank.observability.metrics import (
    LLM_REQUEST_DURATION,
    RERANK_BATCHES,
    RERANK_RUNS,
)
from paperrank.services.llm.exceptions import (
    AuthenticationError,
    LLMProviderError,
    ModelNotFoundError,
    ProviderTimeoutError,
    RateLimitError,
)
from paperrank.services.llm.prompt_builder import PromptBuilder
from paperrank.services.llm.providers import create_provider
from paperrank.services.llm.providers.base import LLMProvider
from paperrank.services.llm.response_parser import ResponseParser
from paperrank.utils.exceptions import RerankError
from paperrank.utils.scores import clamp_score

logger = structlog.get_logger()

NO_API_KEY = "No API key"
NO_RESULTS = "AI scoring returned no results"
NO_VALID_SCORES = "No valid scores in response"
VALIDATION_PROMPT = "Reply with exactly: OK"

# Errors that would fail every remaining batch too (QuotaExhaustedError
# is a RateLimitError)
ABORTING_ERRORS = (AuthenticationError, RateLimitError, ModelNotFoundError)


@dataclass
class BatchOutcome:
    """Result of one batch call"""

    offset: int
    scores: List[AIScore] = field(default_factory=list)
    error: Optional[str] = None
    fatal: bool = False
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return bool(self.scores)


class AIReranker:
    """Blend LLM scores into a taxonomy-ranked paper list."""

    def __init__(
        self,
        settings: Optional[RerankSettings] = None,
        provider: Optional[LLMProvider] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        response_parser: Optional[ResponseParser] = None,
    ):
        """Initialize reranker.

        Args:
            settings: Batch, timeout and blend settings. Defaults if None.
            provider: Provider to use for every request. When None, one is
                created per request from the request's key and model.
            prompt_builder: Prompt builder. Built from settings if None.
            response_parser: Response parser. Built from settings if None.
        """
        self.settings = settings or RerankSettings()
        self._provider = provider
        self.prompt_builder = prompt_builder or PromptBuilder(
            abstract_chars=self.settings.abstract_chars
        )
        self.response_parser = response_parser or ResponseParser(
            reason_chars=self.settings.reason_chars
        )

    def _resolve_provider(self, request: RerankRequest) -> LLMProvider:
        if self._provider is not None:
            return self._provider
        return create_provider(
            request.provider or self.settings.provider,
            api_key=request.api_key or "",
            model=request.model or self.settings.model,
        )

    def blend_weights(self, exploration: float) -> Tuple[float, float]:
        """(taxonomy_weight, ai_weight) for an exploration level in [0, 1]."""
        s = self.settings
        taxonomy_weight = s.taxonomy_weight_base - exploration * s.taxonomy_weight_span
        return taxonomy_weight, 1.0 - taxonomy_weight

    def blend_score(self, original: float, score: AIScore, exploration: float) -> float:
        """Blend one taxonomy score with its AI scores.

        Args:
            original: Taxonomy relevance score
            score: Parsed AI relevance/discovery
            exploration: Researcher exploration level

        Returns:
            Blended score on the 1-10 scale, one decimal
        """
        taxonomy_weight, ai_weight = self.blend_weights(exploration)
        discovery_share = exploration * self.settings.discovery_weight_span
        ai_combined = (
            score.relevance * (1.0 - discovery_share) + score.discovery * discovery_share
        )
        return clamp_score(original * taxonomy_weight + ai_combined * ai_weight)

    def _apply(
        self, paper: ScoredPaper, score: AIScore, exploration: float
    ) -> ScoredPaper:
        return paper.model_copy(
            update={
                "relevance_score": self.blend_score(
                    paper.relevance_score, score, exploration
                ),
                "original_score": paper.relevance_score,
                "ai_score": score.relevance,
                "ai_discovery": score.discovery,
                "ai_explanation": score.reason or None,
            }
        )

    async def _run_batch(
        self,
        provider: LLMProvider,
        profile: UserProfile,
        offset: int,
        batch: Sequence[ScoredPaper],
    ) -> BatchOutcome:
        """Score one batch; failures are captured on the outcome."""
        s = self.settings

        try:
            prompt = self.prompt_builder.build(profile, batch)
            with LLM_REQUEST_DURATION.labels(provider=provider.name).time():
                response = await asyncio.wait_for(
                    provider.generate(
                        prompt,
                        max_tokens=s.max_output_tokens,
                        temperature=s.temperature,
                    ),
                    timeout=s.timeout_seconds,
                )
            scores = self.response_parser.parse(response.content, len(batch))
        except asyncio.TimeoutError:
            error: Exception = ProviderTimeoutError(
                timeout=s.timeout_seconds, provider=provider.name
            )
            return self._failed(offset, error)
        except ABORTING_ERRORS as e:
            return self._failed(offset, e, fatal=True)
        except (LLMProviderError, RerankError) as e:
            return self._failed(offset, e)
        except Exception as e:
            logger.exception("rerank_batch_unexpected_error", offset=offset)
            return self._failed(offset, e)

        if not scores:
            return self._failed(offset, RerankError(NO_VALID_SCORES))

        RERANK_BATCHES.labels(status="success").inc()
        logger.debug(
            "rerank_batch_completed",
            offset=offset,
            size=len(batch),
            scored=len(scores),
        )
        return BatchOutcome(offset=offset, scores=scores)

    def _failed(
        self, offset: int, error: Exception, fatal: bool = False
    ) -> BatchOutcome:
        RERANK_BATCHES.labels(status="failed").inc()
        logger.warning(
            "rerank_batch_failed",
            offset=offset,
            error_type=type(error).__name__,
            error=str(error),
            fatal=fatal,
        )
        return BatchOutcome(offset=offset, error=str(error), fatal=fatal)

    async def _run_sequential(
        self,
        provider: LLMProvider,
        profile: UserProfile,
        batches: List[Tuple[int, List[ScoredPaper]]],
    ) -> List[BatchOutcome]:
        outcomes: List[BatchOutcome] = []
        for offset, batch in batches:
            if outcomes and outcomes[-1].fatal:
                RERANK_BATCHES.labels(status="skipped").inc()
                outcomes.append(BatchOutcome(offset=offset, skipped=True))
                continue
            outcomes.append(await self._run_batch(provider, profile, offset, batch))
        return outcomes

    async def _run_concurrent(
        self,
        provider: LLMProvider,
        profile: UserProfile,
        batches: List[Tuple[int, List[ScoredPaper]]],
    ) -> List[BatchOutcome]:
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_batches)
        abort = asyncio.Event()

        async def guarded(offset: int, batch: List[ScoredPaper]) -> BatchOutcome:
            async with semaphore:
                if abort.is_set():
                    RERANK_BATCHES.labels(status="skipped").inc()
                    return BatchOutcome(offset=offset, skipped=True)
                outcome = await self._run_batch(provider, profile, offset, batch)
                if outcome.fatal:
                    abort.set()
                return outcome

        outcomes = await asyncio.gather(*(guarded(o, b) for o, b in batches))
        return sorted(outcomes, key=lambda o: o.offset)

    def _unchanged(
        self,
        papers: Sequence[ScoredPaper],
        error: str,
        batches_failed: int = 0,
        aborted: bool = False,
    ) -> RerankResult:
        RERANK_RUNS.labels(outcome="aborted" if aborted else "unchanged").inc()
        logger.warning(
            "rerank_unchanged",
            papers=len(papers),
            error=error,
            aborted=aborted,
        )
        return RerankResult(
            papers=list(papers),
            ai_enhanced=False,
            ai_papers_scored=0,
            batches_failed=batches_failed,
            aborted=aborted,
            error=error,
        )

    async def rerank(
        self,
        papers: Sequence[ScoredPaper],
        profile: UserProfile,
        request: Optional[RerankRequest] = None,
    ) -> RerankResult:
        """Blend AI scores into the top of a scored paper list.

        Args:
            papers: Output of the taxonomy pass, sorted by relevance
            profile: Researcher profile (drives the prompt and blend weights)
            request: API key, model and provider for this call

        Returns:
            RerankResult. On total failure ``papers`` equals the input and
            ``ai_enhanced`` is False.
        """
        request = request or RerankRequest()
        if not request.api_key:
            return self._unchanged(papers, NO_API_KEY)

        try:
            provider = self._resolve_provider(request)
        except LLMProviderError as e:
            return self._unchanged(papers, str(e))

        s = self.settings
        eligible = list(papers[: s.max_papers])
        remainder = list(papers[s.max_papers :])
        batches = [
            (offset, eligible[offset : offset + s.batch_size])
            for offset in range(0, len(eligible), s.batch_size)
        ]

        logger.info(
            "rerank_started",
            provider=provider.name,
            model=provider.model,
            eligible=len(eligible),
            batches=len(batches),
            concurrency=s.max_concurrent_batches,
        )

        if s.max_concurrent_batches > 1:
            outcomes = await self._run_concurrent(provider, profile, batches)
        else:
            outcomes = await self._run_sequential(provider, profile, batches)

        ai_scores: Dict[int, AIScore] = {}
        for outcome in outcomes:
            for score in outcome.scores:
                ai_scores[outcome.offset + score.index] = score

        succeeded = sum(1 for o in outcomes if o.succeeded)
        failed = [o for o in outcomes if o.error is not None]
        fatal = [o for o in failed if o.fatal]
        aborted = bool(fatal)
        last_error = (fatal or failed)[-1].error if failed else None

        if succeeded == 0:
            return self._unchanged(
                papers,
                last_error or NO_RESULTS,
                batches_failed=len(failed),
                aborted=aborted,
            )

        exploration = profile.exploration_level
        blended = [
            self._apply(paper, ai_scores[idx], exploration) if idx in ai_scores else paper
            for idx, paper in enumerate(eligible)
        ]
        blended.sort(key=lambda p: p.relevance_score, reverse=True)

        RERANK_RUNS.labels(outcome="aborted" if aborted else "full_blend").inc()
        logger.info(
            "rerank_completed",
            ai_papers_scored=len(ai_scores),
            batches_succeeded=succeeded,
            batches_failed=len(failed),
            aborted=aborted,
        )

        return RerankResult(
            papers=blended + remainder,
            ai_enhanced=True,
            ai_papers_scored=len(ai_scores),
            batches_succeeded=succeeded,
            batches_failed=len(failed),
            aborted=aborted,
            error=last_error,
        )

    async def validate_api_key(
        self, request: RerankRequest
    ) -> Tuple[bool, Optional[str]]:
        """Check that a key and model can answer a trivial prompt.

        Args:
            request: API key, model and provider to check

        Returns:
            Tuple of (valid, error message or None)
        """
        if not request.api_key:
            return False, NO_API_KEY

        try:
            provider = self._resolve_provider(request)
            response = await asyncio.wait_for(
                provider.generate(VALIDATION_PROMPT, max_tokens=16, temperature=0.0),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return False, str(ProviderTimeoutError(timeout=self.settings.timeout_seconds))
        except LLMProviderError as e:
            logger.warning("api_key_validation_failed", error=str(e))
            return False, str(e)

        return bool(response.content.strip()), None
