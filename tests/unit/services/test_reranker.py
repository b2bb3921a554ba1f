"""Tests for AIReranker."""

import asyncio
import json
import re
from typing import Callable, List, Optional

import pytest

from paperrank.models.config import RerankSettings
from paperrank.models.paper import ScoredPaper
from paperrank.models.profile import UserProfile
from paperrank.models.results import RerankRequest
from paperrank.services.llm.exceptions import (
    AuthenticationError,
    ProviderUnavailableError,
    RateLimitError,
)
from paperrank.services.llm.providers.base import LLMProvider, LLMResponse
from paperrank.services.reranker import NO_API_KEY, NO_VALID_SCORES, AIReranker

_PAPER_LINE = re.compile(r'^\[(\d+)\] "', re.MULTILINE)

REQUEST = RerankRequest(api_key="test-key")


class FakeProvider(LLMProvider):
    """Provider returning scripted responses (or raising scripted errors)."""

    def __init__(
        self,
        responses: Optional[list] = None,
        responder: Optional[Callable[[str], object]] = None,
        delay: float = 0.0,
    ):
        self.responses = list(responses or [])
        self.responder = responder
        self.delay = delay
        self.prompts: List[str] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt, max_tokens=1024, temperature=0.1) -> LLMResponse:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        item = self.responder(prompt) if self.responder else self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            input_tokens=10,
            output_tokens=10,
            model=self.model,
            provider=self.name,
            latency_ms=1.0,
        )


def scores_json(count: int, relevance: float = 8, discovery: Optional[float] = None) -> str:
    discovery = relevance if discovery is None else discovery
    return json.dumps(
        [
            {"index": i, "relevance": relevance, "discovery": discovery, "reason": "fit"}
            for i in range(count)
        ]
    )


def score_every_paper(relevance: float = 8) -> Callable[[str], str]:
    def respond(prompt: str) -> str:
        return scores_json(len(_PAPER_LINE.findall(prompt)), relevance)

    return respond


def make_papers(count: int) -> List[ScoredPaper]:
    return [
        ScoredPaper(
            id=f"W{i}",
            title=f"Paper {i}",
            journal="Journal",
            relevance_score=round(9.0 - i * 0.2, 1),
            match_explanation="Inequality · Top journal",
        )
        for i in range(count)
    ]


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(interests=["Inequality"], exploration_level=0.5)


class TestBlendWeights:
    """Tests for blend weight arithmetic."""

    def test_taxonomy_weight_decreases_with_exploration(self):
        reranker = AIReranker()
        levels = [0.0, 0.25, 0.5, 0.75, 1.0]
        weights = [reranker.blend_weights(e)[0] for e in levels]
        assert weights == sorted(weights, reverse=True)
        assert len(set(weights)) == len(weights)
        assert weights[0] == pytest.approx(0.55)
        assert weights[-1] == pytest.approx(0.35)

    def test_weights_sum_to_one(self):
        taxonomy, ai = AIReranker().blend_weights(0.3)
        assert taxonomy + ai == pytest.approx(1.0)

    def test_blend_score(self):
        from paperrank.models.results import AIScore

        score = AIScore(index=0, relevance=8.0, discovery=8.0)
        assert AIReranker().blend_score(6.0, score, 0.5) == pytest.approx(7.1)

    def test_discovery_weighs_more_when_exploring(self):
        from paperrank.models.results import AIScore

        reranker = AIReranker()
        score = AIScore(index=0, relevance=3.0, discovery=10.0)
        assert reranker.blend_score(5.0, score, 1.0) > reranker.blend_score(5.0, score, 0.0)


class TestRerank:
    """Tests for AIReranker.rerank()."""

    @pytest.mark.asyncio
    async def test_no_api_key(self, profile):
        papers = make_papers(3)
        provider = FakeProvider(responder=score_every_paper())
        result = await AIReranker(provider=provider).rerank(papers, profile, RerankRequest())

        assert result.ai_enhanced is False
        assert result.error == NO_API_KEY
        assert result.papers == papers
        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_full_blend(self, profile):
        papers = make_papers(3)
        provider = FakeProvider(responses=[scores_json(3, relevance=8)])
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert result.ai_enhanced is True
        assert result.ai_papers_scored == 3
        assert result.batches_succeeded == 1
        assert result.error is None
        first = next(p for p in result.papers if p.id == "W0")
        assert first.original_score == 9.0
        assert first.ai_score == 8.0
        assert first.ai_discovery == 8.0
        assert first.ai_explanation == "fit"
        assert first.match_explanation == "Inequality · Top journal"
        assert first.relevance_score == pytest.approx(9.0 * 0.45 + 8.0 * 0.55, abs=0.06)

    @pytest.mark.asyncio
    async def test_ai_scores_reorder(self, profile):
        papers = [
            ScoredPaper(id="A", relevance_score=7.0),
            ScoredPaper(id="B", relevance_score=5.0),
        ]
        response = json.dumps(
            [
                {"index": 0, "relevance": 1, "discovery": 1, "reason": "off topic"},
                {"index": 1, "relevance": 10, "discovery": 10, "reason": "core"},
            ]
        )
        provider = FakeProvider(responses=[response])
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert [p.id for p in result.papers] == ["B", "A"]
        assert result.papers[0].relevance_score == pytest.approx(7.8)

    @pytest.mark.asyncio
    async def test_forced_failure_returns_input_unchanged(self, profile):
        papers = make_papers(20)
        provider = FakeProvider(responder=lambda _: ProviderUnavailableError("503 down"))
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert result.ai_enhanced is False
        assert result.papers == papers
        assert result.batches_failed == 3
        assert result.aborted is False
        assert result.error == "503 down"
        assert provider.calls == 3

    @pytest.mark.asyncio
    async def test_auth_error_aborts_run(self, profile):
        papers = make_papers(20)
        provider = FakeProvider(responder=lambda _: AuthenticationError("bad key"))
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert provider.calls == 1
        assert result.aborted is True
        assert result.ai_enhanced is False
        assert result.error == "bad key"
        assert result.papers == papers

    @pytest.mark.asyncio
    async def test_partial_blend_after_rate_limit(self, profile):
        papers = make_papers(20)
        provider = FakeProvider(
            responses=[scores_json(8, relevance=9), RateLimitError("429 slow down")]
        )
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert provider.calls == 2
        assert result.ai_enhanced is True
        assert result.aborted is True
        assert result.batches_succeeded == 1
        assert result.batches_failed == 1
        assert result.ai_papers_scored == 8
        assert result.error == "429 slow down"
        scored_ids = {p.id for p in result.papers if p.ai_score is not None}
        assert scored_ids == {f"W{i}" for i in range(8)}
        assert len(result.papers) == 20

    @pytest.mark.asyncio
    async def test_non_fatal_failure_continues(self, profile):
        papers = make_papers(16)
        provider = FakeProvider(responses=["not json at all", scores_json(8)])
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert provider.calls == 2
        assert result.aborted is False
        assert result.ai_enhanced is True
        assert result.batches_failed == 1
        assert "Invalid JSON" in result.error

    @pytest.mark.asyncio
    async def test_no_valid_entries_fails_batch(self, profile):
        papers = make_papers(3)
        provider = FakeProvider(responses=['[{"foo": 1}]'])
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert result.ai_enhanced is False
        assert result.error == NO_VALID_SCORES
        assert result.papers == papers

    @pytest.mark.asyncio
    async def test_unexpected_exception_does_not_escape(self, profile):
        papers = make_papers(3)
        provider = FakeProvider(responses=[RuntimeError("boom")])
        result = await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert result.ai_enhanced is False
        assert result.error == "boom"

    @pytest.mark.asyncio
    async def test_only_top_papers_are_sent(self, profile):
        papers = make_papers(6)
        settings = RerankSettings(max_papers=4, batch_size=2)
        provider = FakeProvider(responder=score_every_paper(relevance=1))
        result = await AIReranker(settings=settings, provider=provider).rerank(
            papers, profile, REQUEST
        )

        assert provider.calls == 2
        assert result.ai_papers_scored == 4
        assert result.papers[4:] == papers[4:]

    @pytest.mark.asyncio
    async def test_timeout_fails_batch(self, profile):
        papers = make_papers(3)
        settings = RerankSettings(timeout_seconds=0.01)
        provider = FakeProvider(responder=score_every_paper(), delay=1.0)
        result = await AIReranker(settings=settings, provider=provider).rerank(
            papers, profile, REQUEST
        )

        assert result.ai_enhanced is False
        assert result.aborted is False
        assert result.error == "Request timed out after 0.01s"

    @pytest.mark.asyncio
    async def test_unknown_provider(self, profile):
        papers = make_papers(2)
        request = RerankRequest(api_key="k", provider="openai")
        result = await AIReranker().rerank(papers, profile, request)

        assert result.ai_enhanced is False
        assert "Unknown LLM provider" in result.error

    @pytest.mark.asyncio
    async def test_prompt_carries_profile_and_batch(self, profile):
        papers = make_papers(3)
        provider = FakeProvider(responder=score_every_paper())
        await AIReranker(provider=provider).rerank(papers, profile, REQUEST)

        assert "Interests: Inequality" in provider.prompts[0]
        assert '[2] "Paper 2"' in provider.prompts[0]


class TestConcurrentRerank:
    """Tests for concurrent batch dispatch."""

    @pytest.mark.asyncio
    async def test_matches_sequential_result(self, profile):
        papers = make_papers(20)
        sequential = await AIReranker(
            provider=FakeProvider(responder=score_every_paper(relevance=7))
        ).rerank(papers, profile, REQUEST)

        settings = RerankSettings(max_concurrent_batches=3)
        provider = FakeProvider(responder=score_every_paper(relevance=7), delay=0.01)
        concurrent = await AIReranker(settings=settings, provider=provider).rerank(
            papers, profile, REQUEST
        )

        assert provider.calls == 3
        assert concurrent.batches_succeeded == 3
        assert [p.id for p in concurrent.papers] == [p.id for p in sequential.papers]
        assert [p.relevance_score for p in concurrent.papers] == [
            p.relevance_score for p in sequential.papers
        ]

    @pytest.mark.asyncio
    async def test_abort_stops_pending_batches(self, profile):
        papers = make_papers(32)
        settings = RerankSettings(max_concurrent_batches=2)
        provider = FakeProvider(responder=lambda _: AuthenticationError("bad key"))
        result = await AIReranker(settings=settings, provider=provider).rerank(
            papers, profile, REQUEST
        )

        assert result.aborted is True
        assert result.ai_enhanced is False
        assert provider.calls < 4


class TestValidateApiKey:
    """Tests for AIReranker.validate_api_key()."""

    @pytest.mark.asyncio
    async def test_valid(self):
        provider = FakeProvider(responses=["OK"])
        assert await AIReranker(provider=provider).validate_api_key(REQUEST) == (True, None)

    @pytest.mark.asyncio
    async def test_rejected(self):
        provider = FakeProvider(responses=[AuthenticationError("API key not valid")])
        valid, error = await AIReranker(provider=provider).validate_api_key(REQUEST)
        assert valid is False
        assert error == "API key not valid"

    @pytest.mark.asyncio
    async def test_missing(self):
        assert await AIReranker().validate_api_key(RerankRequest()) == (False, NO_API_KEY)
