"""Tests for PromptBuilder module."""

import pytest

from paperrank.models.paper import Paper
from paperrank.models.profile import ApproachPreference, UserProfile
from paperrank.services.llm.prompt_builder import BROAD_INTERESTS, PromptBuilder


class TestPromptBuilder:
    """Tests for PromptBuilder class."""

    @pytest.fixture
    def builder(self) -> PromptBuilder:
        return PromptBuilder(abstract_chars=40)

    @pytest.fixture
    def profile(self) -> UserProfile:
        return UserProfile(
            academic_level="PhD Student",
            primary_field="Labor Economics",
            interests=["Inequality", "Housing"],
            methods=["Difference-in-Differences"],
            approach_preference=ApproachPreference.QUANTITATIVE,
            region="Europe",
            exploration_level=0.9,
        )

    @pytest.fixture
    def papers(self) -> list[Paper]:
        return [
            Paper(id="W1", title="Rents and wages", journal="AER", abstract="Short abstract."),
            Paper(id="W2", title="Tax and mobility", journal="QJE", abstract="x" * 100),
        ]

    def test_profile_section(self, builder, profile, papers) -> None:
        prompt = builder.build(profile, papers)
        assert "Level: PhD Student" in prompt
        assert "Field: Labor Economics" in prompt
        assert "Interests: Inequality, Housing" in prompt
        assert "Methods: Difference-in-Differences" in prompt
        assert "Preference: quantitative research" in prompt
        assert "Regional focus: Europe" in prompt
        assert "Exploration: exploratory" in prompt

    def test_optional_lines_omitted(self, builder, papers) -> None:
        prompt = builder.build(UserProfile(exploration_level=0.1), papers)
        assert f"Interests: {BROAD_INTERESTS}" in prompt
        assert "Methods:" not in prompt
        assert "Preference:" not in prompt
        assert "Regional focus:" not in prompt
        assert "Exploration: narrow" in prompt

    def test_papers_numbered_from_zero(self, builder, profile, papers) -> None:
        prompt = builder.build(profile, papers)
        assert '[0] "Rents and wages" (AER)\nShort abstract.' in prompt
        assert '[1] "Tax and mobility" (QJE)' in prompt

    def test_abstract_truncated(self, builder, profile, papers) -> None:
        prompt = builder.build(profile, papers)
        assert "x" * 40 + "..." in prompt
        assert "x" * 41 not in prompt

    def test_requests_both_scores(self, builder, profile, papers) -> None:
        prompt = builder.build(profile, papers)
        assert '"relevance"' in prompt
        assert '"discovery"' in prompt
        assert "JSON array" in prompt
