"""Prompt Builder Module

Builds the batch scoring prompt sent to the LLM:
- Researcher profile summary
- Numbered paper summaries (title, journal, truncated abstract)
- Scoring scale and JSON-only output instructions
"""

from typing import List, Sequence
import structlog

from paperrank.models.paper import Paper
from paperrank.models.profile import ApproachPreference, UserProfile

logger = structlog.get_logger()

GLOBAL_REGION = "Global / No Preference"
BROAD_INTERESTS = "General/broad - score based on importance and quality"
ELLIPSIS = "..."


class PromptBuilder:
    """Builds batch scoring prompts for AI reranking.

    Papers are numbered from 0 within the batch; the model must echo those
    indices back so scores can be mapped to papers.
    """

    def __init__(self, abstract_chars: int = 250):
        """Initialize prompt builder.

        Args:
            abstract_chars: Abstracts longer than this are truncated and
                suffixed with "...".
        """
        self.abstract_chars = abstract_chars

    def build(self, profile: UserProfile, papers: Sequence[Paper]) -> str:
        """Build scoring prompt for one batch.

        Args:
            profile: Researcher profile
            papers: Papers in this batch, in index order

        Returns:
            Formatted prompt string
        """
        prompt = self._build_prompt_template(
            researcher=self._format_profile(profile),
            papers=self._format_papers(papers),
        )

        logger.debug(
            "rerank_prompt_built",
            papers_count=len(papers),
            prompt_length=len(prompt),
        )

        return prompt

    def _format_profile(self, profile: UserProfile) -> str:
        """Format the researcher section, one attribute per line.

        Args:
            profile: Researcher profile

        Returns:
            Newline-joined profile lines
        """
        lines: List[str] = [
            f"Level: {profile.academic_level}",
            f"Field: {profile.primary_field}",
        ]
        if profile.interests:
            lines.append(f"Interests: {', '.join(profile.interests)}")
        else:
            lines.append(f"Interests: {BROAD_INTERESTS}")
        if profile.methods:
            lines.append(f"Methods: {', '.join(profile.methods)}")
        if profile.approach_preference != ApproachPreference.NO_PREFERENCE:
            lines.append(f"Preference: {profile.approach_preference.value} research")
        if profile.region and profile.region != GLOBAL_REGION:
            lines.append(f"Regional focus: {profile.region}")
        lines.append(f"Exploration: {self._describe_exploration(profile.exploration_level)}")
        return "\n".join(lines)

    def _describe_exploration(self, level: float) -> str:
        if level < 0.34:
            return "narrow - prefers papers squarely in their interests"
        if level < 0.67:
            return "balanced"
        return "exploratory - welcomes surprising cross-field connections"

    def _truncate(self, abstract: str) -> str:
        if len(abstract) > self.abstract_chars:
            return abstract[: self.abstract_chars] + ELLIPSIS
        return abstract

    def _format_papers(self, papers: Sequence[Paper]) -> str:
        """Format numbered paper summaries.

        Args:
            papers: Papers in this batch

        Returns:
            Blank-line separated paper blocks
        """
        blocks = [
            f'[{i}] "{p.title}" ({p.journal})\n{self._truncate(p.abstract)}'
            for i, p in enumerate(papers)
        ]
        return "\n\n".join(blocks)

    def _build_prompt_template(self, researcher: str, papers: str) -> str:
        """Build the complete prompt from template.

        Args:
            researcher: Formatted profile section
            papers: Formatted paper section

        Returns:
            Complete prompt string
        """
        return f"""You are an expert academic advisor scoring paper relevance for a researcher.

RESEARCHER:
{researcher}

PAPERS:
{papers}

Give each paper two scores from 1 to 10:
- "relevance": how directly it serves this researcher's interests and methods
- "discovery": how valuable it is as an unexpected but worthwhile find
  (cross-field connection, new method for their questions, emerging topic)

Think about:
- Semantic connections (e.g., "peer effects" is relevant to "social networks")
- Methodological fit (e.g., a DiD paper matches "causal inference" interest)
- Field adjacency (e.g., political economy paper relevant to economics researcher)
- For generalists with no specific interests, score on general importance and quality

RELEVANCE SCALE:
9-10: Core interest, directly relevant
7-8: Strong connection to their interests or methods
5-6: Moderate relevance, adjacent topic
3-4: Weak connection
1-2: Not relevant

Reply ONLY with a JSON array. No other text, no markdown fences.
[{{"index":0,"relevance":7,"discovery":5,"reason":"direct match to labor interests"}},{{"index":1,"relevance":4,"discovery":8,"reason":"new method for their question"}}]

"index" = paper number, "reason" = under 10 words"""
