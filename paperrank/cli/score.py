"""Score command.

Scores a file of papers against a researcher profile and optionally
reranks the top of the list with an LLM.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from paperrank.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
    read_json,
)
from paperrank.models.paper import ScoredPaper
from paperrank.models.results import RerankRequest, RerankResult
from paperrank.services.config_manager import DEFAULT_CONFIG_PATH
from paperrank.services.openalex_normalizer import papers_from_openalex
from paperrank.services.recommendation_service import RecommendationService
from paperrank.services.reference_data import ReferenceData


def load_papers(data: Any, reference: ReferenceData) -> List[Any]:
    """Papers from a JSON document.

    Accepts a list of paper objects, or an OpenAlex /works response (a
    mapping with ``results``) which is normalized first.
    """
    if isinstance(data, dict) and "results" in data:
        return papers_from_openalex(data["results"], reference)
    if isinstance(data, list):
        return data
    display_error("Papers file must hold a list of papers or an OpenAlex response")
    raise typer.Exit(code=1)


@handle_errors
def score_command(
    profile_path: Path = typer.Option(
        ..., "--profile", "-p", help="Researcher profile JSON"
    ),
    papers_path: Path = typer.Option(
        ..., "--papers", help="Papers JSON (list or OpenAlex response)"
    ),
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to engine config YAML"
    ),
    rerank: bool = typer.Option(False, "--rerank", help="Blend in AI scores"),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="LLM API key (overrides config)"
    ),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model override"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Papers to display"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """Score papers against a researcher profile."""
    config, reference = load_config(config_path)
    profile = read_json(profile_path)
    papers = load_papers(read_json(papers_path), reference)

    service = RecommendationService(config=config, reference=reference)
    result = service.score(profile, papers)
    if result.error:
        display_error(f"Scoring failed: {result.error}")
        raise typer.Exit(code=1)

    ranked = result.papers
    rerank_result: Optional[RerankResult] = None
    if rerank and ranked:
        request = RerankRequest(api_key=api_key, model=model)
        rerank_result = asyncio.run(service.rerank(ranked, profile, request))
        ranked = rerank_result.papers

    if as_json:
        typer.echo(json.dumps(_as_document(result.summary, ranked, rerank_result), indent=2))
        return

    display_info(result.summary)
    if rerank_result is not None:
        _display_rerank(rerank_result)
    _display_papers(ranked[:limit])


def _as_document(
    summary: str, papers: List[ScoredPaper], rerank_result: Optional[RerankResult]
) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "summary": summary,
        "papers": [p.model_dump(mode="json") for p in papers],
    }
    if rerank_result is not None:
        document["rerank"] = rerank_result.model_dump(mode="json", exclude={"papers"})
    return document


def _display_rerank(result: RerankResult) -> None:
    if result.ai_enhanced:
        display_success(
            f"AI reranked {result.ai_papers_scored} papers "
            f"({result.batches_succeeded} batches ok, {result.batches_failed} failed)"
        )
        if result.aborted:
            display_warning(f"Stopped early: {result.error}")
    else:
        display_warning(f"AI reranking unavailable: {result.error}")


def _display_papers(papers: List[ScoredPaper]) -> None:
    for rank, paper in enumerate(papers, start=1):
        tier = paper.match_tier.value if paper.match_tier else "-"
        typer.echo(f"\n{rank:>2}. [{paper.relevance_score:.1f}] {paper.title}")
        typer.echo(f"    {paper.journal} · {tier}")
        if paper.match_explanation:
            typer.echo(f"    {paper.match_explanation}")
        if paper.ai_explanation:
            typer.echo(f"    AI: {paper.ai_explanation}")
