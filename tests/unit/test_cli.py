"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from paperrank.cli import app
from paperrank.observability.logging import configure_logging

runner = CliRunner()

PROFILE = {
    "academic_level": "PhD Student",
    "primary_field": "Labor Economics",
    "interests": ["Inequality"],
}

PAPERS = [
    {
        "id": "W1",
        "title": "Coastal erosion and lighthouse maintenance",
        "abstract": "Maintenance schedules for aging towers.",
        "journal_tier": 4,
    },
    {
        "id": "W2",
        "title": "Income Inequality and Intergenerational Mobility",
        "abstract": "Income inequality and the Gini coefficient across regions.",
        "journal": "American Economic Review",
        "journal_tier": 1,
        "journal_field": "economics",
        "cited_by_count": 60,
    },
]

ABSTRACT_WORDS = (
    "We study how income inequality shapes intergenerational mobility "
    "across commuting zones using administrative tax records"
).split()

OPENALEX_RESPONSE = {
    "meta": {"count": 1},
    "results": [
        {
            "id": "https://openalex.org/W42",
            "title": "Inequality and mobility",
            "abstract_inverted_index": {
                word: [pos] for pos, word in enumerate(ABSTRACT_WORDS)
            },
            "primary_location": {"source": {"display_name": "American Economic Review"}},
            "cited_by_count": 12,
        }
    ],
}


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging()


@pytest.fixture
def files(tmp_path):
    """Profile, papers and a key-less config in a temp directory."""
    profile = tmp_path / "profile.json"
    profile.write_text(json.dumps(PROFILE))
    papers = tmp_path / "papers.json"
    papers.write_text(json.dumps(PAPERS))
    config = tmp_path / "engine_config.yaml"
    config.write_text("logging:\n  level: CRITICAL\n")
    return {"profile": profile, "papers": papers, "config": config, "dir": tmp_path}


def score_args(files, *extra):
    return [
        "score",
        "--profile", str(files["profile"]),
        "--papers", str(files["papers"]),
        "--config", str(files["config"]),
        *extra,
    ]


class TestScoreCommand:
    """Tests for `paperrank score`."""

    def test_text_output(self, files):
        result = runner.invoke(app, score_args(files))

        assert result.exit_code == 0
        assert "Analyzed 2 papers · 1 highly relevant" in result.stdout
        assert result.stdout.index("Income Inequality") < result.stdout.index("Coastal")

    def test_limit(self, files):
        result = runner.invoke(app, score_args(files, "--limit", "1"))

        assert result.exit_code == 0
        assert "Income Inequality" in result.stdout
        assert "Coastal" not in result.stdout

    def test_json_output(self, files):
        result = runner.invoke(app, score_args(files, "--json"))

        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert document["summary"].startswith("Analyzed 2 papers")
        assert [p["id"] for p in document["papers"]] == ["W2", "W1"]
        assert "rerank" not in document

    def test_rerank_without_key(self, files):
        result = runner.invoke(app, score_args(files, "--rerank"))

        assert result.exit_code == 0
        assert "AI reranking unavailable: No API key" in result.stdout

    def test_rerank_json_reports_error(self, files):
        result = runner.invoke(app, score_args(files, "--rerank", "--json"))

        document = json.loads(result.stdout)
        assert document["rerank"]["ai_enhanced"] is False
        assert document["rerank"]["error"] == "No API key"
        assert "papers" not in document["rerank"]

    def test_openalex_input(self, files):
        files["papers"].write_text(json.dumps(OPENALEX_RESPONSE))
        result = runner.invoke(app, score_args(files, "--json"))

        assert result.exit_code == 0
        paper = json.loads(result.stdout)["papers"][0]
        assert paper["id"] == "W42"
        assert paper["journal_tier"] == 1
        assert "Inequality" in paper["matched_interests"]

    def test_invalid_json(self, files):
        files["papers"].write_text("[{not json")
        result = runner.invoke(app, score_args(files))

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout

    def test_wrong_document_shape(self, files):
        files["papers"].write_text(json.dumps({"papers": []}))
        result = runner.invoke(app, score_args(files))

        assert result.exit_code == 1
        assert "must hold a list" in result.stdout

    def test_invalid_profile(self, files):
        files["profile"].write_text(json.dumps({"interests": "Inequality"}))
        result = runner.invoke(app, score_args(files))

        assert result.exit_code == 1
        assert "Scoring failed: Invalid profile" in result.stdout

    def test_config_error(self, files):
        files["config"].write_text("rerank:\n  batch_size: 0\n")
        result = runner.invoke(app, score_args(files))

        assert result.exit_code == 1
        assert "Configuration Error" in result.stdout


class TestValidateCommand:
    """Tests for `paperrank validate`."""

    def test_validate_success(self, files):
        result = runner.invoke(app, ["validate", str(files["config"])])

        assert result.exit_code == 0
        assert "Configuration is valid! ✅" in result.stdout
        assert "92 journals" in result.stdout

    def test_validate_failure(self, files):
        with patch("paperrank.cli.validate.ConfigManager") as MockConfigManager:
            MockConfigManager.return_value.load_config.side_effect = ValueError("bad")
            result = runner.invoke(app, ["validate", str(files["config"])])

        assert result.exit_code == 1
        assert "Validation failed: bad" in result.stdout

    def test_validate_missing_file(self, files):
        result = runner.invoke(app, ["validate", str(files["dir"] / "nope.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_check_key_without_key(self, files):
        result = runner.invoke(app, ["validate", str(files["config"]), "--check-key"])

        assert result.exit_code == 1
        assert "API key check failed: No API key" in result.stdout

    def test_check_key_success(self, files):
        with patch(
            "paperrank.cli.validate.RecommendationService.validate_api_key",
            return_value=(True, None),
        ):
            result = runner.invoke(app, ["validate", str(files["config"]), "--check-key"])

        assert result.exit_code == 0
        assert "API key works with google/gemini-2.5-flash" in result.stdout
