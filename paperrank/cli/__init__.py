"""paperrank CLI Package.

Command-line interface for scoring and reranking papers.

Usage:
    python -m paperrank.cli score --profile profile.json --papers papers.json
    python -m paperrank.cli score -p profile.json --papers works.json --rerank --json
    python -m paperrank.cli validate config/engine_config.yaml
"""

import typer

from paperrank.cli.score import score_command
from paperrank.cli.validate import validate_command

# Create main app
app = typer.Typer(help="paperrank: relevance scoring and AI reranking for papers")

app.command(name="score")(score_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "score_command",
    "validate_command",
]
