"""Validate command for configuration files.

Validates configuration syntax, semantics and the reference data it
points to; optionally probes the configured API key.
"""

import asyncio
from pathlib import Path

import typer

from paperrank.cli.utils import (
    display_error,
    display_info,
    display_success,
    handle_errors,
)
from paperrank.services.config_manager import ConfigManager
from paperrank.services.recommendation_service import RecommendationService


@handle_errors
def validate_command(
    config_path: Path = typer.Argument(..., help="Config file to validate"),
    check_key: bool = typer.Option(
        False, "--check-key", help="Send a test prompt with the configured key"
    ),
):
    """Validate configuration file syntax and semantics."""
    try:
        manager = ConfigManager(config_path=str(config_path))
        config = manager.load_config()
        reference = manager.load_reference_data()
    except Exception as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)

    display_success("Configuration is valid! ✅")
    display_info(
        f"Reference data: {len(reference.interest_keywords)} interests, "
        f"{len(reference.method_keywords)} methods, {len(reference.journals)} journals"
    )

    if not check_key:
        return

    service = RecommendationService(config=config, reference=reference)
    valid, error = asyncio.run(service.validate_api_key())
    if not valid:
        display_error(f"API key check failed: {error}")
        raise typer.Exit(code=1)
    display_success(f"API key works with {config.rerank.provider}/{config.rerank.model}")
