"""Shared CLI utilities.

Provides common functionality for all CLI commands.
"""

import functools
import json
from pathlib import Path
from typing import Any, Callable, Tuple, TypeVar

import structlog
import typer

from paperrank.models.config import EngineConfig
from paperrank.observability.logging import configure_logging
from paperrank.services.config_manager import ConfigManager
from paperrank.services.reference_data import ReferenceData
from paperrank.utils.exceptions import ConfigValidationError, ReferenceDataError

# Configure structured logging (reconfigured from settings once loaded)
configure_logging()
logger = structlog.get_logger()

# Type variable for decorator
F = TypeVar("F", bound=Callable)


def load_config(config_path: Path) -> Tuple[EngineConfig, ReferenceData]:
    """Load configuration and the reference data it points to.

    Args:
        config_path: Path to configuration file.

    Returns:
        Tuple of (validated EngineConfig, ReferenceData).

    Raises:
        typer.Exit: If configuration or reference data is invalid.
    """
    config_manager = ConfigManager(config_path=str(config_path))
    try:
        config = config_manager.load_config()
        reference = config_manager.load_reference_data()
    except (ConfigValidationError, ReferenceDataError) as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    configure_logging(
        level=config.logging.level, json_output=config.logging.json_output
    )
    return config, reference


def read_json(path: Path) -> Any:
    """Read a JSON input file.

    Raises:
        typer.Exit: If the file is missing or not valid JSON.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        display_error(f"Cannot read {path}: {e}")
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        display_error(f"Invalid JSON in {path}: {e}")
        raise typer.Exit(code=1)


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    Catches exceptions and displays user-friendly error messages.

    Args:
        func: Function to wrap.

    Returns:
        Wrapped function with error handling.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.exception("command_failed")
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
