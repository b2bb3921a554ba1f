import os
import yaml
from pathlib import Path
from string import Template
from typing import Optional
from dotenv import load_dotenv
import structlog
from pydantic import ValidationError

from paperrank.models.config import EngineConfig
from paperrank.services.reference_data import ReferenceData, load_reference_data
from paperrank.utils.exceptions import ConfigValidationError

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = "config/engine_config.yaml"


class ConfigManager:
    """Loads engine configuration and the reference data it points to"""

    def __init__(self, config_path: Optional[str] = None, load_env: bool = True):
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self.load_env = load_env
        self._config: Optional[EngineConfig] = None
        self._reference: Optional[ReferenceData] = None

    def load_config(self) -> EngineConfig:
        """Load and validate configuration.

        A missing file at the default path yields default settings; an
        explicitly given path must exist.
        """
        if self._config:
            return self._config

        # 1. Load environment (.env supplies GOOGLE_API_KEY and friends)
        if self.load_env:
            load_dotenv()

        # 2. Check file existence
        if not self.config_path.exists():
            if str(self.config_path) == DEFAULT_CONFIG_PATH:
                logger.info("config_file_absent_using_defaults", path=str(self.config_path))
                self._config = EngineConfig()
                return self._config
            raise ConfigValidationError(
                f"Configuration file not found: {self.config_path}"
            )

        # 3. Read YAML
        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw_content = f.read()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}") from e

        # 4. Substitute env vars (${VAR} syntax, unknown vars left as-is)
        try:
            template = Template(raw_content)
            substituted_content = template.safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted_content) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Failed to parse YAML or substitute variables: {e}"
            ) from e

        if not isinstance(config_data, dict):
            raise ConfigValidationError("Configuration root must be a mapping")

        # 5. Validate with Pydantic
        try:
            self._config = EngineConfig(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}") from e

        logger.info(
            "config_loaded",
            path=str(self.config_path),
            provider=self._config.rerank.provider,
            model=self._config.rerank.model,
            api_key_set=self._config.api_key is not None,
        )
        return self._config

    def load_reference_data(self) -> ReferenceData:
        """Reference data from the configured directory (bundled data if unset).

        Relative directories resolve against the config file's location.
        """
        if self._reference:
            return self._reference

        config = self.load_config()
        data_dir: Optional[Path] = None
        if config.reference_data_dir:
            data_dir = Path(config.reference_data_dir)
            if not data_dir.is_absolute():
                data_dir = self.config_path.parent / data_dir

        self._reference = load_reference_data(data_dir)
        return self._reference
