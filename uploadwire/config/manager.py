"""Configuration management for the uploader.

Supports hierarchical configuration loading:
1. Project config: ./uploader.yaml
2. Explicit config: a file handed over by the host
3. Environment variables (UPLOADWIRE_ prefix)
4. Inline overrides passed by the caller
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger

from .loader import ConfigurationLoader
from .schema import UploaderConfig
from .validator import ConfigurationValidator, unwrap

ENV_PREFIX = "UPLOADWIRE_"
ENV_NESTED_DELIMITER = "__"


class ConfigurationManager:
    """Central configuration manager for the uploader."""

    def __init__(
        self,
        project_config_path: Optional[Path] = None,
        config_path: Optional[Path] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize configuration manager.

        Args:
            project_config_path: Path to the project config file
            config_path: Path to an explicit config file
            overrides: Inline configuration applied last
            environ: Environment to read overrides from, defaults to os.environ
        """
        self.loader = ConfigurationLoader()
        self.validator = ConfigurationValidator(self.loader)

        self.project_config_path = project_config_path or Path.cwd() / "uploader.yaml"
        self.config_path = config_path
        self.overrides = dict(overrides or {})
        self.environ = os.environ if environ is None else environ

        self._raw_cache: Optional[Dict[str, Any]] = None
        self._config_cache: Optional[UploaderConfig] = None

    def load_raw(self) -> Dict[str, Any]:
        """Load and merge the raw configuration without validating it."""
        if self._raw_cache is not None:
            return self._raw_cache

        config: Dict[str, Any] = {}
        sources: List[Path] = [self.project_config_path]
        if self.config_path:
            sources.append(Path(self.config_path))

        for path in sources:
            if path.exists():
                logger.debug(f"Loading uploader configuration from {path}")
                config = self.loader.merge_configs(config, unwrap(self.loader.load(path)))
            elif path == self.config_path:
                logger.warning(f"Configuration file {path} does not exist, skipping")

        config = self._apply_env_overrides(config)
        config = self.loader.merge_configs(config, unwrap(self.overrides))

        self._raw_cache = config
        return config

    def load_configuration(self) -> UploaderConfig:
        """Load and validate the hierarchical configuration.

        Returns:
            Validated configuration
        """
        if self._config_cache is None:
            self._config_cache = self.validator.validate(self.load_raw(), self.config_path)
        return self._config_cache

    def reload(self) -> UploaderConfig:
        self._raw_cache = None
        self._config_cache = None
        return self.load_configuration()

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides.

        Examples:
        - UPLOADWIRE_DB_DRIVER=orm -> config.db_driver = "orm"
        - UPLOADWIRE_METADATA__CACHE=none -> config.metadata.cache = "none"

        Args:
            config: Base configuration

        Returns:
            Configuration with environment overrides applied
        """
        config = copy.deepcopy(config)

        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            config_path = key[len(ENV_PREFIX):].lower().split(ENV_NESTED_DELIMITER)

            current = config
            for path_part in config_path[:-1]:
                if not isinstance(current.get(path_part), dict):
                    current[path_part] = {}
                current = current[path_part]

            current[config_path[-1]] = self._convert_env_value(value)
            logger.debug(f"Configuration override from environment: {key}")

        return config

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.

        Args:
            key: Configuration key (e.g., "metadata.cache")
            default: Default value if key not found

        Returns:
            Configuration value from the validated configuration
        """
        current: Any = self.load_configuration().model_dump()
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current
