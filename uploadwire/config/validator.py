"""Configuration validation utilities.

Raw configuration trees are merged and validated against the Pydantic
schema; schema failures are reported as ``ConfigurationError``.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError
from .loader import ConfigurationLoader
from .schema import UploaderConfig

# Raw configuration may nest everything under this key.
ROOT_KEY = "uploader"


class ConfigurationValidator:
    """Validates raw configuration against the uploader schema."""

    def __init__(self, loader: Optional[ConfigurationLoader] = None):
        self.loader = loader or ConfigurationLoader()
        self.validation_errors: List[str] = []

    def validate(self, config: Mapping[str, Any], config_path: Optional[Path] = None) -> UploaderConfig:
        """Validate one raw configuration tree.

        Args:
            config: Raw configuration, optionally nested under ``uploader``
            config_path: File the configuration came from, for error reporting

        Returns:
            The validated configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.validation_errors.clear()
        config = unwrap(config)

        try:
            return UploaderConfig.model_validate(config)
        except PydanticValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "<root>"
                self.validation_errors.append(f"{location}: {error['msg']}")
            raise ConfigurationError.invalid_config(
                "; ".join(self.validation_errors), config_path, cause=e
            ) from e

    def merge(self, configs: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Deep-merge raw configuration trees, later ones winning."""
        merged: Dict[str, Any] = {}
        for config in configs:
            merged = self.loader.merge_configs(merged, unwrap(config))
        return merged


def unwrap(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Strip an optional top-level ``uploader`` key."""
    if set(config) == {ROOT_KEY} and isinstance(config[ROOT_KEY], Mapping):
        return dict(config[ROOT_KEY])
    return dict(config)


def process_configuration(configs: Sequence[Mapping[str, Any]]) -> UploaderConfig:
    """Merge several raw configuration trees and validate the result.

    Args:
        configs: Raw configuration trees in increasing priority

    Returns:
        The validated configuration
    """
    validator = ConfigurationValidator()
    merged = validator.merge(configs)
    config = validator.validate(merged)
    logger.debug(f"Processed configuration with {len(config.mappings)} mapping(s)")
    return config
