"""Configuration loading utilities.

This module provides utilities for loading uploader configuration from:
- YAML files
- JSON files
- Several files merged in order
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..errors import ConfigurationError

try:
    from yaml import CSafeLoader as YamlLoader
except ImportError:
    from yaml import SafeLoader as YamlLoader


class ConfigurationLoader:
    """Utility class for loading configuration from files."""

    def load_yaml(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary

        Raises:
            ConfigurationError: If the file is missing or not a YAML mapping
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError.file_not_found(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.load(f, Loader=YamlLoader) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError.invalid_config(f"invalid YAML in {path}: {e}", path, cause=e)

        if not isinstance(content, dict):
            raise ConfigurationError.invalid_config(f"{path} must contain a mapping", path)
        return content

    def load_json(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file.

        Args:
            path: Path to JSON file

        Returns:
            Configuration dictionary

        Raises:
            ConfigurationError: If the file is missing or not a JSON object
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError.file_not_found(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = json.load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigurationError.invalid_config(f"invalid JSON in {path}: {e}", path, cause=e)

        if not isinstance(content, dict):
            raise ConfigurationError.invalid_config(f"{path} must contain an object", path)
        return content

    def load(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load a file, picking the format from its suffix."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            return self.load_yaml(path)
        if suffix == ".json":
            return self.load_json(path)
        raise ConfigurationError.invalid_config(f"unsupported configuration file format: {path}", path)

    def merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge two configuration dictionaries with deep merging.

        The override dict takes precedence over the base dict.
        Nested dictionaries are merged recursively; lists are replaced.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (key in result and
                    isinstance(result[key], dict) and
                    isinstance(value, dict)):
                result[key] = self.merge_configs(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def load_multiple(self, paths: List[Union[str, Path]]) -> Dict[str, Any]:
        """Load and merge multiple configuration files.

        Files are loaded in order, with later files overriding earlier ones.
        Missing files are skipped.

        Args:
            paths: List of configuration file paths

        Returns:
            Merged configuration
        """
        result: Dict[str, Any] = {}

        for path in paths:
            path = Path(path)
            if not path.exists():
                continue
            result = self.merge_configs(result, self.load(path))

        return result
