"""Configuration management for the uploader.

This module provides:
- The validated configuration schema
- Loading of YAML/JSON configuration files
- Hierarchical configuration with environment overrides
"""

from .loader import ConfigurationLoader
from .manager import ConfigurationManager
from .schema import (
    DirectoryConfig,
    FileCacheConfig,
    MappingConfig,
    MetadataConfig,
    NamerConfig,
    UploaderConfig,
)
from .validator import ConfigurationValidator, process_configuration

__all__ = [
    "ConfigurationLoader",
    "ConfigurationManager",
    "ConfigurationValidator",
    "process_configuration",
    "UploaderConfig",
    "MappingConfig",
    "MetadataConfig",
    "FileCacheConfig",
    "DirectoryConfig",
    "NamerConfig",
]
