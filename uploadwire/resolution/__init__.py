"""Resolution steps turning uploader configuration into wiring instructions."""

from .cache import ensure_cache_directory, register_cache_strategy
from .drivers import apply_default_driver
from .listeners import OPTIONAL_BEHAVIORS, TAG_MAP, create_listener, register_listeners
from .metadata import register_metadata_directories, resolve_metadata_directories
from .namers import materialize_namers
from .references import (
    CacheStrategy,
    ExternalCache,
    ExternalReference,
    FileCache,
    LiteralName,
    ModulePath,
    NoCache,
    ServiceSelector,
    parse_cache_strategy,
    parse_metadata_path,
    parse_selector,
)
from .storage import resolve_storage

__all__ = [
    "apply_default_driver",
    "materialize_namers",
    "resolve_storage",
    "resolve_metadata_directories",
    "register_metadata_directories",
    "register_cache_strategy",
    "ensure_cache_directory",
    "register_listeners",
    "create_listener",
    "OPTIONAL_BEHAVIORS",
    "TAG_MAP",
    "CacheStrategy",
    "NoCache",
    "FileCache",
    "ExternalCache",
    "ServiceSelector",
    "LiteralName",
    "ExternalReference",
    "ModulePath",
    "parse_selector",
    "parse_metadata_path",
    "parse_cache_strategy",
]
