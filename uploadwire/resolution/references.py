"""Parsed forms of the ``@`` reference convention.

Configuration strings starting with ``@`` point at something external
(a service id, or a directory inside an installed module). They are parsed
once here into explicit variants so the resolvers never sniff prefixes.
"""

from dataclasses import dataclass
from typing import Union

from ..config.schema import MetadataConfig

REFERENCE_MARKER = "@"


@dataclass(frozen=True)
class LiteralName:
    """A name the uploader namespaces itself, e.g. ``file_system``."""
    name: str


@dataclass(frozen=True)
class ExternalReference:
    """A service id owned by the host, used verbatim."""
    service_id: str


ServiceSelector = Union[LiteralName, ExternalReference]


def parse_selector(value: str) -> ServiceSelector:
    if value.startswith(REFERENCE_MARKER):
        return ExternalReference(value[len(REFERENCE_MARKER):])
    return LiteralName(value)


@dataclass(frozen=True)
class ModulePath:
    """``@ModuleName/rest``: a path relative to an installed module."""
    module: str
    rest: str


def parse_metadata_path(path: str) -> Union[str, ModulePath]:
    """Parse an already normalized metadata directory path.

    ``rest`` keeps its leading slash so it can be appended to the module
    location as is.
    """
    if not path.startswith(REFERENCE_MARKER):
        return path
    module, slash, rest = path[len(REFERENCE_MARKER):].partition("/")
    return ModulePath(module, slash + rest)


@dataclass(frozen=True)
class NoCache:
    pass


@dataclass(frozen=True)
class FileCache:
    directory: str


@dataclass(frozen=True)
class ExternalCache:
    reference: str


CacheStrategy = Union[NoCache, FileCache, ExternalCache]


def parse_cache_strategy(metadata: MetadataConfig) -> CacheStrategy:
    """Select the metadata cache implementation.

    ``none`` and ``file`` are keywords; anything else is a cache service id,
    with or without the ``@`` marker.
    """
    selector = metadata.cache
    if selector == "none":
        return NoCache()
    if selector == "file":
        return FileCache(metadata.file_cache.dir)
    if selector.startswith(REFERENCE_MARKER):
        selector = selector[len(REFERENCE_MARKER):]
    return ExternalCache(selector)
