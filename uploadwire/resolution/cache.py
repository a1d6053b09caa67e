"""Metadata cache strategy resolution."""

from pathlib import Path
from typing import Any, Callable

from loguru import logger

from ..di.catalog import FILE_CACHE, METADATA_CACHE_ALIAS
from ..di.plan import WiringPlan
from ..errors import ConfigurationError
from .references import CacheStrategy, ExternalCache, FileCache, NoCache


def ensure_cache_directory(directory: str) -> Path:
    """Create the cache directory if it does not exist yet.

    Raises:
        ConfigurationError: If the directory cannot be created
    """
    path = Path(directory)
    if path.exists():
        return path
    try:
        path.mkdir(mode=0o777, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError.cache_directory_not_creatable(directory, cause=e) from e
    logger.info(f"Created metadata cache directory {path}")
    return path


def register_cache_strategy(
    plan: WiringPlan,
    strategy: CacheStrategy,
    resolve_value: Callable[[Any], Any],
) -> None:
    """Wire the metadata cache.

    Args:
        plan: Plan receiving the instructions
        strategy: Selected cache strategy
        resolve_value: Resolves ``%parameter%`` placeholders in the cache directory
    """
    if isinstance(strategy, NoCache):
        plan.remove_alias(METADATA_CACHE_ALIAS)
    elif isinstance(strategy, FileCache):
        plan.replace_argument(FILE_CACHE, 0, strategy.directory)
        ensure_cache_directory(str(resolve_value(strategy.directory)))
    elif isinstance(strategy, ExternalCache):
        plan.set_alias(METADATA_CACHE_ALIAS, strategy.reference, public=False)
    else:
        raise TypeError(f"Unsupported cache strategy: {strategy!r}")

    logger.debug(f"Metadata cache strategy: {strategy}")
