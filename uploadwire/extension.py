"""Uploader extension.

Loads the uploader configuration into a service registry: one pass turns
the validated configuration into a ``WiringPlan`` and the plan is
committed only when every step succeeded. On error the registry is left
exactly as it was (except for a cache directory that may have been
created on disk).

Resolution order:
1. Base service catalog
2. Driver defaulting for mappings without a driver
3. Namer services per mapping
4. Parameters (filename suffix, resolved mappings)
5. Storage alias
6. Metadata directories
7. Metadata cache strategy
8. Listeners per mapping
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .config.schema import MappingConfig, UploaderConfig
from .config.validator import process_configuration
from .di.catalog import (
    DEFAULT_FILENAME_SUFFIX_PARAMETER,
    MAPPINGS_PARAMETER,
    load_catalog,
)
from .di.plan import ServiceRegistration, WiringPlan
from .di.registry import ServiceRegistry
from .modules import ModuleTable
from .resolution.cache import register_cache_strategy
from .resolution.drivers import apply_default_driver
from .resolution.listeners import register_listeners
from .resolution.metadata import register_metadata_directories
from .resolution.namers import materialize_namers
from .resolution.references import (
    CacheStrategy,
    LiteralName,
    parse_cache_strategy,
    parse_selector,
)
from .resolution.storage import resolve_storage


@dataclass
class Resolution:
    """Outcome of resolving a configuration."""
    config: UploaderConfig
    plan: WiringPlan
    storage: str
    metadata_directories: Dict[str, str]
    cache: CacheStrategy
    listeners: List[ServiceRegistration] = field(default_factory=list)
    definition_sets: List[str] = field(default_factory=list)

    @property
    def mappings(self) -> Dict[str, MappingConfig]:
        return self.config.mappings


class UploaderExtension:
    """Wires the uploader services into a registry from configuration."""

    alias = "uploader"

    def __init__(self, modules: Optional[ModuleTable] = None):
        """Initialize the extension.

        Args:
            modules: Installed modules, used for metadata discovery
        """
        self.modules = modules if modules is not None else ModuleTable()

    def load(self, configs: Sequence[Mapping[str, Any]], registry: ServiceRegistry) -> Resolution:
        """Validate the raw configuration and wire it into the registry.

        Args:
            configs: Raw configuration trees, later ones overriding earlier ones
            registry: Registry receiving the services

        Returns:
            The resolution that was committed

        Raises:
            ConfigurationError: If the configuration cannot be resolved
        """
        config = process_configuration(configs)
        resolution = self.resolve(config, registry)
        resolution.plan.commit(registry)
        logger.info(
            f"Uploader wired: {len(resolution.mappings)} mapping(s), "
            f"{len(resolution.listeners)} listener(s), storage '{resolution.storage}'"
        )
        return resolution

    def resolve(self, config: UploaderConfig, registry: ServiceRegistry) -> Resolution:
        """Build the wiring plan for a validated configuration.

        The registry is only read (existing definitions and parameters);
        nothing is written to it.
        """
        plan = WiringPlan(base=registry)
        selector = parse_selector(config.storage)

        definition_sets = load_catalog(
            plan,
            selector.name if isinstance(selector, LiteralName) else "",
            config.twig,
        )

        mappings = apply_default_driver(config.mappings, config.db_driver)
        mappings = materialize_namers(plan, mappings)
        config = config.model_copy(update={"mappings": mappings})

        plan.set_parameter(DEFAULT_FILENAME_SUFFIX_PARAMETER, config.default_filename_attribute_suffix)
        plan.set_parameter(
            MAPPINGS_PARAMETER,
            {name: mapping.model_dump() for name, mapping in mappings.items()},
        )

        storage = resolve_storage(plan, selector)

        directories = register_metadata_directories(plan, config.metadata, self.modules)

        cache = parse_cache_strategy(config.metadata)
        register_cache_strategy(plan, cache, registry.resolve_value)

        listeners = register_listeners(plan, mappings)

        return Resolution(
            config=config,
            plan=plan,
            storage=storage,
            metadata_directories=directories,
            cache=cache,
            listeners=listeners,
            definition_sets=definition_sets,
        )
