"""Metadata directory resolution.

Builds the namespace prefix -> directory table handed to the metadata file
locator. Directories auto-detected in installed modules come first;
explicitly configured directories are applied afterwards and win for the
same namespace prefix.
"""

from typing import Dict

from loguru import logger

from ..config.schema import DirectoryConfig, MetadataConfig
from ..di.catalog import FILE_LOCATOR
from ..di.plan import WiringPlan
from ..errors import ConfigurationError
from ..modules import ModuleTable
from .references import ModulePath, parse_metadata_path


def detect_module_directories(modules: ModuleTable) -> Dict[str, str]:
    """Collect the metadata directories that exist in installed modules."""
    directories = {}
    for module in modules.values():
        directory = module.metadata_directory
        if not directory.is_dir():
            continue
        directories[module.namespace] = directory.as_posix()
    return directories


def resolve_directory(entry: DirectoryConfig, modules: ModuleTable) -> str:
    """Resolve one configured directory to a filesystem path.

    Raises:
        ConfigurationError: If the path references a module that is not installed
    """
    path = entry.path.replace("\\", "/").rstrip("/")
    parsed = parse_metadata_path(path)

    if isinstance(parsed, ModulePath):
        if parsed.module not in modules:
            raise ConfigurationError.unregistered_module(parsed.module, modules.keys(), entry.path)
        path = modules[parsed.module].path.as_posix() + parsed.rest

    return path.rstrip("\\/")


def resolve_metadata_directories(metadata: MetadataConfig, modules: ModuleTable) -> Dict[str, str]:
    """Merge auto-detected and configured metadata directories.

    Args:
        metadata: Metadata configuration
        modules: Installed modules

    Returns:
        Namespace prefix -> directory
    """
    directories: Dict[str, str] = {}
    if metadata.auto_detection:
        directories.update(detect_module_directories(modules))
        logger.debug(f"Auto-detected {len(directories)} metadata directories")

    for entry in metadata.directories:
        directories[entry.namespace_prefix.rstrip("\\")] = resolve_directory(entry, modules)

    return directories


def register_metadata_directories(plan: WiringPlan, metadata: MetadataConfig, modules: ModuleTable) -> Dict[str, str]:
    """Hand the resolved directories to the metadata file locator."""
    directories = resolve_metadata_directories(metadata, modules)
    plan.replace_argument(FILE_LOCATOR, 0, directories)
    return directories
