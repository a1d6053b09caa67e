"""uploadwire: configuration-driven wiring of file-upload services.

Reads a declarative uploader configuration (mappings, storage backend,
metadata directories, cache strategy, driver listeners) and registers
the matching services in a service registry.
"""

from .bootstrap import UploaderBootstrap
from .config import ConfigurationManager, UploaderConfig, process_configuration
from .di import Reference, ServiceRegistry, WiringPlan
from .errors import ConfigurationError, RegistryError, UploadWireError
from .extension import Resolution, UploaderExtension
from .modules import InstalledModule, ModuleTable

__version__ = "0.1.0"

__all__ = [
    "UploaderExtension",
    "UploaderBootstrap",
    "Resolution",
    "ServiceRegistry",
    "WiringPlan",
    "Reference",
    "ConfigurationManager",
    "UploaderConfig",
    "process_configuration",
    "InstalledModule",
    "ModuleTable",
    "UploadWireError",
    "ConfigurationError",
    "RegistryError",
]
