"""Standalone bootstrap for the uploader wiring.

Hosts normally call ``UploaderExtension.load`` from their own configuration
lifecycle. This bootstrap plays the host's part for scripts and tests:

1. Logging setup
2. Configuration loading (files, environment, overrides)
3. Registry creation with the kernel parameters
4. Extension loading and registry compilation
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .config.manager import ConfigurationManager
from .di.registry import ServiceRegistry
from .extension import Resolution, UploaderExtension
from .logging_config import setup_logging
from .modules import ModuleTable


class UploaderBootstrap:
    """Builds a compiled registry from uploader configuration."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        project_dir: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        modules: Optional[ModuleTable] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        log_level: str = "INFO",
        log_file: Optional[Path] = None,
        configure_logging: bool = True,
    ):
        """Initialize bootstrap.

        Args:
            config_path: Explicit configuration file
            project_dir: Project root, where ``uploader.yaml`` is looked up
            cache_dir: Value of ``kernel.cache_dir``; defaults to ``<project>/var/cache``
            modules: Installed modules
            overrides: Inline configuration applied last
            environ: Environment for overrides, defaults to os.environ
            log_level: Logging level
            log_file: Optional log file
            configure_logging: Whether to install the logging sinks
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.cache_dir = Path(cache_dir) if cache_dir else self.project_dir / "var" / "cache"
        self.modules = modules if modules is not None else ModuleTable()
        self.log_level = log_level
        self.log_file = log_file
        self.configure_logging = configure_logging

        self.config_manager = ConfigurationManager(
            project_config_path=self.project_dir / "uploader.yaml",
            config_path=config_path,
            overrides=overrides,
            environ=environ,
        )

        self.registry: Optional[ServiceRegistry] = None
        self.resolution: Optional[Resolution] = None
        self._initialized = False

    def kernel_parameters(self) -> Dict[str, Any]:
        return {
            "kernel.project_dir": self.project_dir.as_posix(),
            "kernel.cache_dir": self.cache_dir.as_posix(),
        }

    def initialize(self) -> ServiceRegistry:
        """Load, wire and compile.

        Returns:
            The compiled registry

        Raises:
            ConfigurationError: If the configuration cannot be resolved
            RegistryError: If the resulting registry does not compile
        """
        if self._initialized:
            return self.registry

        if self.configure_logging:
            setup_logging(self.log_level, self.log_file)

        raw = self.config_manager.load_raw()
        registry = ServiceRegistry(self.kernel_parameters())

        extension = UploaderExtension(self.modules)
        self.resolution = extension.load([raw], registry)
        registry.compile()

        self.registry = registry
        self._initialized = True
        logger.info(f"Uploader bootstrap complete for {self.project_dir}")
        return registry
