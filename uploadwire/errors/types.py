"""Specific error types for uploadwire modules."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .base import UploadWireError


class ConfigurationError(UploadWireError):
    """Configuration-related errors raised while resolving the wiring."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[Path] = None,
        field_path: Optional[str] = None,
        invalid_value: Any = None,
        **kwargs: Any,
    ):
        """Initialize configuration error."""
        super().__init__(message, **kwargs)

        if config_path:
            self.context.add_technical_detail("config_path", str(config_path))
        if field_path:
            self.context.add_technical_detail("field_path", field_path)
        if invalid_value is not None:
            self.context.add_technical_detail("invalid_value", str(invalid_value))

    @classmethod
    def unregistered_module(
        cls,
        module_name: str,
        available: Iterable[str],
        path: Optional[str] = None,
    ) -> "ConfigurationError":
        """Create error for a metadata path pointing at an unknown module."""
        available = sorted(available)
        error = cls(
            f'The module "{module_name}" has not been registered. '
            f"Available modules: {', '.join(available)}",
            field_path="metadata.directories",
            invalid_value=path,
            error_code="CONFIG_UNREGISTERED_MODULE",
        )
        error.with_context(module=module_name, available_modules=available)
        error.with_suggestion(f"Install the module '{module_name}' or fix the metadata directory path")
        return error

    @classmethod
    def cache_directory_not_creatable(
        cls,
        directory: Union[str, Path],
        cause: Optional[BaseException] = None,
    ) -> "ConfigurationError":
        """Create error for a metadata cache directory that cannot be created."""
        error = cls(
            f'Could not create cache directory "{directory}".',
            field_path="metadata.file_cache.dir",
            invalid_value=directory,
            cause=cause,
            error_code="CONFIG_CACHE_DIRECTORY",
        )
        error.with_suggestion("Check the permissions of the parent directory")
        return error

    @classmethod
    def unknown_driver(
        cls,
        driver: str,
        mapping: str,
        available: Iterable[str],
    ) -> "ConfigurationError":
        """Create error for a mapping bound to a driver without listener templates."""
        available = sorted(available)
        error = cls(
            f'Unknown driver "{driver}" for mapping "{mapping}". '
            f"Supported drivers: {', '.join(available)}",
            field_path=f"mappings.{mapping}.db_driver",
            invalid_value=driver,
            error_code="CONFIG_UNKNOWN_DRIVER",
        )
        error.with_suggestion(f"Use one of: {', '.join(available)}")
        return error

    @classmethod
    def invalid_config(
        cls,
        details: str,
        config_path: Optional[Path] = None,
        cause: Optional[BaseException] = None,
    ) -> "ConfigurationError":
        """Create error for configuration rejected by the schema."""
        error = cls(
            f"Invalid uploader configuration: {details}",
            config_path=config_path,
            cause=cause,
            error_code="CONFIG_INVALID",
        )
        error.with_suggestion("Check the configuration against the documented options")
        return error

    @classmethod
    def service_id_conflict(
        cls,
        service_id: str,
        mapping: str,
        field: Optional[str] = None,
    ) -> "ConfigurationError":
        """Create error for a mapping whose derived service id is already taken."""
        error = cls(
            f'Mapping "{mapping}" would define the service "{service_id}", '
            f"which is already registered by the uploader.",
            field_path=f"mappings.{mapping}.{field}" if field else f"mappings.{mapping}",
            invalid_value=mapping,
            error_code="CONFIG_SERVICE_ID_CONFLICT",
        )
        error.with_context(service_id=service_id)
        error.with_suggestion(f'Rename the mapping "{mapping}"')
        return error

    @classmethod
    def file_not_found(cls, path: Path) -> "ConfigurationError":
        """Create error for a missing configuration file."""
        error = cls(
            f"Configuration file not found: {path}",
            config_path=path,
            error_code="CONFIG_FILE_NOT_FOUND",
        )
        error.with_suggestion(f"Create {path} or point to an existing file")
        return error


class RegistryError(UploadWireError):
    """Errors raised by the service registry."""

    def __init__(
        self,
        message: str,
        *,
        service_id: Optional[str] = None,
        **kwargs: Any,
    ):
        """Initialize registry error."""
        super().__init__(message, **kwargs)
        self.service_id = service_id

        if service_id:
            self.context.add_technical_detail("service_id", service_id)

    @classmethod
    def service_not_found(
        cls,
        service_id: str,
        referenced_by: Optional[str] = None,
    ) -> "RegistryError":
        """Create error for a missing service definition."""
        message = f'The service "{service_id}" does not exist.'
        if referenced_by:
            message = f'The service "{referenced_by}" depends on a non-existent service "{service_id}".'
        error = cls(message, service_id=service_id, error_code="REGISTRY_SERVICE_NOT_FOUND")
        if referenced_by:
            error.with_context(referenced_by=referenced_by)
        return error

    @classmethod
    def unresolved_alias(cls, alias_id: str, target: str) -> "RegistryError":
        """Create error for an alias pointing at nothing."""
        error = cls(
            f'The alias "{alias_id}" points to a non-existent service "{target}".',
            service_id=alias_id,
            error_code="REGISTRY_UNRESOLVED_ALIAS",
        )
        error.with_context(target=target)
        return error

    @classmethod
    def circular_reference(cls, chain: Iterable[str]) -> "RegistryError":
        """Create error for a cycle of aliases or parents."""
        chain = list(chain)
        return cls(
            f"Circular reference detected: {' -> '.join(chain)}",
            service_id=chain[0] if chain else None,
            error_code="REGISTRY_CIRCULAR_REFERENCE",
        ).with_context(chain=chain)

    @classmethod
    def argument_out_of_range(cls, service_id: str, index: int, count: int) -> "RegistryError":
        """Create error for replacing an argument that does not exist."""
        return cls(
            f'Cannot replace argument {index} of service "{service_id}": '
            f"only {count} argument(s) defined.",
            service_id=service_id,
            error_code="REGISTRY_ARGUMENT_OUT_OF_RANGE",
        ).with_context(index=index, count=count)

    @classmethod
    def duplicate_service(cls, service_id: str) -> "RegistryError":
        """Create error for a service registered twice in one pass."""
        return cls(
            f'The service "{service_id}" is registered more than once.',
            service_id=service_id,
            error_code="REGISTRY_DUPLICATE_SERVICE",
        )

    @classmethod
    def missing_parameter(cls, name: str) -> "RegistryError":
        """Create error for an unknown %parameter% placeholder."""
        return cls(
            f'You have requested a non-existent parameter "{name}".',
            error_code="REGISTRY_MISSING_PARAMETER",
        ).with_context(parameter=name)
