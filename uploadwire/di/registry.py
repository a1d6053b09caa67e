"""In-memory service registry.

The registry stands in for the host framework's container builder. It
tracks service definitions, aliases and parameters keyed by string
identifier and supports the operations the uploader extension needs:
definition, aliasing, argument replacement and tagging. ``compile()``
validates the whole graph the way a host would before building services.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..errors import ErrorGroup, RegistryError, UploadWireError
from .definition import Alias, Definition, Reference

_PARAMETER_PATTERN = re.compile(r"%%|%([^%\s]+)%")


class ServiceRegistry:
    """Registry of service definitions, aliases and parameters."""

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        """Initialize the registry.

        Args:
            parameters: Initial parameters, e.g. ``kernel.cache_dir``
        """
        self._definitions: Dict[str, Definition] = {}
        self._aliases: Dict[str, Alias] = {}
        self._parameters: Dict[str, Any] = dict(parameters or {})

    # Definitions

    def define(self, service_id: str, definition: Definition) -> Definition:
        """Register (or replace) a service definition."""
        self._aliases.pop(service_id, None)
        self._definitions[service_id] = definition
        logger.debug(f"Defined service '{service_id}'")
        return definition

    def has_definition(self, service_id: str) -> bool:
        return service_id in self._definitions

    def get_definition(self, service_id: str) -> Definition:
        """Get a definition by identifier.

        Raises:
            RegistryError: If no such definition exists
        """
        try:
            return self._definitions[service_id]
        except KeyError:
            raise RegistryError.service_not_found(service_id) from None

    @property
    def definitions(self) -> Dict[str, Definition]:
        return dict(self._definitions)

    def replace_argument(self, service_id: str, index: int, value: Any) -> Definition:
        """Replace a constructor argument of a definition.

        Decorated definitions record the replacement as an override of the
        parent's argument; plain definitions must already have the argument.
        """
        definition = self.get_definition(service_id)
        if definition.is_decorated:
            definition.argument_overrides[index] = value
        elif 0 <= index < len(definition.arguments):
            definition.arguments[index] = value
        else:
            raise RegistryError.argument_out_of_range(service_id, index, len(definition.arguments))
        return definition

    def tag(self, service_id: str, name: str, **attributes: Any) -> Definition:
        return self.get_definition(service_id).add_tag(name, **attributes)

    def find_tagged(self, name: str) -> Dict[str, List[Dict[str, Any]]]:
        """Find all definitions carrying a tag.

        Returns:
            Service id -> list of tag attribute dicts
        """
        return {
            service_id: list(definition.tags[name])
            for service_id, definition in self._definitions.items()
            if definition.has_tag(name)
        }

    # Aliases

    def alias(self, alias_id: str, target: str, public: bool = True) -> Alias:
        """Make ``alias_id`` an alias of ``target``."""
        alias = Alias(target=target, public=public)
        self._definitions.pop(alias_id, None)
        self._aliases[alias_id] = alias
        logger.debug(f"Aliased '{alias_id}' to '{target}'")
        return alias

    def remove_alias(self, alias_id: str) -> None:
        if self._aliases.pop(alias_id, None) is not None:
            logger.debug(f"Removed alias '{alias_id}'")

    def has_alias(self, alias_id: str) -> bool:
        return alias_id in self._aliases

    def get_alias(self, alias_id: str) -> Alias:
        try:
            return self._aliases[alias_id]
        except KeyError:
            raise RegistryError.service_not_found(alias_id) from None

    @property
    def aliases(self) -> Dict[str, Alias]:
        return dict(self._aliases)

    def has(self, service_id: str) -> bool:
        """Check if an identifier names a definition or an alias."""
        return service_id in self._definitions or service_id in self._aliases

    def resolve_alias(self, service_id: str) -> str:
        """Follow aliases until a definition identifier is reached.

        Raises:
            RegistryError: If the chain is circular or ends nowhere
        """
        seen = [service_id]
        current = service_id
        while current in self._aliases:
            target = self._aliases[current].target
            if target in seen:
                raise RegistryError.circular_reference(seen + [target])
            seen.append(target)
            current = target
        if current not in self._definitions:
            raise RegistryError.unresolved_alias(service_id, current)
        return current

    # Parameters

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value

    def has_parameter(self, name: str) -> bool:
        return name in self._parameters

    def get_parameter(self, name: str) -> Any:
        try:
            return self._parameters[name]
        except KeyError:
            raise RegistryError.missing_parameter(name) from None

    @property
    def parameters(self) -> Dict[str, Any]:
        return dict(self._parameters)

    def resolve_value(self, value: Any, _resolving: Optional[List[str]] = None) -> Any:
        """Replace ``%name%`` placeholders with parameter values.

        A string consisting of a single placeholder resolves to the raw
        parameter value; placeholders embedded in longer strings are
        interpolated. ``%%`` escapes a literal percent sign. Lists and
        dicts are resolved recursively.
        """
        resolving = _resolving or []
        if isinstance(value, dict):
            return {
                self.resolve_value(key, resolving): self.resolve_value(item, resolving)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(self.resolve_value(item, resolving) for item in value)
        if not isinstance(value, str):
            return value

        whole = _PARAMETER_PATTERN.fullmatch(value)
        if whole and whole.group(1):
            return self._resolve_parameter(whole.group(1), resolving)

        def replace(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name is None:
                return "%"
            resolved = self._resolve_parameter(name, resolving)
            if not isinstance(resolved, (str, int, float)):
                raise RegistryError(
                    f'A string value must be composed of strings and/or numbers, '
                    f'but found parameter "{name}" of type {type(resolved).__name__}.',
                    error_code="REGISTRY_PARAMETER_TYPE",
                )
            return str(resolved)

        return _PARAMETER_PATTERN.sub(replace, value)

    def _resolve_parameter(self, name: str, resolving: List[str]) -> Any:
        if name in resolving:
            raise RegistryError.circular_reference(resolving + [name])
        return self.resolve_value(self.get_parameter(name), resolving + [name])

    # Compilation

    def resolve_definition(self, service_id: str) -> Definition:
        """Flatten a definition with its parent chain.

        Class name, arguments and method calls are inherited from the
        parent; tags, visibility and the abstract flag are not.
        """
        return self._flatten(service_id, [])

    def _flatten(self, service_id: str, chain: List[str]) -> Definition:
        if service_id in chain:
            raise RegistryError.circular_reference(chain + [service_id])
        definition = self.get_definition(service_id)
        if not definition.is_decorated:
            return definition.copy()

        if not self.has_definition(definition.parent):
            raise RegistryError.service_not_found(definition.parent, referenced_by=service_id)
        parent = self._flatten(definition.parent, chain + [service_id])

        arguments = list(parent.arguments)
        for index in sorted(definition.argument_overrides):
            value = definition.argument_overrides[index]
            if index < len(arguments):
                arguments[index] = value
            elif index == len(arguments):
                arguments.append(value)
            else:
                raise RegistryError.argument_out_of_range(service_id, index, len(arguments))

        flattened = definition.copy()
        flattened.class_name = definition.class_name or parent.class_name
        flattened.arguments = arguments
        flattened.argument_overrides = {}
        flattened.calls = parent.calls + definition.calls
        flattened.parent = None
        return flattened

    def compile(self) -> Dict[str, Definition]:
        """Validate the registry and return the concrete services.

        Every alias must lead to a definition, every decorated definition
        must have its parent chain and every ``Reference`` argument must
        point to a known service.

        Returns:
            Service id -> flattened definition, abstract templates excluded

        Raises:
            RegistryError: For a single problem
            ErrorGroup: When several problems are found
        """
        errors: List[UploadWireError] = []
        compiled: Dict[str, Definition] = {}

        for alias_id in self._aliases:
            try:
                self.resolve_alias(alias_id)
            except RegistryError as e:
                errors.append(e)

        for service_id, definition in self._definitions.items():
            try:
                flattened = self.resolve_definition(service_id)
            except RegistryError as e:
                errors.append(e)
                continue
            if definition.abstract:
                continue
            for reference in _references(flattened):
                if not reference.optional and not self.has(reference.service_id):
                    errors.append(
                        RegistryError.service_not_found(reference.service_id, referenced_by=service_id)
                    )
            compiled[service_id] = flattened

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ErrorGroup(f"Service registry failed to compile with {len(errors)} errors", errors)

        logger.info(f"Compiled {len(compiled)} services and {len(self._aliases)} aliases")
        return compiled


def _references(definition: Definition) -> Iterable[Reference]:
    """Yield every Reference found in arguments and method calls."""
    def walk(value: Any) -> Iterable[Reference]:
        if isinstance(value, Reference):
            yield value
        elif isinstance(value, dict):
            for item in value.values():
                yield from walk(item)
        elif isinstance(value, (list, tuple)):
            for item in value:
                yield from walk(item)

    yield from walk(definition.arguments)
    for _, arguments in definition.calls:
        yield from walk(arguments)
