"""Buffered wiring instructions.

Resolution never touches the registry directly. Each step appends
instructions to a ``WiringPlan`` and the plan is committed only once the
whole configuration has been resolved, so a failing configuration leaves
the registry untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple, Union

from loguru import logger

from ..errors import RegistryError
from .definition import Definition
from .registry import ServiceRegistry


@dataclass(frozen=True)
class Tag:
    """Tag annotation with its attributes (e.g. ``priority``)."""
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ServiceRegistration:
    """Instruction to define a service, optionally decorating a template."""
    service_id: str
    class_name: Optional[str] = None
    parent: Optional[str] = None
    arguments: Tuple[Any, ...] = ()
    tags: Tuple[Tag, ...] = ()
    calls: Tuple[Tuple[str, Tuple[Any, ...]], ...] = ()
    public: bool = True
    abstract: bool = False

    def to_definition(self) -> Definition:
        definition = Definition(
            class_name=self.class_name,
            parent=self.parent,
            public=self.public,
            abstract=self.abstract,
        )
        if self.parent is None:
            definition.arguments = list(self.arguments)
        else:
            definition.argument_overrides = dict(enumerate(self.arguments))
        for tag in self.tags:
            definition.add_tag(tag.name, **tag.attributes)
        for method, arguments in self.calls:
            definition.add_call(method, *arguments)
        return definition

    def apply(self, registry: ServiceRegistry) -> None:
        registry.define(self.service_id, self.to_definition())


@dataclass(frozen=True)
class SetAlias:
    alias_id: str
    target: str
    public: bool = True

    def apply(self, registry: ServiceRegistry) -> None:
        registry.alias(self.alias_id, self.target, public=self.public)


@dataclass(frozen=True)
class RemoveAlias:
    alias_id: str

    def apply(self, registry: ServiceRegistry) -> None:
        registry.remove_alias(self.alias_id)


@dataclass(frozen=True)
class ReplaceArgument:
    service_id: str
    index: int
    value: Any

    def apply(self, registry: ServiceRegistry) -> None:
        registry.replace_argument(self.service_id, self.index, self.value)


@dataclass(frozen=True)
class SetParameter:
    name: str
    value: Any

    def apply(self, registry: ServiceRegistry) -> None:
        registry.set_parameter(self.name, self.value)


Instruction = Union[ServiceRegistration, SetAlias, RemoveAlias, ReplaceArgument, SetParameter]


class Registrar(Protocol):
    """What the host must expose for a plan to be committed."""

    def define(self, service_id: str, definition: Definition) -> Definition: ...
    def alias(self, alias_id: str, target: str, public: bool = True) -> Any: ...
    def remove_alias(self, alias_id: str) -> None: ...
    def replace_argument(self, service_id: str, index: int, value: Any) -> Definition: ...
    def set_parameter(self, name: str, value: Any) -> None: ...


class WiringPlan:
    """Ordered list of registry instructions with a staged view.

    The staged view answers which services and aliases will exist once the
    plan is committed on top of an optional base registry.
    """

    def __init__(self, base: Optional[ServiceRegistry] = None):
        self._instructions: List[Instruction] = []
        self._base = base
        self._defined: Dict[str, ServiceRegistration] = {}
        self._aliases: Dict[str, Optional[str]] = {}

    def register(self, registration: ServiceRegistration) -> ServiceRegistration:
        """Stage a service definition.

        Raises:
            RegistryError: If this plan already stages the same service id
        """
        if registration.service_id in self._defined:
            raise RegistryError.duplicate_service(registration.service_id)
        self._instructions.append(registration)
        self._defined[registration.service_id] = registration
        self._aliases.pop(registration.service_id, None)
        return registration

    def define(self, service_id: str, **kwargs: Any) -> ServiceRegistration:
        return self.register(ServiceRegistration(service_id, **kwargs))

    def set_alias(self, alias_id: str, target: str, public: bool = True) -> None:
        self._instructions.append(SetAlias(alias_id, target, public))
        self._aliases[alias_id] = target

    def remove_alias(self, alias_id: str) -> None:
        self._instructions.append(RemoveAlias(alias_id))
        self._aliases[alias_id] = None

    def replace_argument(self, service_id: str, index: int, value: Any) -> None:
        self._instructions.append(ReplaceArgument(service_id, index, value))

    def set_parameter(self, name: str, value: Any) -> None:
        self._instructions.append(SetParameter(name, value))

    def stages(self, service_id: str) -> bool:
        """Check if this plan itself registers the service."""
        return service_id in self._defined

    def defines(self, service_id: str) -> bool:
        """Check if a definition will exist after commit."""
        if service_id in self._defined:
            return True
        return self._base is not None and self._base.has_definition(service_id)

    def alias_target(self, alias_id: str) -> Optional[str]:
        """Target of an alias after commit, or None if it will not exist."""
        if alias_id in self._aliases:
            return self._aliases[alias_id]
        if self._base is not None and self._base.has_alias(alias_id):
            return self._base.get_alias(alias_id).target
        return None

    def registrations(self) -> List[ServiceRegistration]:
        return [i for i in self._instructions if isinstance(i, ServiceRegistration)]

    def registration(self, service_id: str) -> ServiceRegistration:
        return self._defined[service_id]

    def parameters(self) -> Dict[str, Any]:
        return {i.name: i.value for i in self._instructions if isinstance(i, SetParameter)}

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __len__(self) -> int:
        return len(self._instructions)

    def commit(self, registry: Registrar) -> int:
        """Apply every instruction to the registry in order.

        Returns:
            Number of instructions applied
        """
        for instruction in self._instructions:
            instruction.apply(registry)
        logger.info(f"Committed {len(self._instructions)} wiring instructions")
        return len(self._instructions)
