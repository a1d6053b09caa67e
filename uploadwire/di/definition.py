"""Service definition model for the uploader registry.

A definition describes how the host should build a service: the class to
instantiate, its ordered constructor arguments, method calls to perform
after construction and tags for discovery. A decorated definition names a
``parent`` and only overrides what differs from it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Reference:
    """Reference to another service, resolved by the host at build time.

    An optional reference is dropped by the host when the target does not
    exist instead of failing the build.
    """
    service_id: str
    optional: bool = False

    def __str__(self) -> str:
        return f"@{self.service_id}"


@dataclass(frozen=True)
class Alias:
    """Alternative identifier for a service."""
    target: str
    public: bool = True


@dataclass
class Definition:
    """Mutable service definition held by the registry."""
    class_name: Optional[str] = None
    arguments: List[Any] = field(default_factory=list)
    parent: Optional[str] = None
    argument_overrides: Dict[int, Any] = field(default_factory=dict)
    tags: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    calls: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)
    public: bool = True
    abstract: bool = False

    @property
    def is_decorated(self) -> bool:
        return self.parent is not None

    def add_tag(self, name: str, **attributes: Any) -> "Definition":
        self.tags.setdefault(name, []).append(dict(attributes))
        return self

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def add_call(self, method: str, *arguments: Any) -> "Definition":
        self.calls.append((method, tuple(arguments)))
        return self

    def copy(self) -> "Definition":
        """Return a copy that does not share mutable state with this one."""
        return Definition(
            class_name=self.class_name,
            arguments=list(self.arguments),
            parent=self.parent,
            argument_overrides=dict(self.argument_overrides),
            tags={name: [dict(attrs) for attrs in entries] for name, entries in self.tags.items()},
            calls=list(self.calls),
            public=self.public,
            abstract=self.abstract,
        )
