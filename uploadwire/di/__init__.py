"""Service registry infrastructure for the uploader.

This module provides:
- Definition, alias and reference models
- An in-memory service registry with parameter resolution and compilation
- Buffered wiring plans committed atomically to a registry
- The base service catalog loaded before mappings are resolved
"""

from .definition import Alias, Definition, Reference
from .plan import (
    RemoveAlias,
    ReplaceArgument,
    ServiceRegistration,
    SetAlias,
    SetParameter,
    Tag,
    WiringPlan,
)
from .registry import ServiceRegistry

__all__ = [
    "Alias",
    "Definition",
    "Reference",
    "ServiceRegistry",
    "ServiceRegistration",
    "SetAlias",
    "RemoveAlias",
    "ReplaceArgument",
    "SetParameter",
    "Tag",
    "WiringPlan",
]
