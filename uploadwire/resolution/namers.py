"""Per-mapping namer services.

A namer may keep state between calls, so mappings never share one: each
mapping naming a namer service gets its own ``<service>.<mapping>``
definition decorating the base service, and the mapping is rewritten to
point at it.
"""

from typing import Dict

from loguru import logger

from ..config.schema import MappingConfig, NamerConfig
from ..di.plan import WiringPlan
from ..errors import ConfigurationError

NAMER_FIELDS = ("namer", "directory_namer")


def namer_service_id(base_service: str, mapping_name: str) -> str:
    return f"{base_service}.{mapping_name}"


def create_namer_service(
    plan: WiringPlan,
    mapping_name: str,
    namer: NamerConfig,
    field: str = "namer",
) -> NamerConfig:
    """Define ``<service>.<mapping>`` decorating the base namer.

    Raises:
        ConfigurationError: If this pass already defines that service id
    """
    service_id = namer_service_id(namer.service, mapping_name)
    if plan.stages(service_id):
        raise ConfigurationError.service_id_conflict(service_id, mapping_name, field)

    calls = (("set_options", (dict(namer.options),)),) if namer.options else ()
    plan.define(service_id, parent=namer.service, calls=calls)
    logger.debug(f"Namer '{service_id}' created for mapping '{mapping_name}'")
    return namer.model_copy(update={"service": service_id})


def materialize_namers(plan: WiringPlan, mappings: Dict[str, MappingConfig]) -> Dict[str, MappingConfig]:
    """Create a distinct namer service per mapping and rewrite the mappings."""
    resolved = {}
    for name, mapping in mappings.items():
        updates = {
            field: create_namer_service(plan, name, getattr(mapping, field), field)
            for field in NAMER_FIELDS
            if getattr(mapping, field).service
        }
        resolved[name] = mapping.model_copy(update=updates) if updates else mapping
    return resolved
