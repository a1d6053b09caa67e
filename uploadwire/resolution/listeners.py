"""Listener registration.

Every mapping gets an upload listener; the inject, clean and remove
listeners are added when the mapping enables the matching behaviour. Each
listener decorates the driver's abstract template and, for drivers hooked
into an event system, carries that system's subscriber tag.
"""

from typing import Dict, List, NamedTuple

from loguru import logger

from ..config.schema import MappingConfig
from ..di.catalog import DRIVERS, adapter_id, listener_id, listener_template_id
from ..di.definition import Reference
from ..di.plan import ServiceRegistration, Tag, WiringPlan
from ..errors import ConfigurationError


class Behavior(NamedTuple):
    option: str
    name: str
    priority: int


OPTIONAL_BEHAVIORS = (
    Behavior("inject_on_load", "inject", 0),
    Behavior("delete_on_update", "clean", 50),
    Behavior("delete_on_remove", "remove", 0),
)

UPLOAD = Behavior("upload", "upload", 0)

# Propel needs no event subscriber tag.
TAG_MAP: Dict[str, str] = {
    "orm": "doctrine.event_subscriber",
    "mongodb": "doctrine_mongodb.odm.event_subscriber",
    "phpcr": "doctrine_phpcr.event_subscriber",
}


def create_listener(
    plan: WiringPlan,
    mapping_name: str,
    behavior: str,
    driver: str,
    priority: int = 0,
) -> ServiceRegistration:
    """Register one listener for a mapping.

    Raises:
        ConfigurationError: If the driver has no template for this behaviour,
            or the listener id collides with a driver template
    """
    template = listener_template_id(behavior, driver)
    if not plan.defines(template):
        available = [d for d in DRIVERS if plan.defines(listener_template_id(behavior, d))]
        raise ConfigurationError.unknown_driver(driver, mapping_name, available)

    # listener ids and driver templates share the uploader.listener.* namespace
    service_id = listener_id(behavior, mapping_name)
    if mapping_name in DRIVERS or plan.stages(service_id):
        raise ConfigurationError.service_id_conflict(service_id, mapping_name)

    tags = ()
    if driver in TAG_MAP:
        tags = (Tag(TAG_MAP[driver], {"priority": priority}),)

    return plan.define(
        service_id,
        parent=template,
        arguments=(mapping_name, Reference(adapter_id(driver))),
        tags=tags,
    )


def register_listeners(plan: WiringPlan, mappings: Dict[str, MappingConfig]) -> List[ServiceRegistration]:
    """Register the listeners of every mapping, in mapping order."""
    registrations = []
    for name, mapping in mappings.items():
        driver = mapping.db_driver

        for behavior in OPTIONAL_BEHAVIORS:
            if not getattr(mapping, behavior.option):
                continue
            registrations.append(create_listener(plan, name, behavior.name, driver, behavior.priority))

        # the upload listener is mandatory
        registrations.append(create_listener(plan, name, UPLOAD.name, driver, UPLOAD.priority))

    logger.debug(f"Registered {len(registrations)} listeners for {len(mappings)} mapping(s)")
    return registrations
