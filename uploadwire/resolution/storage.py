"""Storage backend alias resolution."""

from loguru import logger

from ..di.catalog import STORAGE_ALIAS, storage_id
from ..di.plan import WiringPlan
from .references import ExternalReference, ServiceSelector


def storage_target(selector: ServiceSelector) -> str:
    """Service id the storage alias should point to."""
    if isinstance(selector, ExternalReference):
        return selector.service_id
    return storage_id(selector.name)


def resolve_storage(plan: WiringPlan, selector: ServiceSelector) -> str:
    """Alias the uploader storage to the selected backend.

    An unknown backend is not detected here; the registry reports the
    dangling alias when it is compiled.
    """
    target = storage_target(selector)
    plan.set_alias(STORAGE_ALIAS, target)
    logger.debug(f"Storage '{STORAGE_ALIAS}' resolved to '{target}'")
    return target
