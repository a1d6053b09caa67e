"""Per-mapping driver defaulting."""

from typing import Dict

from ..config.schema import MappingConfig


def apply_default_driver(mappings: Dict[str, MappingConfig], default_driver: str) -> Dict[str, MappingConfig]:
    """Give every mapping without a driver the global one.

    Mappings with an explicit driver keep it. The driver is not checked
    here; unknown drivers surface when listeners are registered.
    """
    return {
        name: mapping.model_copy(update={"db_driver": mapping.db_driver or default_driver})
        for name, mapping in mappings.items()
    }
