"""Base service catalog of the uploader.

These are the services every uploader installation starts from: driver
adapters, abstract listener templates, storage backends, metadata
infrastructure, namers, form types and handlers. The extension loads them
into the wiring plan before resolving the configured mappings, which then
decorate or re-point them.
"""

from typing import Callable, Dict, List, Tuple

from loguru import logger

from .definition import Reference
from .plan import ServiceRegistration, Tag, WiringPlan

PREFIX = "uploader"

STORAGE_ALIAS = f"{PREFIX}.storage"
METADATA_CACHE_ALIAS = f"{PREFIX}.metadata.cache"
FILE_LOCATOR = f"{PREFIX}.metadata.file_locator"
FILE_CACHE = f"{PREFIX}.metadata.cache.file_cache"
METADATA_READER = f"{PREFIX}.metadata_reader"
PROPERTY_MAPPING_FACTORY = f"{PREFIX}.property_mapping_factory"
UPLOAD_HANDLER = f"{PREFIX}.upload_handler"

DEFAULT_FILENAME_SUFFIX_PARAMETER = f"{PREFIX}.default_filename_attribute_suffix"
MAPPINGS_PARAMETER = f"{PREFIX}.mappings"

BEHAVIORS = ("inject", "clean", "remove", "upload")

# driver -> (adapter class, listener class prefix)
DRIVERS: Dict[str, Tuple[str, str]] = {
    "orm": ("DoctrineORMAdapter", "Doctrine"),
    "mongodb": ("DoctrineMongoDBAdapter", "Doctrine"),
    "phpcr": ("DoctrinePHPCRAdapter", "Doctrine"),
    "propel": ("PropelORMAdapter", "Propel"),
}

# Storage backends provided by a separate definition set.
OPTIONAL_STORAGES = ("gaufrette", "flysystem")


def storage_id(name: str) -> str:
    return f"{PREFIX}.storage.{name}"


def adapter_id(driver: str) -> str:
    return f"{PREFIX}.adapter.{driver}"


def listener_template_id(behavior: str, driver: str) -> str:
    return f"{PREFIX}.listener.{behavior}.{driver}"


def listener_id(behavior: str, mapping: str) -> str:
    return f"{PREFIX}.listener.{behavior}.{mapping}"


def _adapters() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(adapter_id(driver), class_name=adapter_class, public=False)
        for driver, (adapter_class, _) in DRIVERS.items()
    ]


def _listeners() -> List[ServiceRegistration]:
    # arguments: mapping name, adapter, metadata reader, upload handler
    registrations = []
    for driver, (_, class_prefix) in DRIVERS.items():
        for behavior in BEHAVIORS:
            registrations.append(ServiceRegistration(
                listener_template_id(behavior, driver),
                class_name=f"{class_prefix}{behavior.capitalize()}Listener",
                arguments=(None, None, Reference(METADATA_READER), Reference(UPLOAD_HANDLER)),
                abstract=True,
                public=False,
            ))
    return registrations


def _storage() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            storage_id("file_system"),
            class_name="FileSystemStorage",
            arguments=(Reference(PROPERTY_MAPPING_FACTORY),),
        ),
    ]


def _gaufrette() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            storage_id("gaufrette"),
            class_name="GaufretteStorage",
            arguments=(Reference(PROPERTY_MAPPING_FACTORY), Reference("knp_gaufrette.filesystem_map")),
        ),
    ]


def _flysystem() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            storage_id("flysystem"),
            class_name="FlysystemStorage",
            arguments=(Reference(PROPERTY_MAPPING_FACTORY), Reference("oneup_flysystem.mount_manager")),
        ),
    ]


def _injector() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            f"{PREFIX}.file_injector",
            class_name="FileInjector",
            arguments=(Reference(STORAGE_ALIAS),),
        ),
    ]


def _templating() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            f"{PREFIX}.templating.helper.uploader_helper",
            class_name="UploaderHelper",
            arguments=(Reference(STORAGE_ALIAS),),
        ),
    ]


def _metadata() -> List[ServiceRegistration]:
    drivers = (f"{PREFIX}.metadata_driver.annotation", f"{PREFIX}.metadata_driver.yaml", f"{PREFIX}.metadata_driver.xml")
    return [
        ServiceRegistration(FILE_LOCATOR, class_name="FileLocator", arguments=({},), public=False),
        ServiceRegistration(drivers[0], class_name="AnnotationDriver", public=False),
        ServiceRegistration(drivers[1], class_name="YamlDriver", arguments=(Reference(FILE_LOCATOR),), public=False),
        ServiceRegistration(drivers[2], class_name="XmlDriver", arguments=(Reference(FILE_LOCATOR),), public=False),
        ServiceRegistration(
            f"{PREFIX}.metadata_driver.chain",
            class_name="DriverChain",
            arguments=([Reference(driver) for driver in drivers],),
            public=False,
        ),
        ServiceRegistration(FILE_CACHE, class_name="FileCache", arguments=(None,), public=False),
        ServiceRegistration(
            f"{PREFIX}.metadata_factory",
            class_name="MetadataFactory",
            arguments=(Reference(f"{PREFIX}.metadata_driver.chain"),),
            calls=(("set_cache", (Reference(METADATA_CACHE_ALIAS, optional=True),)),),
            public=False,
        ),
        ServiceRegistration(
            METADATA_READER,
            class_name="MetadataReader",
            arguments=(Reference(f"{PREFIX}.metadata_factory"),),
        ),
    ]


def _factory() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            PROPERTY_MAPPING_FACTORY,
            class_name="PropertyMappingFactory",
            arguments=(
                Reference(METADATA_READER),
                f"%{MAPPINGS_PARAMETER}%",
                f"%{DEFAULT_FILENAME_SUFFIX_PARAMETER}%",
            ),
        ),
    ]


def _namers() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(f"{PREFIX}.namer_uniqid", class_name="UniqidNamer"),
        ServiceRegistration(f"{PREFIX}.namer_origname", class_name="OrignameNamer"),
        ServiceRegistration(f"{PREFIX}.namer_property", class_name="PropertyNamer"),
        ServiceRegistration(f"{PREFIX}.namer_hash", class_name="HashNamer"),
        ServiceRegistration(f"{PREFIX}.directory_namer_subdir", class_name="SubdirDirectoryNamer"),
    ]


def _form() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            f"{PREFIX}.form.type.file",
            class_name="UploaderFileType",
            arguments=(Reference(STORAGE_ALIAS), Reference(UPLOAD_HANDLER)),
            tags=(Tag("form.type"),),
        ),
        ServiceRegistration(
            f"{PREFIX}.form.type.image",
            class_name="UploaderImageType",
            arguments=(Reference(STORAGE_ALIAS), Reference(UPLOAD_HANDLER)),
            tags=(Tag("form.type"),),
        ),
    ]


def _handlers() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            UPLOAD_HANDLER,
            class_name="UploadHandler",
            arguments=(
                Reference(PROPERTY_MAPPING_FACTORY),
                Reference(STORAGE_ALIAS),
                Reference(f"{PREFIX}.file_injector"),
            ),
        ),
        ServiceRegistration(
            f"{PREFIX}.download_handler",
            class_name="DownloadHandler",
            arguments=(Reference(PROPERTY_MAPPING_FACTORY), Reference(STORAGE_ALIAS)),
        ),
    ]


def _twig() -> List[ServiceRegistration]:
    return [
        ServiceRegistration(
            f"{PREFIX}.twig.extension.uploader",
            class_name="UploaderExtension",
            arguments=(Reference(f"{PREFIX}.templating.helper.uploader_helper"),),
            tags=(Tag("twig.extension"),),
            public=False,
        ),
    ]


# Definition sets loaded for every configuration, in load order.
DEFINITION_SETS: Dict[str, Callable[[], List[ServiceRegistration]]] = {
    "adapter": _adapters,
    "listener": _listeners,
    "storage": _storage,
    "injector": _injector,
    "templating": _templating,
    "mapping": _metadata,
    "factory": _factory,
    "namer": _namers,
    "form": _form,
    "handler": _handlers,
}

OPTIONAL_SETS: Dict[str, Callable[[], List[ServiceRegistration]]] = {
    "gaufrette": _gaufrette,
    "flysystem": _flysystem,
    "twig": _twig,
}


def load_catalog(plan: WiringPlan, storage: str, twig: bool) -> List[str]:
    """Add the base services to the plan.

    Args:
        plan: Plan receiving the registrations
        storage: Literal storage name; ``gaufrette`` and ``flysystem`` pull
            in their own definition set
        twig: Whether the template extension is wanted

    Returns:
        Names of the definition sets that were loaded
    """
    to_load = list(DEFINITION_SETS)
    if storage in OPTIONAL_STORAGES:
        to_load.append(storage)
    if twig:
        to_load.append("twig")

    for name in to_load:
        factory = DEFINITION_SETS.get(name) or OPTIONAL_SETS[name]
        for registration in factory():
            plan.register(registration)
    # Default cache until the configured strategy re-points or removes it.
    plan.set_alias(METADATA_CACHE_ALIAS, FILE_CACHE, public=False)

    logger.debug(f"Loaded service definition sets: {', '.join(to_load)}")
    return to_load
