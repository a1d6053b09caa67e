"""Configuration schema for the uploader.

Defines the validated configuration tree with Pydantic. Raw configuration
(from YAML, JSON or plain dicts) is normalized here: driver names are
lower-cased, namer shorthands are expanded and defaults are filled in.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CACHE_DIR = "%kernel.cache_dir%/uploader"


class NamerConfig(BaseModel):
    """Namer service reference for a mapping.

    A bare string is accepted as shorthand for ``{"service": <string>}``.
    """

    model_config = ConfigDict(extra="forbid")

    service: Optional[str] = Field(None, description="Base namer service id")
    options: Dict[str, Any] = Field(default_factory=dict, description="Options passed to the namer")

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, str):
            return {"service": data}
        return data

    @field_validator("options", mode="before")
    @classmethod
    def empty_options(cls, v: Any) -> Any:
        return v or {}


class MappingConfig(BaseModel):
    """One named upload mapping."""

    model_config = ConfigDict(extra="forbid")

    uri_prefix: str = Field("/uploads", description="Public URI prefix of uploaded files")
    upload_destination: str = Field("web/uploads", description="Where the storage writes files")
    namer: NamerConfig = Field(default_factory=NamerConfig)
    directory_namer: NamerConfig = Field(default_factory=NamerConfig)
    delete_on_remove: bool = Field(True, description="Delete the file when the object is removed")
    delete_on_update: bool = Field(True, description="Delete the old file when a new one replaces it")
    inject_on_load: bool = Field(False, description="Inject a file object when the object is loaded")
    db_driver: Optional[str] = Field(None, description="Driver; falls back to the global one")

    @field_validator("db_driver", mode="before")
    @classmethod
    def normalize_driver(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class DirectoryConfig(BaseModel):
    """Explicit metadata directory."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1, description="Directory, or @Module/relative/path")
    namespace_prefix: str = Field("", description="Namespace the metadata files describe")


class FileCacheConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dir: str = Field(DEFAULT_CACHE_DIR, description="Metadata cache directory, may use %parameters%")


class MetadataConfig(BaseModel):
    """Metadata discovery and caching."""

    model_config = ConfigDict(extra="forbid")

    cache: str = Field("file", min_length=1, description="none, file or a cache service id")
    auto_detection: bool = Field(True, description="Scan installed modules for metadata")
    file_cache: FileCacheConfig = Field(default_factory=FileCacheConfig)
    directories: List[DirectoryConfig] = Field(default_factory=list)


class UploaderConfig(BaseModel):
    """Root uploader configuration."""

    model_config = ConfigDict(extra="forbid")

    db_driver: str = Field(..., min_length=1, description="Default driver for all mappings")
    default_filename_attribute_suffix: str = Field("_name")
    storage: str = Field("file_system", min_length=1, description="Storage name or @service.id")
    twig: bool = Field(True, description="Register the template extension")
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    mappings: Dict[str, MappingConfig] = Field(default_factory=dict)

    @field_validator("db_driver", mode="before")
    @classmethod
    def normalize_driver(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v
