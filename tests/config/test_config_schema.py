"""Tests for configuration schema and processing."""

import pytest

from uploadwire.config import (
    ConfigurationValidator,
    UploaderConfig,
    process_configuration,
)
from uploadwire.config.schema import DEFAULT_CACHE_DIR
from uploadwire.errors import ConfigurationError


class TestUploaderConfig:
    """Test schema defaults and normalization."""

    def test_defaults(self, minimal_config):
        """Test every optional setting gets its default."""
        config = UploaderConfig.model_validate(minimal_config)

        assert config.db_driver == "orm"
        assert config.storage == "file_system"
        assert config.twig is True
        assert config.default_filename_attribute_suffix == "_name"
        assert config.metadata.cache == "file"
        assert config.metadata.auto_detection is True
        assert config.metadata.file_cache.dir == DEFAULT_CACHE_DIR
        assert config.metadata.directories == []
        assert config.mappings == {}

    def test_mapping_defaults(self):
        """Test mapping behaviour flag defaults."""
        config = UploaderConfig.model_validate({"db_driver": "orm", "mappings": {"image": {}}})
        mapping = config.mappings["image"]

        assert mapping.db_driver is None
        assert mapping.inject_on_load is False
        assert mapping.delete_on_update is True
        assert mapping.delete_on_remove is True
        assert mapping.uri_prefix == "/uploads"
        assert mapping.namer.service is None

    def test_driver_is_lowercased(self):
        """Test driver normalization."""
        config = UploaderConfig.model_validate({
            "db_driver": "ORM",
            "mappings": {"image": {"db_driver": " MongoDB "}},
        })

        assert config.db_driver == "orm"
        assert config.mappings["image"].db_driver == "mongodb"

    def test_namer_shorthand(self):
        """Test a bare string names the namer service."""
        config = UploaderConfig.model_validate({
            "db_driver": "orm",
            "mappings": {"image": {"namer": "uploader.namer_uniqid", "directory_namer": None}},
        })

        assert config.mappings["image"].namer.service == "uploader.namer_uniqid"
        assert config.mappings["image"].namer.options == {}
        assert config.mappings["image"].directory_namer.service is None

    def test_namer_options(self):
        """Test namer options are kept."""
        config = UploaderConfig.model_validate({
            "db_driver": "orm",
            "mappings": {"image": {"namer": {"service": "uploader.namer_property", "options": {"property": "slug"}}}},
        })

        assert config.mappings["image"].namer.options == {"property": "slug"}


class TestConfigurationValidator:
    """Test validation errors."""

    def test_missing_driver(self):
        """Test the global driver is required."""
        validator = ConfigurationValidator()

        with pytest.raises(ConfigurationError) as exc_info:
            validator.validate({})

        assert exc_info.value.error_code == "CONFIG_INVALID"
        assert any(error.startswith("db_driver") for error in validator.validation_errors)

    def test_unknown_key_rejected(self):
        """Test unknown options are reported with their location."""
        validator = ConfigurationValidator()

        with pytest.raises(ConfigurationError) as exc_info:
            validator.validate({"db_driver": "orm", "mappings": {"image": {"delete_on_upload": True}}})

        assert "mappings.image.delete_on_upload" in exc_info.value.message

    def test_empty_metadata_path_rejected(self):
        """Test metadata directories need a path."""
        with pytest.raises(ConfigurationError):
            ConfigurationValidator().validate({
                "db_driver": "orm",
                "metadata": {"directories": [{"path": ""}]},
            })


class TestProcessConfiguration:
    """Test merging of several configuration trees."""

    def test_later_configs_win(self):
        """Test deep merge order."""
        config = process_configuration([
            {"db_driver": "orm", "metadata": {"cache": "file", "auto_detection": False}},
            {"metadata": {"cache": "none"}},
        ])

        assert config.metadata.cache == "none"
        assert config.metadata.auto_detection is False

    def test_root_key_unwrapped(self):
        """Test configuration nested under the uploader key."""
        config = process_configuration([{"uploader": {"db_driver": "phpcr"}}])

        assert config.db_driver == "phpcr"
