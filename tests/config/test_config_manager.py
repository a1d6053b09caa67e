"""Tests for hierarchical configuration management."""

import yaml

from uploadwire.config import ConfigurationManager


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestConfigurationManager:
    """Test suite for ConfigurationManager."""

    def test_project_then_explicit_file(self, tmp_path):
        """Test the explicit file overrides the project file."""
        project = write_yaml(tmp_path / "uploader.yaml", {"uploader": {"db_driver": "orm", "twig": False}})
        explicit = write_yaml(tmp_path / "prod.yaml", {"storage": "@s3.storage"})

        manager = ConfigurationManager(project_config_path=project, config_path=explicit, environ={})
        config = manager.load_configuration()

        assert config.db_driver == "orm"
        assert config.twig is False
        assert config.storage == "@s3.storage"

    def test_environment_overrides(self, tmp_path):
        """Test UPLOADWIRE_ variables with nested delimiter and coercion."""
        project = write_yaml(tmp_path / "uploader.yaml", {"db_driver": "orm"})
        environ = {
            "UPLOADWIRE_METADATA__CACHE": "none",
            "UPLOADWIRE_METADATA__AUTO_DETECTION": "false",
            "UPLOADWIRE_DB_DRIVER": "mongodb",
            "OTHER_VARIABLE": "ignored",
        }

        manager = ConfigurationManager(project_config_path=project, environ=environ)
        config = manager.load_configuration()

        assert config.db_driver == "mongodb"
        assert config.metadata.cache == "none"
        assert config.metadata.auto_detection is False

    def test_inline_overrides_win(self, tmp_path):
        """Test overrides passed by the caller are applied last."""
        manager = ConfigurationManager(
            project_config_path=tmp_path / "missing.yaml",
            overrides={"db_driver": "phpcr"},
            environ={"UPLOADWIRE_DB_DRIVER": "orm"},
        )

        assert manager.load_configuration().db_driver == "phpcr"

    def test_configuration_is_cached(self, tmp_path):
        """Test repeated loads return the same object until reload."""
        project = write_yaml(tmp_path / "uploader.yaml", {"db_driver": "orm"})
        manager = ConfigurationManager(project_config_path=project, environ={})

        first = manager.load_configuration()
        assert manager.load_configuration() is first

        write_yaml(project, {"db_driver": "propel"})
        assert manager.reload().db_driver == "propel"

    def test_get_config(self, tmp_path):
        """Test dotted lookups on the validated configuration."""
        project = write_yaml(tmp_path / "uploader.yaml", {"db_driver": "orm"})
        manager = ConfigurationManager(project_config_path=project, environ={})

        assert manager.get_config("metadata.cache") == "file"
        assert manager.get_config("metadata.unknown", "fallback") == "fallback"

    def test_convert_env_value(self, tmp_path):
        """Test type coercion of environment values."""
        manager = ConfigurationManager(project_config_path=tmp_path / "x.yaml", environ={})

        assert manager._convert_env_value("TRUE") is True
        assert manager._convert_env_value("42") == 42
        assert manager._convert_env_value("0.5") == 0.5
        assert manager._convert_env_value("orm") == "orm"
