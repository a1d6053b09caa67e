"""Pytest configuration and shared fixtures for all tests."""

# Add project root to path
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from uploadwire.di.registry import ServiceRegistry
from uploadwire.modules import METADATA_SUBDIRECTORY, ModuleTable


@pytest.fixture
def cache_dir(tmp_path):
    """Kernel cache directory (not created)."""
    return tmp_path / "var" / "cache"


@pytest.fixture
def registry(tmp_path, cache_dir):
    """Registry seeded with the kernel parameters a host would provide."""
    return ServiceRegistry({
        "kernel.project_dir": tmp_path.as_posix(),
        "kernel.cache_dir": cache_dir.as_posix(),
    })


@pytest.fixture
def modules(tmp_path):
    """Two installed modules; only AcmeMedia ships uploader metadata."""
    media = tmp_path / "modules" / "acme_media"
    blog = tmp_path / "modules" / "acme_blog"
    (media / METADATA_SUBDIRECTORY).mkdir(parents=True)
    (blog / "entities").mkdir(parents=True)
    return ModuleTable.from_paths(
        {"AcmeMedia": media, "AcmeBlog": blog},
        namespaces={"AcmeMedia": "Acme\\Media", "AcmeBlog": "Acme\\Blog"},
    )


@pytest.fixture
def minimal_config():
    """Smallest valid raw configuration."""
    return {"db_driver": "orm"}


@pytest.fixture
def example_config():
    """Two mappings, one relying on the default driver."""
    return {
        "db_driver": "mongodb",
        "mappings": {
            "avatar": {
                "db_driver": "orm",
                "inject_on_load": False,
                "delete_on_update": True,
                "delete_on_remove": False,
            },
            "doc": {
                "db_driver": "",
                "inject_on_load": False,
                "delete_on_update": False,
                "delete_on_remove": True,
            },
        },
    }
