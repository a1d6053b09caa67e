"""Tests for metadata cache strategy resolution."""

import pytest

from uploadwire.di import RemoveAlias, ReplaceArgument, SetAlias, WiringPlan
from uploadwire.di.catalog import FILE_CACHE, METADATA_CACHE_ALIAS
from uploadwire.errors import ConfigurationError
from uploadwire.resolution import (
    ExternalCache,
    FileCache,
    NoCache,
    ensure_cache_directory,
    register_cache_strategy,
)


class TestRegisterCacheStrategy:
    """Test suite for register_cache_strategy."""

    def test_none_removes_alias(self, registry):
        """Test no cache alias stays bound."""
        plan = WiringPlan(base=registry)
        plan.set_alias(METADATA_CACHE_ALIAS, FILE_CACHE)

        register_cache_strategy(plan, NoCache(), registry.resolve_value)

        assert list(plan)[-1] == RemoveAlias(METADATA_CACHE_ALIAS)
        assert plan.alias_target(METADATA_CACHE_ALIAS) is None

    def test_file_creates_directory(self, registry, cache_dir):
        """Test the resolved directory exists after resolution."""
        plan = WiringPlan(base=registry)

        register_cache_strategy(plan, FileCache("%kernel.cache_dir%/uploader"), registry.resolve_value)

        assert (cache_dir / "uploader").is_dir()
        # the argument keeps the placeholder for the host to resolve
        assert list(plan) == [ReplaceArgument(FILE_CACHE, 0, "%kernel.cache_dir%/uploader")]

    def test_file_is_idempotent(self, registry, cache_dir):
        """Test resolving twice with an existing directory succeeds."""
        strategy = FileCache("%kernel.cache_dir%/uploader")

        register_cache_strategy(WiringPlan(base=registry), strategy, registry.resolve_value)
        register_cache_strategy(WiringPlan(base=registry), strategy, registry.resolve_value)

        assert (cache_dir / "uploader").is_dir()

    def test_external_reference(self, registry):
        """Test a service id becomes a private alias."""
        plan = WiringPlan(base=registry)

        register_cache_strategy(plan, ExternalCache("app.metadata_cache"), registry.resolve_value)

        assert list(plan) == [SetAlias(METADATA_CACHE_ALIAS, "app.metadata_cache", public=False)]


class TestEnsureCacheDirectory:
    """Test suite for ensure_cache_directory."""

    def test_creates_nested(self, tmp_path):
        """Test recursive creation."""
        target = tmp_path / "a" / "b" / "c"

        assert ensure_cache_directory(str(target)) == target
        assert target.is_dir()

    def test_creation_failure(self, tmp_path):
        """Test a file in the way makes creation fail."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ConfigurationError) as exc_info:
            ensure_cache_directory(str(blocker / "cache"))

        assert "Could not create cache directory" in exc_info.value.message
        assert isinstance(exc_info.value.cause, OSError)
