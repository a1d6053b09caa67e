"""Tests for the in-memory service registry."""

import pytest

from uploadwire.di import Definition, Reference, ServiceRegistry
from uploadwire.errors import ErrorGroup, RegistryError


class TestDefinitions:
    """Test definition management."""

    def test_define_and_get(self):
        """Test basic definition storage."""
        registry = ServiceRegistry()
        definition = registry.define("storage", Definition("FileSystemStorage"))

        assert registry.has_definition("storage")
        assert registry.get_definition("storage") is definition
        assert registry.has("storage")

    def test_get_missing(self):
        """Test missing definitions raise."""
        with pytest.raises(RegistryError) as exc_info:
            ServiceRegistry().get_definition("missing")

        assert exc_info.value.service_id == "missing"

    def test_define_replaces_alias(self):
        """Test defining over an alias removes the alias."""
        registry = ServiceRegistry()
        registry.define("a", Definition())
        registry.alias("b", "a")
        registry.define("b", Definition())

        assert not registry.has_alias("b")
        assert registry.has_definition("b")

    def test_replace_argument(self):
        """Test replacing an existing argument."""
        registry = ServiceRegistry()
        registry.define("locator", Definition("FileLocator", arguments=[{}]))
        registry.replace_argument("locator", 0, {"App": "/app"})

        assert registry.get_definition("locator").arguments == [{"App": "/app"}]

    def test_replace_argument_out_of_range(self):
        """Test plain definitions cannot grow through replacement."""
        registry = ServiceRegistry()
        registry.define("locator", Definition("FileLocator"))

        with pytest.raises(RegistryError) as exc_info:
            registry.replace_argument("locator", 0, {})

        assert exc_info.value.error_code == "REGISTRY_ARGUMENT_OUT_OF_RANGE"

    def test_replace_argument_on_decorated(self):
        """Test decorated definitions record overrides."""
        registry = ServiceRegistry()
        registry.define("child", Definition(parent="parent"))
        registry.replace_argument("child", 1, "value")

        assert registry.get_definition("child").argument_overrides == {1: "value"}

    def test_find_tagged(self):
        """Test tag lookup."""
        registry = ServiceRegistry()
        registry.define("a", Definition())
        registry.define("b", Definition())
        registry.tag("a", "doctrine.event_subscriber", priority=50)

        assert registry.find_tagged("doctrine.event_subscriber") == {"a": [{"priority": 50}]}


class TestAliases:
    """Test alias management."""

    def test_alias_and_remove(self):
        """Test alias lifecycle."""
        registry = ServiceRegistry()
        registry.define("target", Definition())
        registry.alias("alias", "target", public=False)

        assert registry.get_alias("alias").target == "target"
        assert registry.get_alias("alias").public is False
        assert registry.resolve_alias("alias") == "target"

        registry.remove_alias("alias")
        registry.remove_alias("alias")
        assert not registry.has("alias")

    def test_alias_chain(self):
        """Test aliases of aliases resolve to the definition."""
        registry = ServiceRegistry()
        registry.define("c", Definition())
        registry.alias("b", "c")
        registry.alias("a", "b")

        assert registry.resolve_alias("a") == "c"

    def test_unresolved_alias(self):
        """Test dangling aliases are reported."""
        registry = ServiceRegistry()
        registry.alias("a", "nowhere")

        with pytest.raises(RegistryError) as exc_info:
            registry.resolve_alias("a")

        assert exc_info.value.error_code == "REGISTRY_UNRESOLVED_ALIAS"

    def test_circular_alias(self):
        """Test alias cycles are reported."""
        registry = ServiceRegistry()
        registry.alias("a", "b")
        registry.alias("b", "a")

        with pytest.raises(RegistryError) as exc_info:
            registry.resolve_alias("a")

        assert exc_info.value.error_code == "REGISTRY_CIRCULAR_REFERENCE"


class TestParameters:
    """Test parameter placeholders."""

    def test_whole_placeholder_keeps_type(self):
        """Test a lone placeholder returns the raw value."""
        registry = ServiceRegistry({"mappings": {"image": {}}})

        assert registry.resolve_value("%mappings%") == {"image": {}}

    def test_embedded_placeholder(self):
        """Test interpolation inside a string."""
        registry = ServiceRegistry({"kernel.cache_dir": "/var/cache"})

        assert registry.resolve_value("%kernel.cache_dir%/uploader") == "/var/cache/uploader"

    def test_nested_parameters(self):
        """Test parameters referencing parameters."""
        registry = ServiceRegistry({"root": "/srv", "cache": "%root%/cache"})

        assert registry.resolve_value(["%cache%", {"k": "%root%"}]) == ["/srv/cache", {"k": "/srv"}]

    def test_escaped_percent(self):
        """Test %% yields a literal percent sign."""
        assert ServiceRegistry().resolve_value("100%% sure") == "100% sure"

    def test_missing_parameter(self):
        """Test unknown placeholders raise."""
        with pytest.raises(RegistryError) as exc_info:
            ServiceRegistry().resolve_value("%kernel.cache_dir%/uploader")

        assert exc_info.value.error_code == "REGISTRY_MISSING_PARAMETER"

    def test_circular_parameter(self):
        """Test self-referencing parameters raise."""
        registry = ServiceRegistry({"a": "%b%", "b": "%a%"})

        with pytest.raises(RegistryError):
            registry.resolve_value("%a%")

    def test_non_string_parameter_in_string(self):
        """Test structured parameters cannot be interpolated."""
        registry = ServiceRegistry({"list": [1, 2]})

        with pytest.raises(RegistryError):
            registry.resolve_value("prefix-%list%")


class TestCompile:
    """Test definition flattening and compilation."""

    def make_registry(self):
        registry = ServiceRegistry()
        registry.define("adapter", Definition("Adapter"))
        template = Definition("UploadListener", arguments=[None, None, Reference("reader")], abstract=True)
        template.add_call("set_logger", "default")
        registry.define("listener.template", template)
        registry.define("reader", Definition("Reader"))
        child = Definition(parent="listener.template", argument_overrides={0: "image", 1: Reference("adapter")})
        child.add_tag("doctrine.event_subscriber", priority=0)
        registry.define("listener.image", child)
        return registry

    def test_resolve_definition(self):
        """Test decorated definitions inherit class, arguments and calls."""
        resolved = self.make_registry().resolve_definition("listener.image")

        assert resolved.class_name == "UploadListener"
        assert resolved.arguments == ["image", Reference("adapter"), Reference("reader")]
        assert resolved.calls == [("set_logger", ("default",))]
        assert resolved.parent is None
        assert resolved.abstract is False
        assert resolved.tags == {"doctrine.event_subscriber": [{"priority": 0}]}

    def test_tags_not_inherited(self):
        """Test parent tags stay on the parent."""
        registry = ServiceRegistry()
        registry.define("parent", Definition("P").add_tag("form.type"))
        registry.define("child", Definition(parent="parent"))

        assert registry.resolve_definition("child").tags == {}

    def test_compile_skips_abstract(self):
        """Test abstract templates are not compiled into services."""
        compiled = self.make_registry().compile()

        assert "listener.template" not in compiled
        assert compiled["listener.image"].arguments[0] == "image"

    def test_compile_missing_parent(self):
        """Test a decorated definition without parent fails."""
        registry = ServiceRegistry()
        registry.define("child", Definition(parent="missing"))

        with pytest.raises(RegistryError) as exc_info:
            registry.compile()

        assert exc_info.value.service_id == "missing"

    def test_compile_missing_reference(self):
        """Test references to unknown services fail."""
        registry = ServiceRegistry()
        registry.define("consumer", Definition(arguments=[Reference("missing")]))

        with pytest.raises(RegistryError) as exc_info:
            registry.compile()

        assert "consumer" in exc_info.value.message

    def test_compile_optional_reference(self):
        """Test optional references may be missing."""
        registry = ServiceRegistry()
        registry.define("consumer", Definition().add_call("set_cache", Reference("cache", optional=True)))

        assert "consumer" in registry.compile()

    def test_compile_groups_errors(self):
        """Test several problems are reported together."""
        registry = ServiceRegistry()
        registry.alias("storage", "missing.storage")
        registry.define("consumer", Definition(arguments=[Reference("missing")]))

        with pytest.raises(ErrorGroup) as exc_info:
            registry.compile()

        assert len(exc_info.value) == 2

    def test_circular_parents(self):
        """Test parent cycles are detected."""
        registry = ServiceRegistry()
        registry.define("a", Definition(parent="b"))
        registry.define("b", Definition(parent="a"))

        with pytest.raises(RegistryError):
            registry.resolve_definition("a")
