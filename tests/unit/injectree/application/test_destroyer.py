"""Unit tests for DependencyDestroyer."""

import pytest

from injectree.application.circular_detector import CircularDependencyDetector
from injectree.application.destroyer import DependencyDestroyer
from injectree.application.lifetime_manager import LifetimeManager
from injectree.application.registry import DependencyRegistry
from injectree.application.resolver import DependencyResolver
from injectree.domain import ConstructionContext, FactoryKind, IDestroyer, Registration


class Disposable:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def dispose(self):
        self.log.append(self.name)


@pytest.fixture
def registry():
    return DependencyRegistry()


@pytest.fixture
def lifetime_manager():
    return LifetimeManager()


@pytest.fixture
def resolver(registry, lifetime_manager):
    return DependencyResolver(registry, lifetime_manager, CircularDependencyDetector())


@pytest.fixture
def destroyer(registry, lifetime_manager):
    return DependencyDestroyer(registry, lifetime_manager)


@pytest.fixture
def teardown_log():
    return []


@pytest.fixture
def chain(registry, resolver, teardown_log):
    """parser <- plugin <- reporter, all singletons and disposable."""
    registry.add(Registration(key="parser", value=lambda: Disposable("parser", teardown_log), is_singleton=True))
    registry.add(
        Registration(
            key="plugin",
            value=lambda parser: Disposable("plugin", teardown_log),
            dependencies=["parser"],
            is_singleton=True,
        )
    )
    registry.add(
        Registration(
            key="reporter",
            value=lambda plugin: Disposable("reporter", teardown_log),
            dependencies=["plugin"],
            is_singleton=True,
        )
    )
    resolver.resolve("reporter")


class TestDestroyer:
    """Test cases for DependencyDestroyer."""

    def test_implements_interface(self, destroyer):
        """Test that DependencyDestroyer implements IDestroyer."""
        assert isinstance(destroyer, IDestroyer)

    def test_unresolved_key_is_noop(self, registry, lifetime_manager, destroyer):
        """Test that destroying an uncached key changes nothing."""
        registry.add(Registration(key="parser", value=object, is_singleton=True))

        destroyer.destroy("parser")
        destroyer.destroy("never-registered")

        assert lifetime_manager.resolved_keys() == []
        assert "parser" in registry

    def test_destroy_evicts_but_keeps_registration(self, registry, lifetime_manager, resolver, destroyer):
        """Test that destroy clears the cache entry only."""
        registry.add(Registration(key="parser", value=object, is_singleton=True))
        first = resolver.resolve("parser")

        destroyer.destroy("parser")

        assert not lifetime_manager.is_resolved("parser")
        assert "parser" in registry
        assert resolver.resolve("parser") is not first

    def test_dependents_destroyed_first(self, chain, lifetime_manager, destroyer, teardown_log):
        """Test that the cascade tears dependents down before the key."""
        destroyer.destroy("parser")

        assert teardown_log == ["reporter", "plugin", "parser"]
        assert lifetime_manager.resolved_keys() == []

    def test_destroy_leaves_dependencies_alone(self, chain, lifetime_manager, destroyer, teardown_log):
        """Test that keys the destroyed key depends on stay cached."""
        destroyer.destroy("plugin")

        assert teardown_log == ["reporter", "plugin"]
        assert lifetime_manager.resolved_keys() == ["parser"]

    def test_uncached_dependent_is_skipped(self, registry, lifetime_manager, resolver, destroyer):
        """Test that non-singleton dependents have nothing to tear down."""
        registry.add(Registration(key="parser", value=object, is_singleton=True))
        registry.add(Registration(key="plugin", value=lambda parser: object(), dependencies=["parser"]))
        resolver.resolve("plugin")

        destroyer.destroy("parser")

        assert lifetime_manager.resolved_keys() == []

    def test_cascade_passes_through_uncached_dependents(self, registry, lifetime_manager, resolver, destroyer, teardown_log):
        """Test that singletons above a non-singleton middle are destroyed too."""
        registry.add(Registration(key="parser", value=lambda: Disposable("parser", teardown_log), is_singleton=True))
        registry.add(Registration(key="plugin", value=lambda parser: object(), dependencies=["parser"]))
        registry.add(
            Registration(
                key="reporter",
                value=lambda plugin: Disposable("reporter", teardown_log),
                dependencies=["plugin"],
                is_singleton=True,
            )
        )
        resolver.resolve("reporter")

        destroyer.destroy("parser")

        assert teardown_log == ["reporter", "parser"]
        assert lifetime_manager.resolved_keys() == []

    def test_destroy_dependents_keeps_key_cached(self, chain, lifetime_manager, destroyer, teardown_log):
        """Test that only the dependents of the key are torn down."""
        destroyer.destroy_dependents("parser")

        assert teardown_log == ["reporter", "plugin"]
        assert lifetime_manager.resolved_keys() == ["parser"]

    def test_destroy_dependents_of_uncached_key(self, registry, lifetime_manager, resolver, destroyer, teardown_log):
        """Test that dependents are destroyed even when the key itself is not cached."""
        registry.add(Registration(key="config", value=lambda: "debug"))
        registry.add(
            Registration(
                key="service",
                value=lambda config: Disposable("service", teardown_log),
                dependencies=["config"],
                is_singleton=True,
            )
        )
        resolver.resolve("service")

        destroyer.destroy_dependents("config")

        assert teardown_log == ["service"]
        assert lifetime_manager.resolved_keys() == []

    def test_value_without_teardown_is_just_cleared(self, registry, lifetime_manager, resolver, destroyer):
        """Test that values without dispose are evicted silently."""
        registry.add(Registration(key="config", value={"a": 1}, is_constant=True, is_singleton=True))
        resolver.resolve("config")

        destroyer.destroy("config")

        assert not lifetime_manager.is_resolved("config")

    def test_context_callbacks_fire_on_destroy(self, registry, resolver, destroyer):
        """Test that context factory subscribers are notified once."""
        calls = []

        def build(ctx):
            ctx.on_destroy(lambda: calls.append("destroyed"))

        registry.add(Registration(key="plugin", value=build, kind=FactoryKind.CONTEXT, is_singleton=True))
        plugin = resolver.resolve("plugin")

        destroyer.destroy("plugin")
        destroyer.destroy("plugin")

        assert isinstance(plugin, ConstructionContext)
        assert calls == ["destroyed"]

    def test_teardown_error_propagates_after_eviction(self, registry, lifetime_manager, resolver, destroyer):
        """Test that a failing hook surfaces while the entry is already gone."""

        class Broken:
            def dispose(self):
                raise RuntimeError("teardown failed")

        registry.add(Registration(key="broken", value=Broken, is_singleton=True))
        resolver.resolve("broken")

        with pytest.raises(RuntimeError, match="teardown failed"):
            destroyer.destroy("broken")

        assert not lifetime_manager.is_resolved("broken")

    def test_cyclic_dependents_terminate(self, registry, lifetime_manager, destroyer):
        """Test that a cycle among cached entries is torn down once each."""
        teardown_log = []
        registry.add(Registration(key="a", value=object, dependencies=["b"], is_singleton=True))
        registry.add(Registration(key="b", value=object, dependencies=["a"], is_singleton=True))
        for key in ["a", "b"]:
            lifetime_manager.get_or_create(
                registry.get(key),
                lambda key=key: (Disposable(key, teardown_log), key),
            )

        destroyer.destroy("a")

        assert teardown_log == ["b", "a"]
        assert lifetime_manager.resolved_keys() == []
