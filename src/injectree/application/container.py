import logging
from typing import Any, Dict, List, Mapping, Optional

from injectree.application.circular_detector import CircularDependencyDetector
from injectree.application.destroyer import DependencyDestroyer
from injectree.application.lifetime_manager import LifetimeManager
from injectree.application.registry import DependencyRegistry, find_dependencies
from injectree.application.resolver import DependencyResolver
from injectree.domain import (
    IContainer,
    IDestroyer,
    ILifetimeManager,
    IResolver,
    InvalidKeyError,
    NotAFactoryError,
    Registration,
    RegistrationOptions,
)

logger = logging.getLogger(__name__)


class DependencyTree(IContainer):
    """Main dependency tree.

    Orchestrates registration, resolution and destruction of keyed
    dependencies. Each tree owns its registry and resolved cache; nothing is
    shared between trees.

    Attributes:
        _registry: Registration records in registration order.
        _lifetime_manager: Resolved cache for singleton keys.
        _circular_detector: Tracks the current resolution path.
        _resolver: Builds values from the registry.
        _destroyer: Tears cached values down, dependents first.

    Example:
        >>> tree = DependencyTree()
        >>> tree.singleton("errorParser", DefaultErrorParser)
        >>> tree.register("errorPlugin", ErrorPlugin)  # ErrorPlugin(errorParser)
        >>> first, second = tree.resolve("errorPlugin"), tree.resolve("errorPlugin")
        >>> first is not second and first.errorParser is second.errorParser
        True
    """

    def __init__(self, registry: Optional[DependencyRegistry] = None) -> None:
        """Initialize the tree with an empty, or the given, registry.

        Args:
            registry: Optional registry to start from. It is used as-is, not copied.
        """
        self._registry = registry if registry is not None else DependencyRegistry()
        self._lifetime_manager: ILifetimeManager = LifetimeManager()
        self._circular_detector = CircularDependencyDetector()
        self._resolver: IResolver = DependencyResolver(
            self._registry,
            self._lifetime_manager,
            self._circular_detector,
        )
        self._destroyer: IDestroyer = DependencyDestroyer(self._registry, self._lifetime_manager)

    def register(self, key: Any, value: Any = None, options: Any = None) -> "DependencyTree":
        """Register a dependency, or many dependencies at once.

        Unless registered as a constant, the value must be a factory: a callable
        invoked at resolution time with its resolved dependencies, in order.

        Args:
            key: Dependency key, or a mapping of keys to values. In the mapping
                form the second argument is taken as the options when ``options``
                is omitted.
            value: Constant payload or factory.
            options: ``RegistrationOptions`` or an equivalent mapping.

        Returns:
            This tree, allowing further chaining.

        Raises:
            InvalidKeyError: If a key is not a string.
            InvalidRegistrationOptionsError: If options are not a valid mapping.
            NotAFactoryError: If a non-constant value is not callable.

        Example:
            >>> tree.register({"config": load_config}, {"singleton": True})
            >>> tree.register("parser", make_parser, {"dependencies": ["config"], "aggregate_on": "services"})
        """
        if isinstance(key, Mapping):
            if options is None:
                options = value
            opts = RegistrationOptions.coerce(options)
            for k, v in key.items():
                self._register(k, v, opts)
            return self

        self._register(key, value, RegistrationOptions.coerce(options))
        return self

    def constant(self, key: Any, value: Any = None, options: Any = None) -> "DependencyTree":
        """Register a constant, injected as-is and never invoked."""
        return self._register_forced(key, value, options, constant=True)

    def singleton(self, key: Any, value: Any = None, options: Any = None) -> "DependencyTree":
        """Register a dependency whose first resolution is cached and reused."""
        return self._register_forced(key, value, options, singleton=True)

    def _register_forced(self, key: Any, value: Any, options: Any, **forced: bool) -> "DependencyTree":
        if isinstance(key, Mapping) and options is None:
            value, options = None, value
        return self.register(key, value, RegistrationOptions.coerce(options).with_overrides(**forced))

    def _register(self, key: str, value: Any, opts: RegistrationOptions) -> None:
        """Validate and install a single registration.

        Raises:
            InvalidKeyError: If the key is not a string.
            NotAFactoryError: If a non-constant value is not callable.
        """
        if not isinstance(key, str):
            raise InvalidKeyError(key)

        logger.debug("Registering %s as %s", key, "constant" if opts.constant else "factory")

        dependencies: List[str] = []
        if not opts.constant:
            if not callable(value):
                raise NotAFactoryError(key)
            if opts.dependencies is not None:
                dependencies = list(opts.dependencies)
            else:
                dependencies = find_dependencies(key, value, opts.kind)

        # Allow overriding of registered dependencies
        if key in self._registry:
            logger.warning(
                "Naming conflict encountered on %s. Overwriting registered dependency with new definition.",
                key,
            )
            self._invalidate(key)

        self._registry.add(
            Registration(
                key=key,
                value=value,
                dependencies=dependencies,
                is_constant=opts.constant,
                is_singleton=opts.singleton,
                kind=opts.kind,
            )
        )

        for aggregate_key in opts.aggregate_on:
            self._aggregate(aggregate_key, key)

    def _aggregate(self, aggregate_key: str, key: str) -> None:
        aggregator = self._registry.get(aggregate_key)
        if aggregator is None:
            aggregator = self._registry.add_aggregator(aggregate_key)

        if key not in aggregator.dependencies:
            # The roll-up changes shape, so a cached roll-up is stale.
            self._invalidate(aggregate_key)
            aggregator.dependencies.append(key)

    def _invalidate(self, key: str) -> None:
        """Destroy everything built from the current definition of ``key``.

        Dependents are destroyed even when ``key`` itself is not cached, since
        a cached singleton may hold a value built from it.
        """
        self._destroyer.destroy_dependents(key)
        self._destroyer.destroy(key)

    def is_registered(self, key: str) -> bool:
        """Return whether ``key`` has a registration."""
        return key in self._registry

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def keys(self) -> List[str]:
        """Return registered keys in registration order."""
        return self._registry.keys()

    def resolve(self, key: Optional[str] = None) -> Any:
        """Resolve one dependency, or every registered dependency.

        Args:
            key: The key to resolve. When omitted, every registered key is
                resolved in registration order.

        Returns:
            The resolved value, or a dict of every key to its resolved value.

        Raises:
            UnregisteredDependencyError: If the key or one of its dependencies is not registered.
            CircularDependencyError: If a circular dependency is detected.
            FactoryError: If a factory raises an error of its own.

        Example:
            >>> plugin = tree.resolve("errorPlugin")
            >>> everything = tree.resolve()
        """
        if key is None:
            logger.debug("Beginning resolution for all dependencies")
            return {k: self._resolver.resolve(k) for k in self._registry.keys()}

        logger.debug("Beginning resolution for %s", key)
        return self._resolver.resolve(key)

    def destroy(self, key: Optional[str] = None) -> None:
        """Clear the resolved state of one or every cached dependency.

        Anything depending on a destroyed key is destroyed first. Registrations
        are kept, so the next resolution rebuilds from scratch. Destroying a key
        that has no cached resolution does nothing.

        Args:
            key: The key to destroy. When omitted, every cached key is destroyed.
        """
        if key is None:
            logger.debug("Destroying tree")
            for k in self._lifetime_manager.resolved_keys():
                self._destroyer.destroy(k)
            return

        logger.debug("Beginning destroy for %s", key)
        self._destroyer.destroy(key)

    def copy_registry(self) -> DependencyRegistry:
        """Get a copy of the registry for derived trees.

        Returns:
            Copy of the current registry.
        """
        return self._registry.copy()

    def get_resolved_copy(self) -> Dict[str, Any]:
        """Return a mapping of every cached key to its cached value."""
        return {key: entry.value for key, entry in self._lifetime_manager.get_cache_copy().items()}

    def clear(self) -> None:
        """Destroy every cached resolution, then drop all registrations.

        Useful for testing or resetting the tree state.
        """
        self.destroy()
        self._registry.clear()
        self._circular_detector.clear()
