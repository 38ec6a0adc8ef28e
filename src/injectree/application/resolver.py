import logging
from typing import Any, List, Tuple

from injectree.application.circular_detector import CircularDependencyDetector
from injectree.application.registry import DependencyRegistry
from injectree.domain import (
    ConstructionContext,
    FactoryError,
    FactoryKind,
    ILifetimeManager,
    IResolver,
    Registration,
    TreeError,
    UnregisteredDependencyError,
)

logger = logging.getLogger(__name__)


class DependencyResolver(IResolver):
    """Resolves keys by recursively constructing their declared dependencies.

    Resolution is depth-first. Dependencies are resolved in declared order and
    passed positionally to the factory. Singletons are cached by the lifetime
    manager only after their whole subtree has been built, so a cycle through
    a singleton is still caught by the path check.

    Attributes:
        _registry: Registration records.
        _lifetime_manager: Resolved cache for singleton keys.
        _circular_detector: Tracks the current resolution path.
    """

    def __init__(
        self,
        registry: DependencyRegistry,
        lifetime_manager: ILifetimeManager,
        circular_detector: CircularDependencyDetector,
    ) -> None:
        self._registry = registry
        self._lifetime_manager = lifetime_manager
        self._circular_detector = circular_detector

    def resolve(self, key: str) -> Any:
        """Resolve ``key`` and return its value.

        Args:
            key: The key to resolve.

        Returns:
            The resolved value.

        Raises:
            UnregisteredDependencyError: If ``key`` or one of its dependencies is not registered.
            CircularDependencyError: If ``key`` is already on the resolution path.
            FactoryError: If a factory raises an error of its own.

        Example:
            >>> registry.add(Registration(key="greeting", value="hi", is_constant=True))
            >>> resolver.resolve("greeting")
            'hi'
        """
        registration = self._registry.get(key)
        if registration is None:
            raise UnregisteredDependencyError(key, self._circular_detector.path_to(key))

        self._circular_detector.push(key)

        try:
            logger.debug("Resolving %s", key)
            return self._lifetime_manager.get_or_create(registration, lambda: self._build(registration))
        finally:
            self._circular_detector.pop()

    def _build(self, registration: Registration) -> Tuple[Any, Any]:
        """Build a fresh ``(context, value)`` pair for the registration."""
        key = registration.key

        if registration.is_constant:
            logger.debug(" - %s resolved as constant", key)
            return None, registration.value

        dependencies = list(registration.dependencies)
        logger.debug(" - %s depends on %s", key, dependencies)

        # Declared order matters: values are passed positionally.
        values = [self.resolve(dependency) for dependency in dependencies]

        logger.debug(" - %s factory being invoked with dependencies %s", key, dependencies)
        return self._invoke(registration, values)

    def _invoke(self, registration: Registration, values: List[Any]) -> Tuple[Any, Any]:
        factory = registration.value

        try:
            if registration.kind == FactoryKind.CONTEXT:
                context = ConstructionContext()
                factory(context, *values)
                return context, context

            value = factory(*values)
            return value, value

        except TreeError:
            raise
        except Exception as e:
            raise FactoryError(registration.key, self._circular_detector.path, e) from e
