from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from injectree.domain.models import Registration, ResolvedEntry


class IDisposable(ABC):
    """Optional teardown capability of a resolved instance.

    Any object with a callable ``dispose`` attribute is considered disposable,
    whether or not it subclasses this interface.
    """

    @abstractmethod
    def dispose(self) -> None:
        """Release the instance. Called once when it is destroyed."""

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is IDisposable:
            return callable(getattr(subclass, "dispose", None))
        return NotImplemented


class IContainer(ABC):
    """Abstract interface for dependency tree operations."""

    @abstractmethod
    def register(self, key: Any, value: Any = None, options: Any = None) -> "IContainer":
        """Register one dependency, or many when ``key`` is a mapping.

        Args:
            key: Dependency key, or a mapping of keys to values.
            value: Constant payload or factory.
            options: Registration options.
        """

    @abstractmethod
    def constant(self, key: Any, value: Any = None, options: Any = None) -> "IContainer":
        """Register a constant."""

    @abstractmethod
    def singleton(self, key: Any, value: Any = None, options: Any = None) -> "IContainer":
        """Register a singleton."""

    @abstractmethod
    def is_registered(self, key: str) -> bool:
        """Return whether ``key`` has a registration."""

    @abstractmethod
    def resolve(self, key: Optional[str] = None) -> Any:
        """Resolve one key, or every registered key when ``key`` is omitted."""

    @abstractmethod
    def destroy(self, key: Optional[str] = None) -> None:
        """Tear down one cached resolution, or all of them when ``key`` is omitted."""


class IResolver(ABC):
    """Abstract interface for dependency resolution."""

    @abstractmethod
    def resolve(self, key: str) -> Any:
        """Resolve ``key`` and its dependency graph.

        Raises:
            UnregisteredDependencyError: If a key on the path is not registered.
            CircularDependencyError: If a key appears twice on the path.
        """


class IDestroyer(ABC):
    """Abstract interface for cascading teardown of resolved instances."""

    @abstractmethod
    def destroy(self, key: str) -> None:
        """Destroy the cached resolution of ``key`` and of everything depending on it."""

    @abstractmethod
    def destroy_dependents(self, key: str) -> None:
        """Destroy the cached resolutions of everything depending on ``key``."""


class ILifetimeManager(ABC):
    """Abstract interface for the resolved-instance cache."""

    @abstractmethod
    def get_or_create(
        self,
        registration: Registration,
        factory: Callable[[], Tuple[Any, Any]],
    ) -> Any:
        """Return the cached value or build one through ``factory``.

        Args:
            registration: The record being resolved.
            factory: Callable returning a ``(context, value)`` pair.
        """

    @abstractmethod
    def is_resolved(self, key: str) -> bool:
        """Return whether ``key`` has a cached resolution."""

    @abstractmethod
    def evict(self, key: str) -> Optional[ResolvedEntry]:
        """Remove and return the cached resolution of ``key``."""

    @abstractmethod
    def resolved_keys(self) -> List[str]:
        """Return the keys currently cached."""

    @abstractmethod
    def get_cache_copy(self) -> Dict[str, ResolvedEntry]:
        """Return a shallow copy of the resolved cache."""
