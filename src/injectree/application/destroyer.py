"""Application layer - Cascading teardown of resolved instances."""

import logging
from typing import Set

from injectree.application.registry import DependencyRegistry
from injectree.domain import IDestroyer, IDisposable, ILifetimeManager

logger = logging.getLogger(__name__)


class DependencyDestroyer(IDestroyer):
    """Tears down cached resolutions, dependents first.

    A dependent's cached value was built from the old resolution of the key it
    depends on, so every dependent is destroyed before the key itself. The
    cascade follows dependents through keys that are not cached themselves,
    since a cached singleton may sit above a non-singleton that was built from
    the destroyed key. Registrations are left in place; the next resolution
    rebuilds from scratch.

    Attributes:
        _registry: Registration records, used to find dependents.
        _lifetime_manager: Resolved cache to evict from.
    """

    def __init__(self, registry: DependencyRegistry, lifetime_manager: ILifetimeManager) -> None:
        self._registry = registry
        self._lifetime_manager = lifetime_manager

    def destroy(self, key: str) -> None:
        """Destroy the cached resolution of ``key`` and of its dependents.

        A key with no cached resolution is a no-op.

        Args:
            key: The key to destroy.
        """
        if not self._lifetime_manager.is_resolved(key):
            logger.debug("%s is not in resolved cache and does not need to be destroyed", key)
            return

        self._destroy(key, {key})

    def destroy_dependents(self, key: str) -> None:
        """Destroy every cached resolution built on top of ``key``.

        ``key`` itself is left alone, whether cached or not.

        Args:
            key: The key whose dependents are destroyed.
        """
        self._destroy_dependents(key, {key})

    def _destroy(self, key: str, visited: Set[str]) -> None:
        self._destroy_dependents(key, visited)

        logger.debug("Destroying %s and clearing from resolved cache", key)
        entry = self._lifetime_manager.evict(key)

        if entry is not None and isinstance(entry.context, IDisposable):
            entry.context.dispose()

    def _destroy_dependents(self, key: str, visited: Set[str]) -> None:
        dependents = [name for name in self._registry.dependents_of(key) if name not in visited]
        if dependents:
            logger.debug("%s depend on %s and must be destroyed", dependents, key)

        for dependent in dependents:
            if dependent in visited:
                continue
            visited.add(dependent)
            if self._lifetime_manager.is_resolved(dependent):
                self._destroy(dependent, visited)
            else:
                self._destroy_dependents(dependent, visited)
