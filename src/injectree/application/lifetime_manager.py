import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from injectree.domain import ILifetimeManager, Registration, ResolvedEntry

logger = logging.getLogger(__name__)


class LifetimeManager(ILifetimeManager):
    """Owns the resolved cache of singleton keys.

    Non-singleton registrations are built on every call and never cached.
    Singleton creation is serialized by a reentrant lock, so concurrent
    resolutions build each singleton once while nested singletons built by
    the same thread re-enter freely.

    Attributes:
        _resolved: Cached resolutions, keyed by dependency key.
        _lock: Guards singleton lookup and creation.
    """

    def __init__(self) -> None:
        self._resolved: Dict[str, ResolvedEntry] = {}
        self._lock = threading.RLock()

    def get_or_create(
        self,
        registration: Registration,
        factory: Callable[[], Tuple[Any, Any]],
    ) -> Any:
        """Return the cached value or build a new one based on the registration.

        Args:
            registration: The record being resolved.
            factory: Builds the value and returns a ``(context, value)`` pair.

        Returns:
            - Singleton: the cached value, or a freshly built value that is cached
              once ``factory`` has returned.
            - Otherwise: a freshly built value.
        """
        key = registration.key

        if not registration.is_singleton:
            _, value = factory()
            return value

        with self._lock:
            entry = self._resolved.get(key)
            if entry is not None:
                logger.debug(" - %s has already been resolved, retrieving from cache", key)
                return entry.value

            context, value = factory()
            self._resolved[key] = ResolvedEntry(context=context, value=value)
            logger.debug(" - %s resolved, result is cached", key)
            return value

    def is_resolved(self, key: str) -> bool:
        return key in self._resolved

    def evict(self, key: str) -> Optional[ResolvedEntry]:
        with self._lock:
            return self._resolved.pop(key, None)

    def resolved_keys(self) -> List[str]:
        return list(self._resolved)

    def get_cache_copy(self) -> Dict[str, ResolvedEntry]:
        return self._resolved.copy()
