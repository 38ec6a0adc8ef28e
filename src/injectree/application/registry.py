"""Application layer - Registration records and dependency discovery."""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from injectree.domain import FactoryKind, NotAFactoryError, Registration

logger = logging.getLogger(__name__)


def find_dependencies(key: str, factory: Callable, kind: FactoryKind = FactoryKind.FUNCTION) -> List[str]:
    """Derive dependency keys from a factory's declared parameter names.

    Only positional parameters without defaults are dependencies. For
    context-style factories the first parameter receives the context and is
    skipped.

    Args:
        key: The key being registered, used for error reporting.
        factory: The factory to inspect.
        kind: The factory shape.

    Returns:
        Parameter names in declaration order.

    Raises:
        NotAFactoryError: If the factory's signature cannot be inspected.

    Example:
        >>> find_dependencies("plugin", lambda errorParser, formatter: None)
        ['errorParser', 'formatter']
    """
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError) as e:
        raise NotAFactoryError(key, f"cannot inspect parameters ({e}); pass explicit dependencies") from e

    parameters = [
        param
        for param in signature.parameters.values()
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if kind == FactoryKind.CONTEXT:
        parameters = parameters[1:]

    return [param.name for param in parameters if param.default is inspect.Parameter.empty]


class AggregateFactory:
    """Factory synthesized for an aggregator key.

    Maps each aggregated key to its resolved value, in the order the keys were
    appended to the aggregator's dependency list.
    """

    def __init__(self, registry: "DependencyRegistry", key: str) -> None:
        self._registry = registry
        self._key = key

    def __call__(self, *values: Any) -> Dict[str, Any]:
        keys = self._registry.get(self._key).dependencies
        return dict(zip(keys, values))

    def __repr__(self) -> str:
        return f"AggregateFactory({self._key!r})"


class DependencyRegistry:
    """Ordered mapping from key to registration record.

    Attributes:
        _registrations: Records in registration order.
    """

    def __init__(self) -> None:
        self._registrations: Dict[str, Registration] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._registrations

    def get(self, key: str) -> Optional[Registration]:
        return self._registrations.get(key)

    def keys(self) -> List[str]:
        return list(self._registrations)

    def add(self, registration: Registration) -> None:
        """Install a record, replacing any record under the same key."""
        self._registrations[registration.key] = registration

    def add_aggregator(self, key: str) -> Registration:
        """Synthesize an empty, non-singleton aggregator record for ``key``."""
        logger.debug("Creating aggregator %s", key)
        registration = Registration(
            key=key,
            value=AggregateFactory(self, key),
            is_aggregator=True,
        )
        self.add(registration)
        return registration

    def dependents_of(self, key: str) -> List[str]:
        """Return every registered key whose dependency list contains ``key``."""
        return [name for name, registration in self._registrations.items() if key in registration.dependencies]

    def copy(self) -> "DependencyRegistry":
        """Copy the records, rebinding aggregator factories to the copy."""
        registry = DependencyRegistry()
        for key, registration in self._registrations.items():
            update: Dict[str, Any] = {"dependencies": list(registration.dependencies)}
            if registration.is_aggregator:
                update["value"] = AggregateFactory(registry, key)
            registry.add(registration.model_copy(update=update))
        return registry

    def clear(self) -> None:
        self._registrations.clear()
