"""Application layer - Circular dependency detection."""

import threading
from typing import List

from injectree.domain import CircularDependencyError


class CircularDependencyDetector:
    """Tracks the current resolution path and detects circular dependencies.

    The path is the chain of requesters from the root resolution down to the
    key currently being resolved, kept in thread-local storage so concurrent
    resolutions never see each other's keys. When a key appears twice on the
    path, a circular dependency is detected.

    Attributes:
        _local: Thread-local storage for resolution paths.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[str]:
        """Get the current thread's resolution path.

        Returns:
            The resolution path for the current thread.
        """
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @property
    def path(self) -> List[str]:
        """Return a copy of the current thread's resolution path."""
        return list(self._get_stack())

    def path_to(self, key: str) -> List[str]:
        """Return the current path extended by ``key``."""
        return self._get_stack() + [key]

    def push(self, key: str) -> None:
        """Add a key to the resolution path.

        Args:
            key: The key being resolved.

        Raises:
            CircularDependencyError: If the key is already on the path. The
                error reports the full path, ending with the repeated key.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push("a")
            >>> detector.push("b")
            >>> detector.push("a")  # Raises CircularDependencyError: a -> b -> a
        """
        stack = self._get_stack()
        if key in stack:
            raise CircularDependencyError(self.path_to(key))
        stack.append(key)

    def pop(self) -> None:
        """Remove the most recent key from the path."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    def clear(self) -> None:
        """Clear the current thread's resolution path.

        Useful for testing or error recovery.
        """
        if hasattr(self._local, "stack"):
            self._local.stack.clear()
