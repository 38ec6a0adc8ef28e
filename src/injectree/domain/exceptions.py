from typing import Optional, Sequence


class TreeError(Exception):
    """Base exception for dependency tree errors."""


class InvalidRegistrationOptionsError(TreeError):
    """Raised when registration options are not a valid key/value structure."""


class InvalidKeyError(TreeError):
    """Raised when a registration key is not a string.

    Attributes:
        key: The rejected key.
    """

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Dependency keys must be strings, got {type(key).__name__}: {key!r}")


class NotAFactoryError(TreeError):
    """Raised when a non-constant registration cannot be used as a factory.

    Attributes:
        key: The key being registered.
        reason: Optional reason for the failure.
    """

    def __init__(self, key: str, reason: Optional[str] = None) -> None:
        self.key = key
        self.reason = reason
        message = f"Cannot register non-callable as factory: {key}"
        if reason:
            message = f"Cannot register {key} as factory. Reason: {reason}"
        super().__init__(message)


def build_path_message(message: str, path: Sequence[str]) -> str:
    return f"{message}\n    {' -> '.join(str(key) for key in path)}"


class ResolutionError(TreeError):
    """Base exception for failures while resolving a key.

    Attributes:
        key: The key whose resolution failed.
        path: Requester chain from the root request down to ``key``.
    """

    description = "Failed to resolve dependency"

    def __init__(self, key: str, path: Sequence[str], description: Optional[str] = None) -> None:
        self.key = key
        self.path = list(path)
        super().__init__(build_path_message(description or self.description, self.path))


class UnregisteredDependencyError(ResolutionError):
    """Raised when resolution reaches a key that has no registration."""

    def __init__(self, key: str, path: Sequence[str]) -> None:
        super().__init__(key, path, f"Detected unregistered dependency `{key}`")


class CircularDependencyError(ResolutionError):
    """Raised when a key appears twice on the same resolution path.

    The reported path ends with the repeated key so the whole cycle is visible.
    """

    def __init__(self, path: Sequence[str]) -> None:
        super().__init__(
            path[-1],
            path,
            "Circular dependency detected! Please check the following dependencies to correct the problem",
        )


class FactoryError(ResolutionError):
    """Raised when a factory fails with an error of its own.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, key: str, path: Sequence[str], error: BaseException) -> None:
        self.error = error
        super().__init__(key, path, f"Factory for `{key}` failed: {error}")
