from enum import Enum


class FactoryKind(str, Enum):
    """Defines how a factory produces its resolved value.

    Attributes:
        FUNCTION: The factory's return value is the resolved value.
        CONTEXT: The factory receives a fresh construction context as its first
            argument and populates it; the context is the resolved value.
    """

    FUNCTION = "function"
    CONTEXT = "context"

    def __str__(self) -> str:
        return self.value
