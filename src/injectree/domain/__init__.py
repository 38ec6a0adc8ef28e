"""
Domain layer - Core models of the dependency tree.

This layer contains the registration records, options, errors and interfaces.
It has no dependencies on other layers.
"""

from .context import ConstructionContext
from .enums import FactoryKind
from .exceptions import (
    CircularDependencyError,
    FactoryError,
    InvalidKeyError,
    InvalidRegistrationOptionsError,
    NotAFactoryError,
    ResolutionError,
    TreeError,
    UnregisteredDependencyError,
)
from .interfaces import IContainer, IDestroyer, IDisposable, ILifetimeManager, IResolver
from .models import Registration, RegistrationOptions, ResolvedEntry

__all__ = [
    # Enums
    "FactoryKind",
    # Exceptions
    "TreeError",
    "InvalidKeyError",
    "InvalidRegistrationOptionsError",
    "NotAFactoryError",
    "ResolutionError",
    "UnregisteredDependencyError",
    "CircularDependencyError",
    "FactoryError",
    # Interfaces
    "IContainer",
    "IResolver",
    "IDestroyer",
    "ILifetimeManager",
    "IDisposable",
    # Models
    "Registration",
    "RegistrationOptions",
    "ResolvedEntry",
    "ConstructionContext",
]
