"""
injectree: Key-based dependency tree with singletons, aggregators and cascading teardown.

Public API exports for the injectree package.
"""

# Application exports
from injectree.application.container import DependencyTree

# Domain exports
from injectree.domain.context import ConstructionContext
from injectree.domain.enums import FactoryKind
from injectree.domain.exceptions import (
    CircularDependencyError,
    FactoryError,
    InvalidKeyError,
    InvalidRegistrationOptionsError,
    NotAFactoryError,
    ResolutionError,
    TreeError,
    UnregisteredDependencyError,
)
from injectree.domain.interfaces import IDisposable
from injectree.domain.models import RegistrationOptions

__version__ = "0.1.0"

__all__ = [
    # Tree
    "DependencyTree",
    # Options
    "RegistrationOptions",
    "FactoryKind",
    "ConstructionContext",
    "IDisposable",
    # Exceptions
    "TreeError",
    "InvalidKeyError",
    "InvalidRegistrationOptionsError",
    "NotAFactoryError",
    "ResolutionError",
    "UnregisteredDependencyError",
    "CircularDependencyError",
    "FactoryError",
]
