"""
Application layer - Use cases and orchestration.

This layer contains the registry, resolver and destroyer orchestrated by the tree.
It depends only on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .container import DependencyTree
from .destroyer import DependencyDestroyer
from .lifetime_manager import LifetimeManager
from .registry import AggregateFactory, DependencyRegistry, find_dependencies
from .resolver import DependencyResolver

__all__ = [
    "DependencyTree",
    "DependencyRegistry",
    "DependencyResolver",
    "DependencyDestroyer",
    "LifetimeManager",
    "CircularDependencyDetector",
    "AggregateFactory",
    "find_dependencies",
]
