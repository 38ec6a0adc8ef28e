"""
FastAPI integration module.

Provides helpers for resolving tree dependencies inside FastAPI applications.
"""

from .integration import create_fastapi_dependency, create_tree_lifespan

__all__ = [
    "create_fastapi_dependency",
    "create_tree_lifespan",
]
