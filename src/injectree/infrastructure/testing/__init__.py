"""
Testing utilities module.

Provides helpers for testing applications built on injectree.
"""

from .utilities import TestTree, create_mock_tree

__all__ = [
    "TestTree",
    "create_mock_tree",
]
