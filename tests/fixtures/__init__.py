"""
Test fixtures package for Merkle engine tests.

This package provides factory functions for creating test objects:
- merkle_fixtures.py: leaves, trees and JSON documents

Usage:
    from fixtures import make_leaves, make_tree

    def test_something():
        leaves = make_leaves(5)
        tree = make_tree(5)
"""

from .merkle_fixtures import (
    ZERO_NODE,
    make_leaf,
    make_leaves,
    make_tree,
    leaves_document_json,
    write_json,
)

__all__ = [
    "ZERO_NODE",
    "make_leaf",
    "make_leaves",
    "make_tree",
    "leaves_document_json",
    "write_json",
]
