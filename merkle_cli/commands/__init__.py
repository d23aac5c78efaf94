"""
CLI command modules.
"""

from merkle_cli.commands import bench, prove, tree, verify

__all__ = ["bench", "prove", "tree", "verify"]
