"""
Merkle engine core.

Flattened binary hash trees over 32-byte leaves, with single-leaf and
multi-leaf inclusion proofs.
"""

__version__ = "0.1.0"
