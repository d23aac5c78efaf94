"""
Merkle CLI

Command-line interface for the Merkle engine.

Usage:
    python -m merkle_cli build leaves.json --out tree.json
    python -m merkle_cli prove tree.json --leaf 0
    python -m merkle_cli verify proof.json
    python -m merkle_cli multiproof tree.json --leaf 0 2 3
    python -m merkle_cli render tree.json
"""

__version__ = "0.1.0"
