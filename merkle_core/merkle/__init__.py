"""
Merkle Tree and Proofs
Flattened Merkle tree construction + single and multi-leaf proofs.

This module provides:
- build_merkle_tree: Build the flat node array from 32-byte leaves
- get_proof / process_proof: Single-leaf inclusion proofs
- get_multi_proof / process_multi_proof: Multi-leaf inclusion proofs
- is_valid_merkle_tree: Structural check for untrusted node lists
- render_merkle_tree: Human-readable dump for debugging
- MerkleEngine: The operations above bound to one hash function

Canonical Commitment Rules:
1. Leaves are opaque 32-byte values; they are never re-hashed
2. Parent hashing: hash(min(left, right) + max(left, right))
3. Tree length is 2n - 1, root at index 0, leaf k at len(tree) - 1 - k
4. Single leaf: root = leaf

Usage:
    from merkle_core.merkle import build_merkle_tree, get_proof, process_proof
    from merkle_core.merkle import leaf_tree_index

    tree = build_merkle_tree(leaves)
    proof = get_proof(tree, leaf_tree_index(len(tree), 2))
    assert process_proof(leaves[2], proof) == tree[0]
"""
from .merkle_tree import (
    Tree,
    left_child_index,
    right_child_index,
    parent_index,
    sibling_index,
    is_tree_node,
    is_internal_node,
    is_leaf_node,
    leaf_tree_index,
    compute_tree_depth,
    build_merkle_tree,
    is_valid_merkle_tree,
    render_merkle_tree,
)

from .merkle_proofs import (
    MultiProof,
    get_proof,
    process_proof,
    verify_proof,
    get_multi_proof,
    process_multi_proof,
    verify_multi_proof,
    MerkleEngine,
)


__all__ = [
    # Core types
    "Tree",
    "MultiProof",
    # Index arithmetic
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_tree_node",
    "is_internal_node",
    "is_leaf_node",
    "leaf_tree_index",
    "compute_tree_depth",
    # Core functions
    "build_merkle_tree",
    "get_proof",
    "process_proof",
    "verify_proof",
    "get_multi_proof",
    "process_multi_proof",
    "verify_multi_proof",
    "is_valid_merkle_tree",
    "render_merkle_tree",
    # Convenience class
    "MerkleEngine",
]
