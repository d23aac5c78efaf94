"""
Merkle Tree Implementation
Flattened binary tree construction, structural validation, and rendering.

This module provides:
- Index arithmetic for a tree stored as a flat array (root at index 0)
- Tree construction from a list of 32-byte leaves
- A never-raising structural validator for untrusted node lists
- A human-readable tree dump for debugging

Layout Rules (Hard Contracts):
1. A tree over n leaves has exactly 2n - 1 nodes (always odd)
2. Children of node i are 2i + 1 and 2i + 2; parent of i > 0 is (i - 1) // 2
3. Leaf k (0-based, caller order) lives at index len(tree) - 1 - k
4. Parent hashing: parent = combine(left, right), which sorts its inputs
5. No padding or duplication for leaf counts that are not powers of two
6. Single leaf: the tree is (leaf,) and the leaf is also the root
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from merkle_core.crypto.hashing import (
    HASH_SIZE,
    HashFunction,
    combine,
    is_valid_merkle_node,
    sha256,
    to_hex,
)
from merkle_core.schemas.errors import (
    EmptyInputException,
    EmptyTreeException,
    IndexOutOfRangeException,
    InvalidLeafLengthException,
    NotALeafException,
)


logger = logging.getLogger(__name__)

# A built tree: immutable, length 2n - 1
Tree = tuple[bytes, ...]


# =============================================================================
# Index Arithmetic
# =============================================================================

def left_child_index(index: int) -> int:
    return 2 * index + 1


def right_child_index(index: int) -> int:
    return 2 * index + 2


def parent_index(index: int) -> int:
    if index <= 0:
        raise ValueError("Root has no parent")
    return (index - 1) // 2


def sibling_index(index: int) -> int:
    """Sibling of a non-root node: odd indices are left children."""
    if index <= 0:
        raise ValueError("Root has no siblings")
    return index + 1 if index % 2 == 1 else index - 1


def is_tree_node(index: int, tree_len: int) -> bool:
    return 0 <= index < tree_len


def is_internal_node(index: int, tree_len: int) -> bool:
    return is_tree_node(left_child_index(index), tree_len)


def is_leaf_node(index: int, tree_len: int) -> bool:
    return is_tree_node(index, tree_len) and not is_internal_node(index, tree_len)


def leaf_tree_index(tree_len: int, leaf_number: int) -> int:
    """
    Map a 0-based leaf number (caller order) to its flat tree index.

    Raises:
        IndexError: If leaf_number is not a leaf of a tree of this size
    """
    num_leaves = (tree_len + 1) // 2
    if leaf_number < 0 or leaf_number >= num_leaves:
        raise IndexError(
            f"Leaf number {leaf_number} out of range for {num_leaves} leaves"
        )
    return tree_len - 1 - leaf_number


def check_leaf_node(tree_len: int, index: int) -> None:
    """
    Ensure index addresses a leaf slot.

    Raises:
        IndexOutOfRangeException: If index is outside the tree
        NotALeafException: If index addresses an internal node
    """
    if not is_tree_node(index, tree_len):
        raise IndexOutOfRangeException(index, tree_len)
    if is_internal_node(index, tree_len):
        raise NotALeafException(index)


def check_merkle_node(
    node: Any,
    position: int | None = None,
    source: str | None = None,
) -> None:
    """
    Ensure node is a 32-byte value.

    position and source (e.g. "leaves", "proof") locate the node in the
    caller's input and are reported in the error details.

    Raises:
        InvalidLeafLengthException: If node is not bytes-like or has the wrong size
    """
    if not is_valid_merkle_node(node):
        actual = len(node) if isinstance(node, (bytes, bytearray, memoryview)) else None
        raise InvalidLeafLengthException(
            actual, position=position, source=source, expected_length=HASH_SIZE
        )


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a flattened tree with the given number of leaves.

    Depth is the number of levels from the deepest leaf to the root
    (inclusive). A single leaf has depth 1, two leaves have depth 2.

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0
    # Deepest node is the last index, 2n - 2
    return (2 * num_leaves - 1).bit_length()


# =============================================================================
# Construction
# =============================================================================

def build_merkle_tree(
    leaves: Sequence[bytes],
    hash_fn: HashFunction = sha256,
) -> Tree:
    """
    Build a flattened Merkle tree from a sequence of 32-byte leaves.

    Algorithm:
    1. Validate: at least one leaf, every leaf exactly 32 bytes
    2. Place leaf k at index len(tree) - 1 - k
    3. For each internal index from n - 2 down to 0:
       tree[i] = combine(tree[2i + 1], tree[2i + 2])

    Processing runs strictly from the leaves toward the root, so every
    child is computed before its parent reads it.

    Args:
        leaves: Sequence of leaf hashes. Order matters and is preserved.
        hash_fn: Hash function used by the combinator

    Returns:
        Tuple of 2n - 1 nodes, root at index 0

    Raises:
        EmptyInputException: If leaves is empty
        InvalidLeafLengthException: If any leaf is not exactly 32 bytes

    Example:
        >>> tree = build_merkle_tree([sha256(b"a"), sha256(b"b")])
        >>> len(tree)
        3
    """
    if len(leaves) == 0:
        raise EmptyInputException()
    for position, leaf in enumerate(leaves):
        check_merkle_node(leaf, position=position, source="leaves")

    num_leaves = len(leaves)
    tree_len = 2 * num_leaves - 1
    # Fresh bytes copies: the result never aliases caller buffers
    nodes: list[bytes] = [b""] * tree_len

    for k, leaf in enumerate(leaves):
        nodes[tree_len - 1 - k] = bytes(leaf)

    for i in range(tree_len - num_leaves - 1, -1, -1):
        nodes[i] = combine(nodes[left_child_index(i)], nodes[right_child_index(i)], hash_fn)

    logger.debug(f"Built merkle tree: {num_leaves} leaves, {tree_len} nodes")
    return tuple(nodes)


# =============================================================================
# Validation
# =============================================================================

def is_valid_merkle_tree(nodes: Any, hash_fn: HashFunction = sha256) -> bool:
    """
    Check that an untrusted node list is a well-formed Merkle tree.

    Never raises: any malformed input yields False.

    Rules:
    - Non-empty, odd length
    - Every node is exactly 32 bytes
    - Every internal node equals combine() of its two children

    Args:
        nodes: Arbitrary sequence of byte strings
        hash_fn: Hash function used by the combinator

    Returns:
        True if nodes form a valid tree, False otherwise
    """
    if isinstance(nodes, (str, bytes, bytearray, memoryview)):
        return False
    try:
        node_list = list(nodes)
    except TypeError:
        return False

    if len(node_list) == 0 or len(node_list) % 2 == 0:
        return False
    if not all(is_valid_merkle_node(n) for n in node_list):
        return False

    for i in range(len(node_list) // 2):
        expected = combine(node_list[left_child_index(i)], node_list[right_child_index(i)], hash_fn)
        if bytes(node_list[i]) != expected:
            return False

    return True


# =============================================================================
# Rendering
# =============================================================================

def _format_node(node: Any) -> str:
    if isinstance(node, (bytes, bytearray, memoryview)):
        return to_hex(node)
    return repr(node)


def render_merkle_tree(tree: Sequence[Any]) -> str:
    """
    Render a tree as indented text for debugging.

    Nodes are listed depth-first, left child before right, each as
    "<index>) <0x-hex>". No structural validation is performed, so
    broken trees can be rendered for diagnosis.

    Example output for two leaves:
        0) 0x...
        ├─ 1) 0x...
        └─ 2) 0x...

    Raises:
        EmptyTreeException: If tree has no nodes
    """
    if len(tree) == 0:
        raise EmptyTreeException()

    # Each path entry: True if that ancestor has a later sibling still to print
    stack: list[tuple[int, list[bool]]] = [(0, [])]
    lines: list[str] = []

    while stack:
        i, path = stack.pop()

        guides = "".join("│  " if more else "   " for more in path[:-1])
        if path:
            guides += "├─ " if path[-1] else "└─ "
        lines.append(f"{guides}{i}) {_format_node(tree[i])}")

        if right_child_index(i) < len(tree):
            stack.append((right_child_index(i), path + [False]))
            stack.append((left_child_index(i), path + [True]))

    return "\n".join(lines)


__all__ = [
    "Tree",
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_tree_node",
    "is_internal_node",
    "is_leaf_node",
    "leaf_tree_index",
    "check_leaf_node",
    "check_merkle_node",
    "compute_tree_depth",
    "build_merkle_tree",
    "is_valid_merkle_tree",
    "render_merkle_tree",
]
