"""
Merkle Proofs
Single-leaf and multi-leaf inclusion proof generation and replay.

This module provides:
- get_proof / process_proof: sibling path for one leaf, folded back to a root
- MultiProof: leaves + proof nodes + flags for several leaves at once
- get_multi_proof / process_multi_proof: multi-proof generation and replay
- MerkleEngine: all operations bound to one hash function

Multi-proof Rules:
1. len(proof_flags) == len(leaves) + len(proof) - 1
2. A True flag combines two nodes from the working queue
3. A False flag combines one queued node with the next proof node
4. Leaves are ordered by flat index, descending (deepest-last leaf first)
5. An empty index set yields proof == [root] and no leaves or flags

Replay never recurses: a deque and a proof cursor carry all state.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

from merkle_core.crypto.hashing import (
    HashFunction,
    combine,
    get_hash_function,
    sha256,
)
from merkle_core.merkle.merkle_tree import (
    Tree,
    build_merkle_tree,
    check_leaf_node,
    check_merkle_node,
    is_valid_merkle_tree,
    parent_index,
    render_merkle_tree,
    sibling_index,
)
from merkle_core.schemas.errors import (
    DuplicateIndexException,
    IndexOutOfRangeException,
    InvariantViolationException,
)


logger = logging.getLogger(__name__)


@dataclass
class MultiProof:
    """
    A proof that several leaves belong to one tree.

    Attributes:
        leaves: The leaf hashes being proven, in processing order
        proof: Sibling hashes that cannot be derived from the leaves
        proof_flags: One flag per combine step; True means both inputs
            come from the working queue, False means the second input
            is the next proof node
    """
    leaves: list[bytes] = field(default_factory=list)
    proof: list[bytes] = field(default_factory=list)
    proof_flags: list[bool] = field(default_factory=list)


# =============================================================================
# Single Proof
# =============================================================================

def get_proof(tree: Sequence[bytes], leaf_index: int) -> list[bytes]:
    """
    Generate the sibling path for the leaf at a flat tree index.

    Algorithm:
    1. Start at leaf_index
    2. Record the sibling (index + 1 if index is odd, else index - 1)
    3. Move up: index = (index - 1) // 2
    4. Stop at the root

    Args:
        tree: A built tree
        leaf_index: Flat index of a leaf (see leaf_tree_index)

    Returns:
        Sibling hashes ordered from leaf to root

    Raises:
        IndexOutOfRangeException: If leaf_index is outside the tree
        NotALeafException: If leaf_index addresses an internal node
    """
    check_leaf_node(len(tree), leaf_index)

    proof: list[bytes] = []
    index = leaf_index
    while index > 0:
        s = sibling_index(index)
        # Malformed even-length trees lack the last right sibling
        if s < len(tree):
            proof.append(bytes(tree[s]))
        index = parent_index(index)

    return proof


def process_proof(
    leaf: bytes,
    proof: Sequence[bytes],
    hash_fn: HashFunction = sha256,
) -> bytes:
    """
    Recompute a root from a leaf and its sibling path.

    The caller compares the result against a trusted root. A wrong proof
    is not an error; it yields a different root.

    Raises:
        InvalidLeafLengthException: If the leaf or any proof node is not 32 bytes
    """
    check_merkle_node(leaf)
    for position, node in enumerate(proof):
        check_merkle_node(node, position=position, source="proof")

    computed = bytes(leaf)
    for node in proof:
        computed = combine(computed, node, hash_fn)

    return computed


def verify_proof(
    root: bytes,
    leaf: bytes,
    proof: Sequence[bytes],
    hash_fn: HashFunction = sha256,
) -> bool:
    """Check that leaf and proof reproduce the given root."""
    return process_proof(leaf, proof, hash_fn) == bytes(root)


# =============================================================================
# Multi Proof
# =============================================================================

def get_multi_proof(tree: Sequence[bytes], indices: Sequence[int]) -> MultiProof:
    """
    Generate a multi-proof for several leaves of a tree.

    Algorithm:
    1. Validate every index addresses a leaf; sort descending; reject repeats
    2. Queue the sorted indices. While the head is not the root:
       - pop head j
       - if the next queued index is j's sibling, consume it and emit True
       - otherwise emit False and append tree[sibling(j)] to the proof
       - queue parent(j)

    When both children of a parent are queued, the larger index is popped
    first and its sibling is consumed from the queue.

    Args:
        tree: A built tree
        indices: Distinct flat indices of leaves to prove

    Returns:
        MultiProof whose leaves follow descending flat index order

    Raises:
        IndexOutOfRangeException: If an index, or the sibling of a node in a
            malformed even-length tree, is outside the tree
        NotALeafException: If an index addresses an internal node
        DuplicateIndexException: If an index appears more than once
    """
    for index in indices:
        check_leaf_node(len(tree), index)

    sorted_indices = sorted(indices, reverse=True)
    for i in range(1, len(sorted_indices)):
        if sorted_indices[i] == sorted_indices[i - 1]:
            raise DuplicateIndexException(sorted_indices[i])

    queue: deque[int] = deque(sorted_indices)
    proof: list[bytes] = []
    proof_flags: list[bool] = []

    while queue and queue[0] > 0:
        j = queue.popleft()
        s = sibling_index(j)
        if s >= len(tree):
            raise IndexOutOfRangeException(s, len(tree))

        if queue and queue[0] == s:
            proof_flags.append(True)
            queue.popleft()
        else:
            proof_flags.append(False)
            proof.append(bytes(tree[s]))
        queue.append(parent_index(j))

    if not sorted_indices:
        proof.append(bytes(tree[0]))

    leaves = [bytes(tree[i]) for i in sorted_indices]

    logger.debug(
        f"Multi-proof: {len(leaves)} leaves, {len(proof)} proof nodes, "
        f"{len(proof_flags)} flags"
    )
    return MultiProof(leaves=leaves, proof=proof, proof_flags=proof_flags)


def process_multi_proof(
    multi_proof: MultiProof,
    hash_fn: HashFunction = sha256,
) -> bytes:
    """
    Recompute a root from a multi-proof.

    Shape checks run before any hashing; the replay itself also fails
    on any queue or proof under-run.

    Args:
        multi_proof: Leaves, proof nodes and flags to replay
        hash_fn: Hash function used by the combinator

    Returns:
        The computed root

    Raises:
        InvalidLeafLengthException: If any leaf or proof node is not 32 bytes
        InvariantViolationException: If flag, leaf and proof counts disagree
    """
    leaves = multi_proof.leaves
    proof_nodes = multi_proof.proof
    flags = multi_proof.proof_flags

    for position, node in enumerate(leaves):
        check_merkle_node(node, position=position, source="leaves")
    for position, node in enumerate(proof_nodes):
        check_merkle_node(node, position=position, source="proof")

    required_proofs = sum(1 for flag in flags if not flag)
    counts = {
        "leaves": len(leaves),
        "proof": len(proof_nodes),
        "proof_flags": len(flags),
    }
    if len(proof_nodes) < required_proofs:
        raise InvariantViolationException(
            f"{required_proofs} proof nodes required, {len(proof_nodes)} supplied",
            details=counts,
        )
    if len(leaves) + len(proof_nodes) != len(flags) + 1:
        raise InvariantViolationException(
            "leaves + proof must equal proof_flags + 1",
            details=counts,
        )

    queue: deque[bytes] = deque(bytes(leaf) for leaf in leaves)
    proof_pos = 0

    for step, flag in enumerate(flags):
        if not queue:
            raise InvariantViolationException(
                f"working queue exhausted at step {step}", details=counts
            )
        a = queue.popleft()
        if flag:
            if not queue:
                raise InvariantViolationException(
                    f"working queue exhausted at step {step}", details=counts
                )
            b = queue.popleft()
        else:
            if proof_pos >= len(proof_nodes):
                raise InvariantViolationException(
                    f"proof exhausted at step {step}", details=counts
                )
            b = bytes(proof_nodes[proof_pos])
            proof_pos += 1
        queue.append(combine(a, b, hash_fn))

    remaining_proof = len(proof_nodes) - proof_pos
    if len(queue) + remaining_proof != 1:
        raise InvariantViolationException(
            f"{len(queue)} queued nodes and {remaining_proof} proof nodes left uncombined",
            details=counts,
        )

    if queue:
        return queue.popleft()
    return bytes(proof_nodes[proof_pos])


def verify_multi_proof(
    root: bytes,
    multi_proof: MultiProof,
    hash_fn: HashFunction = sha256,
) -> bool:
    """Check that a multi-proof reproduces the given root."""
    return process_multi_proof(multi_proof, hash_fn) == bytes(root)


# =============================================================================
# Engine Facade
# =============================================================================

class MerkleEngine:
    """
    All tree and proof operations bound to a single hash function.

    Example:
        >>> engine = MerkleEngine.for_algorithm("keccak256")
        >>> tree = engine.build(leaves)
        >>> proof = engine.prove(tree, len(tree) - 1)
        >>> engine.verify(tree[0], leaves[0], proof)
        True
    """

    def __init__(self, hash_fn: HashFunction = sha256) -> None:
        self.hash_fn = hash_fn

    @classmethod
    def for_algorithm(cls, name: str) -> "MerkleEngine":
        """Create an engine for a registered hash algorithm name."""
        return cls(get_hash_function(name))

    @classmethod
    def from_config(cls, config) -> "MerkleEngine":
        """Create an engine from any config object with a hash_algorithm attribute."""
        return cls.for_algorithm(config.hash_algorithm)

    def build(self, leaves: Sequence[bytes]) -> Tree:
        return build_merkle_tree(leaves, self.hash_fn)

    def prove(self, tree: Sequence[bytes], leaf_index: int) -> list[bytes]:
        return get_proof(tree, leaf_index)

    def process(self, leaf: bytes, proof: Sequence[bytes]) -> bytes:
        return process_proof(leaf, proof, self.hash_fn)

    def verify(self, root: bytes, leaf: bytes, proof: Sequence[bytes]) -> bool:
        return verify_proof(root, leaf, proof, self.hash_fn)

    def prove_multi(self, tree: Sequence[bytes], indices: Sequence[int]) -> MultiProof:
        return get_multi_proof(tree, indices)

    def process_multi(self, multi_proof: MultiProof) -> bytes:
        return process_multi_proof(multi_proof, self.hash_fn)

    def verify_multi(self, root: bytes, multi_proof: MultiProof) -> bool:
        return verify_multi_proof(root, multi_proof, self.hash_fn)

    def is_valid(self, nodes) -> bool:
        return is_valid_merkle_tree(nodes, self.hash_fn)

    def render(self, tree: Sequence[bytes]) -> str:
        return render_merkle_tree(tree)


__all__ = [
    "MultiProof",
    "get_proof",
    "process_proof",
    "verify_proof",
    "get_multi_proof",
    "process_multi_proof",
    "verify_multi_proof",
    "MerkleEngine",
]
