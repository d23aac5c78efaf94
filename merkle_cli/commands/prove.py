"""
CLI Prove Commands

Generate single-leaf and multi-leaf proofs from a built tree.

Leaves are addressed either by leaf number (0-based, in the order they
were given to `build`) or by flat tree index.

Usage:
    merkle prove tree.json --leaf 3 [--out proof.json]
    merkle prove tree.json --tree-index 9
    merkle multiproof tree.json --leaf 0 2 5 [--out multiproof.json]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from merkle_core.crypto.hashing import to_hex
from merkle_core.merkle import leaf_tree_index
from merkle_core.schemas.documents import MultiProofDocument, ProofDocument, TreeDocument
from merkle_core.schemas.errors import IndexOutOfRangeException
from merkle_cli.io import (
    dump_document,
    engine_for,
    load_document,
    resolve_hash_algorithm,
    write_output,
)


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def _to_tree_index(tree_len: int, leaf_number: int) -> int:
    try:
        return leaf_tree_index(tree_len, leaf_number)
    except IndexError:
        raise IndexOutOfRangeException(tree_len - 1 - leaf_number, tree_len) from None


def _selected_indices(args: Namespace, tree_len: int) -> list[int]:
    if args.leaf is not None:
        return [_to_tree_index(tree_len, k) for k in args.leaf]
    return list(args.tree_index)


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    doc = load_document(TreeDocument, args.tree)
    algorithm = resolve_hash_algorithm(args, doc.hash_algorithm)
    engine = engine_for(algorithm)

    nodes = doc.to_nodes()
    index = _selected_indices(args, len(nodes))[0]
    proof = engine.prove(nodes, index)
    logger.info(f"Proof for tree index {index}: {len(proof)} siblings")

    result = ProofDocument(
        hash_algorithm=algorithm,
        leaf=to_hex(nodes[index]),
        tree_index=index,
        proof=[to_hex(p) for p in proof],
        root=to_hex(nodes[0]),
    )
    write_output(dump_document(result), args.out)
    return EXIT_SUCCESS


def multiproof_cmd(args: Namespace) -> int:
    """Handle multiproof command."""
    doc = load_document(TreeDocument, args.tree)
    algorithm = resolve_hash_algorithm(args, doc.hash_algorithm)
    engine = engine_for(algorithm)

    nodes = doc.to_nodes()
    indices = _selected_indices(args, len(nodes))
    multi_proof = engine.prove_multi(nodes, indices)
    logger.info(
        f"Multi-proof for {len(indices)} leaves: {len(multi_proof.proof)} proof nodes"
    )

    result = MultiProofDocument.from_multi_proof(multi_proof, algorithm, root=nodes[0])
    write_output(dump_document(result), args.out)
    return EXIT_SUCCESS
