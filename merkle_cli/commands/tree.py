"""
CLI Tree Commands

Build a tree from leaves, check an untrusted tree, and render a tree.

Usage:
    merkle build leaves.json [--out tree.json]
    merkle validate tree.json [--json]
    merkle render tree.json [--out tree.txt]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from merkle_core.crypto.hashing import to_hex
from merkle_core.schemas.documents import LeavesDocument, TreeDocument
from merkle_cli.io import (
    dump_document,
    engine_for,
    load_document,
    resolve_hash_algorithm,
    write_output,
)


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2


def build_cmd(args: Namespace) -> int:
    """Handle build command."""
    doc = load_document(LeavesDocument, args.leaves)
    algorithm = resolve_hash_algorithm(args)
    engine = engine_for(algorithm)

    tree = engine.build(doc.to_bytes())
    logger.info(f"Built tree over {len(doc.leaves)} leaves with {algorithm}, root {to_hex(tree[0])}")

    write_output(dump_document(TreeDocument.from_tree(tree, algorithm)), args.out)
    return EXIT_SUCCESS


def validate_cmd(args: Namespace) -> int:
    """Handle validate command."""
    doc = load_document(TreeDocument, args.tree)
    algorithm = resolve_hash_algorithm(args, doc.hash_algorithm)
    engine = engine_for(algorithm)

    nodes = doc.to_nodes()
    valid = engine.is_valid(nodes)
    root_matches = doc.root is None or (bool(doc.tree) and doc.root == doc.tree[0])
    ok = valid and root_matches

    if args.json:
        print(json.dumps({
            "valid": ok,
            "structure_ok": valid,
            "root_matches": root_matches,
            "num_nodes": len(nodes),
            "hash_algorithm": algorithm,
        }, indent=2))
    else:
        status = "VALID" if ok else "INVALID"
        print(f"{status}: {len(nodes)} nodes ({algorithm})")
        if not root_matches:
            print("  root field does not match tree[0]")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED


def render_cmd(args: Namespace) -> int:
    """Handle render command."""
    doc = load_document(TreeDocument, args.tree)
    engine = engine_for(resolve_hash_algorithm(args, doc.hash_algorithm))

    write_output(engine.render(doc.to_nodes()), args.out)
    return EXIT_SUCCESS
