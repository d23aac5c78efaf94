"""
CLI Verify Commands

Replay a single or multi-leaf proof and compare the computed root with
a trusted root (from --root, or the root recorded in the document).

Usage:
    merkle verify proof.json [--root 0x...] [--json]
    merkle verify-multi multiproof.json [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from merkle_core.crypto.hashing import from_hex, to_hex
from merkle_core.schemas.documents import MultiProofDocument, ProofDocument
from merkle_core.schemas.errors import DocumentException
from merkle_cli.io import engine_for, load_document, resolve_hash_algorithm


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    kind: str = ""
    hash_algorithm: str = ""
    expected_root: str = ""
    computed_root: str = ""
    num_leaves: int = 0
    num_proof_nodes: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["ok"] = self.ok
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def ok(self) -> bool:
        return not self.errors and self.expected_root == self.computed_root


def _trusted_root(args: Namespace, document_root: str | None, source: str) -> bytes:
    root = args.root or document_root
    if not root:
        raise DocumentException("No root to verify against; pass --root", source=source)
    try:
        return from_hex(root)
    except ValueError as e:
        raise DocumentException(f"Invalid root: {e}", source=source) from e


def _print_summary(summary: VerifySummary, as_json: bool) -> None:
    if as_json:
        print(json.dumps(summary.to_dict(), indent=2))
        return

    status = "OK" if summary.ok else "FAILED"
    print(f"{summary.kind} verification {status} ({summary.hash_algorithm})")
    print(f"  expected root: {summary.expected_root}")
    print(f"  computed root: {summary.computed_root}")


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    doc = load_document(ProofDocument, args.proof)
    algorithm = resolve_hash_algorithm(args, doc.hash_algorithm)
    engine = engine_for(algorithm)
    root = _trusted_root(args, doc.root, args.proof)

    computed = engine.process(from_hex(doc.leaf), doc.proof_bytes())

    summary = VerifySummary(
        kind="single",
        hash_algorithm=algorithm,
        expected_root=to_hex(root),
        computed_root=to_hex(computed),
        num_leaves=1,
        num_proof_nodes=len(doc.proof),
    )
    logger.info(f"Single proof verification: {'ok' if summary.ok else 'root mismatch'}")
    _print_summary(summary, args.json)
    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED


def verify_multi_cmd(args: Namespace) -> int:
    """Handle verify-multi command."""
    doc = load_document(MultiProofDocument, args.multiproof)
    algorithm = resolve_hash_algorithm(args, doc.hash_algorithm)
    engine = engine_for(algorithm)
    root = _trusted_root(args, doc.root, args.multiproof)

    computed = engine.process_multi(doc.to_multi_proof())

    summary = VerifySummary(
        kind="multi",
        hash_algorithm=algorithm,
        expected_root=to_hex(root),
        computed_root=to_hex(computed),
        num_leaves=len(doc.leaves),
        num_proof_nodes=len(doc.proof),
    )
    logger.info(f"Multi-proof verification: {'ok' if summary.ok else 'root mismatch'}")
    _print_summary(summary, args.json)
    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
