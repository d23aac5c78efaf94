"""
Factories for leaves, trees and JSON documents.

Leaves are sha256 digests of "leaf{i}" so every run sees the same values.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from merkle_core.crypto.hashing import HashFunction, sha256, to_hex
from merkle_core.merkle import build_merkle_tree


ZERO_NODE: bytes = bytes(32)


def make_leaf(i: int) -> bytes:
    """Deterministic 32-byte leaf number i."""
    return sha256(f"leaf{i}".encode())


def make_leaves(count: int) -> list[bytes]:
    return [make_leaf(i) for i in range(count)]


def make_tree(count: int, hash_fn: HashFunction = sha256) -> tuple[bytes, ...]:
    return build_merkle_tree(make_leaves(count), hash_fn)


def leaves_document_json(leaves: list[bytes]) -> str:
    return json.dumps({"leaves": [to_hex(x) for x in leaves]})


def write_json(path: Path, data: Any) -> Path:
    """Write data (dict or pre-serialized string) to path and return it."""
    text = data if isinstance(data, str) else json.dumps(data)
    path.write_text(text)
    return path
