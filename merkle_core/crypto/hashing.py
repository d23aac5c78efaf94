"""
Hashing Utilities
Hash functions, the canonical pair combinator, and hex helpers.

This module provides:
- SHA-256 and Keccak-256 hashing for raw bytes
- A name -> hash function registry used by configuration
- combine(): the order-independent parent hash of two nodes
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- combine() sorts its inputs byte-wise before hashing, so
  combine(a, b) == combine(b, a) for every pair
- All operations are pure and deterministic
"""
from __future__ import annotations

import hashlib
from typing import Any, Callable

from Crypto.Hash import keccak

from merkle_core.schemas.errors import UnsupportedHashAlgorithmException


HashFunction = Callable[[bytes], bytes]

# Size of every node in a tree
HASH_SIZE: int = 32

DEFAULT_HASH_ALGORITHM = "sha256"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 (pre-standard SHA-3 padding) of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest
    """
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha256": sha256,
    "keccak256": keccak256,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a hash function by its configured name.

    Raises:
        UnsupportedHashAlgorithmException: If the name is not registered
    """
    try:
        return HASH_FUNCTIONS[name.lower()]
    except KeyError:
        raise UnsupportedHashAlgorithmException(name, supported=sorted(HASH_FUNCTIONS)) from None


def is_valid_merkle_node(node: Any) -> bool:
    """Check that node is a bytes-like value of exactly HASH_SIZE bytes."""
    if not isinstance(node, (bytes, bytearray, memoryview)):
        return False
    return len(node) == HASH_SIZE


def combine(a: bytes, b: bytes, hash_fn: HashFunction = sha256) -> bytes:
    """
    Compute the parent hash of two child nodes.

    The smaller input (byte-wise) goes first, so the result does not
    depend on which child was left or right:
    parent = hash_fn(min(a, b) + max(a, b))

    Args:
        a: One child hash
        b: The other child hash
        hash_fn: Hash function applied to the concatenation

    Returns:
        Parent hash
    """
    a, b = bytes(a), bytes(b)
    if a <= b:
        return hash_fn(a + b)
    return hash_fn(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "HashFunction",
    "HASH_SIZE",
    "DEFAULT_HASH_ALGORITHM",
    "HASH_FUNCTIONS",
    "sha256",
    "keccak256",
    "get_hash_function",
    "is_valid_merkle_node",
    "combine",
    "to_hex",
    "from_hex",
]
