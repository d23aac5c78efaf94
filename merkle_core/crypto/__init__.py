"""
Core cryptographic utilities.

Provides the hash functions and the canonical pair combinator
that every tree and proof operation is built on.
"""
from .hashing import (
    HashFunction,
    HASH_SIZE,
    DEFAULT_HASH_ALGORITHM,
    HASH_FUNCTIONS,
    sha256,
    keccak256,
    get_hash_function,
    is_valid_merkle_node,
    combine,
    to_hex,
    from_hex,
)

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
