"""
Schemas

Error taxonomy shared by every layer. The JSON document models live in
merkle_core.schemas.documents and are imported from there directly.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleException,
    InputShapeException,
    EmptyInputException,
    InvalidLeafLengthException,
    IndexOutOfRangeException,
    NotALeafException,
    DuplicateIndexException,
    EmptyTreeException,
    UnsupportedHashAlgorithmException,
    DocumentException,
    InvariantViolationException,
)

__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "InputShapeException",
    "EmptyInputException",
    "InvalidLeafLengthException",
    "IndexOutOfRangeException",
    "NotALeafException",
    "DuplicateIndexException",
    "EmptyTreeException",
    "UnsupportedHashAlgorithmException",
    "DocumentException",
    "InvariantViolationException",
]
