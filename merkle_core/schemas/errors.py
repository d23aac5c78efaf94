"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the Merkle engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Two classes of failure exist:
- Input-shape errors: caller mistakes, detected before any hashing
- Invariant errors: a multi-proof whose leaf/proof/flag counts disagree

A well-formed proof that hashes to the wrong root is NOT an error;
it simply fails the caller's root comparison.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Input Shape Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_LEAF_LENGTH = "INVALID_LEAF_LENGTH"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    NOT_A_LEAF = "NOT_A_LEAF"
    DUPLICATE_INDEX = "DUPLICATE_INDEX"
    EMPTY_TREE = "EMPTY_TREE"

    # Structural Errors
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Configuration & Document Errors
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"
    DOCUMENT_INVALID = "DOCUMENT_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the CLI to report failures as JSON without losing the
    machine-readable code.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raised exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle engine errors.

    This exception carries structured error information and can be
    converted to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InputShapeException(MerkleException):
    """Base for caller mistakes detected before any hashing happens."""


class EmptyInputException(InputShapeException):
    """Exception raised when a tree is requested over zero leaves."""

    def __init__(self, message: str = "Expected non-zero number of leaves") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_INPUT)


class InvalidLeafLengthException(InputShapeException):
    """Exception raised when a node is not exactly 32 bytes."""

    def __init__(
        self,
        actual_length: int | None,
        position: int | None = None,
        expected_length: int = 32,
        source: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"expected_length": expected_length}
        if actual_length is not None:
            details["actual_length"] = actual_length
        if position is not None:
            details["position"] = position
        if source is not None:
            details["list"] = source
        if actual_length is None:
            message = "Expected valid merkle node, got a non-bytes value"
        else:
            message = f"Expected valid merkle node, got length {actual_length}"
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_LEAF_LENGTH,
            details=details,
        )


class IndexOutOfRangeException(InputShapeException):
    """Exception raised when an index does not address any tree node."""

    def __init__(self, index: int, tree_length: int) -> None:
        super().__init__(
            message=f"Index {index} out of range for tree of {tree_length} nodes",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "tree_length": tree_length},
        )


class NotALeafException(InputShapeException):
    """Exception raised when a proof is requested for an internal node."""

    def __init__(self, index: int) -> None:
        super().__init__(
            message=f"Expected leaf node at index {index}",
            code=ErrorCodes.NOT_A_LEAF,
            details={"index": index},
        )


class DuplicateIndexException(InputShapeException):
    """Exception raised when a multi-proof is requested with a repeated index."""

    def __init__(self, index: int) -> None:
        super().__init__(
            message=f"Cannot prove duplicated index {index}",
            code=ErrorCodes.DUPLICATE_INDEX,
            details={"index": index},
        )


class EmptyTreeException(InputShapeException):
    """Exception raised when rendering a tree with no nodes."""

    def __init__(self) -> None:
        super().__init__(
            message="Expected non-zero number of nodes in merkle tree",
            code=ErrorCodes.EMPTY_TREE,
        )


class UnsupportedHashAlgorithmException(InputShapeException):
    """Exception raised when an unknown hash algorithm name is configured."""

    def __init__(self, name: str, supported: list[str] | None = None) -> None:
        super().__init__(
            message=f"Unsupported hash algorithm: {name!r}",
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details={"name": name, "supported": supported or []},
        )


class DocumentException(InputShapeException):
    """Exception raised when a JSON document cannot be parsed or validated."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if source:
            full_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCodes.DOCUMENT_INVALID,
            details=full_details,
        )


class InvariantViolationException(MerkleException):
    """
    Exception raised when a multi-proof's shape is inconsistent.

    Signals a malformed or adversarial proof object, not a failed
    verification.
    """

    def __init__(
        self,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Invariant error: {reason}",
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
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
