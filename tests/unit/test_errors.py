"""
Error Taxonomy Unit Tests
Tests for merkle_core/schemas/errors.py
"""
import pytest
from pydantic import ValidationError

from merkle_core.schemas.errors import (
    DocumentException,
    DuplicateIndexException,
    EmptyInputException,
    EmptyTreeException,
    ErrorCodes,
    IndexOutOfRangeException,
    InputShapeException,
    InvalidLeafLengthException,
    InvariantViolationException,
    MerkleError,
    MerkleException,
    NotALeafException,
    UnsupportedHashAlgorithmException,
)


class TestHierarchy:
    """Input-shape errors and invariant errors are distinct families."""

    @pytest.mark.parametrize("exc", [
        EmptyInputException(),
        InvalidLeafLengthException(5),
        IndexOutOfRangeException(10, 3),
        NotALeafException(0),
        DuplicateIndexException(1),
        EmptyTreeException(),
        UnsupportedHashAlgorithmException("md5"),
        DocumentException("bad document"),
    ])
    def test_input_shape_family(self, exc):
        assert isinstance(exc, InputShapeException)
        assert isinstance(exc, MerkleException)
        assert not isinstance(exc, InvariantViolationException)

    def test_invariant_is_not_input_shape(self):
        exc = InvariantViolationException("counts disagree")

        assert isinstance(exc, MerkleException)
        assert not isinstance(exc, InputShapeException)


class TestMessages:
    """Messages and details carried by each exception."""

    def test_invalid_leaf_length(self):
        exc = InvalidLeafLengthException(7, position=2)

        assert str(exc) == "Expected valid merkle node, got length 7"
        assert exc.code == ErrorCodes.INVALID_LEAF_LENGTH
        assert exc.details == {"expected_length": 32, "actual_length": 7, "position": 2}

    def test_invalid_leaf_non_bytes(self):
        exc = InvalidLeafLengthException(None)

        assert "non-bytes" in exc.message
        assert "actual_length" not in exc.details

    def test_index_out_of_range(self):
        exc = IndexOutOfRangeException(9, 5)

        assert exc.details == {"index": 9, "tree_length": 5}
        assert "9" in exc.message

    def test_invariant_prefix(self):
        exc = InvariantViolationException("proof exhausted", details={"proof": 0})

        assert exc.message == "Invariant error: proof exhausted"
        assert exc.code == ErrorCodes.INVARIANT_VIOLATION
        assert exc.details == {"proof": 0}

    def test_document_source_in_details(self):
        exc = DocumentException("broken", source="tree.json")

        assert exc.details["source"] == "tree.json"
        assert exc.code == ErrorCodes.DOCUMENT_INVALID

    def test_repr(self):
        assert repr(NotALeafException(3)) == (
            "NotALeafException(code='NOT_A_LEAF', message='Expected leaf node at index 3')"
        )


class TestErrorModel:
    """Conversion between exceptions and the MerkleError model."""

    def test_to_error_model(self):
        model = DuplicateIndexException(4).to_error_model()

        assert isinstance(model, MerkleError)
        assert model.code == ErrorCodes.DUPLICATE_INDEX
        assert model.details == {"index": 4}
        assert model.retryable is False

    def test_model_round_trip_to_exception(self):
        model = MerkleError(code=ErrorCodes.EMPTY_TREE, message="empty")
        exc = model.to_exception()

        assert isinstance(exc, MerkleException)
        assert exc.code == ErrorCodes.EMPTY_TREE
        assert exc.message == "empty"

    def test_model_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            MerkleError(code="X", message="m", unexpected=True)

    def test_model_json(self):
        payload = EmptyInputException().to_error_model().model_dump()

        assert payload == {
            "code": "EMPTY_INPUT",
            "message": "Expected non-zero number of leaves",
            "details": {},
            "retryable": False,
        }
