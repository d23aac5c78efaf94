"""
Merkle Tree Unit Tests
Tests for merkle_core/merkle/merkle_tree.py

Covers:
1. Index arithmetic for the flattened layout
2. Construction - layout, non-power-of-two shapes, input errors
3. Validation - never raises, rejects every malformed shape
4. Rendering - layout of the text dump, empty tree error
"""
import pytest

from merkle_core.crypto.hashing import combine, keccak256, sha256, to_hex
from merkle_core.merkle.merkle_tree import (
    build_merkle_tree,
    compute_tree_depth,
    is_internal_node,
    is_leaf_node,
    is_valid_merkle_tree,
    leaf_tree_index,
    left_child_index,
    parent_index,
    render_merkle_tree,
    right_child_index,
    sibling_index,
)
from merkle_core.schemas.errors import (
    EmptyInputException,
    EmptyTreeException,
    ErrorCodes,
    InvalidLeafLengthException,
)

from fixtures import ZERO_NODE, make_leaves


class TestIndexArithmetic:
    """Tests for flat index helpers."""

    def test_children_and_parent(self):
        assert left_child_index(0) == 1
        assert right_child_index(0) == 2
        assert left_child_index(3) == 7
        assert right_child_index(3) == 8
        assert parent_index(7) == 3
        assert parent_index(8) == 3
        assert parent_index(1) == 0
        assert parent_index(2) == 0

    def test_sibling(self):
        assert sibling_index(1) == 2
        assert sibling_index(2) == 1
        assert sibling_index(7) == 8
        assert sibling_index(8) == 7

    def test_root_has_no_parent_or_sibling(self):
        with pytest.raises(ValueError):
            parent_index(0)
        with pytest.raises(ValueError):
            sibling_index(0)

    def test_leaf_and_internal_classification(self):
        # 3 leaves -> 5 nodes: internal 0, 1; leaves 2, 3, 4
        assert is_internal_node(0, 5)
        assert is_internal_node(1, 5)
        assert is_leaf_node(2, 5)
        assert is_leaf_node(4, 5)
        assert not is_leaf_node(5, 5)
        assert not is_leaf_node(-1, 5)

    def test_single_node_is_leaf(self):
        assert is_leaf_node(0, 1)
        assert not is_internal_node(0, 1)

    def test_leaf_tree_index(self):
        assert leaf_tree_index(5, 0) == 4
        assert leaf_tree_index(5, 2) == 2
        assert leaf_tree_index(1, 0) == 0

    def test_leaf_tree_index_out_of_range(self):
        with pytest.raises(IndexError):
            leaf_tree_index(5, 3)
        with pytest.raises(IndexError):
            leaf_tree_index(5, -1)

    def test_compute_tree_depth(self):
        assert compute_tree_depth(0) == 0
        assert compute_tree_depth(1) == 1
        assert compute_tree_depth(2) == 2
        assert compute_tree_depth(3) == 3
        assert compute_tree_depth(4) == 3
        assert compute_tree_depth(5) == 4


class TestBuild:
    """Tests for build_merkle_tree()."""

    def test_single_leaf_tree_is_leaf(self):
        leaf = sha256(b"only one")
        tree = build_merkle_tree([leaf])

        assert tree == (leaf,)

    def test_two_leaves_layout(self):
        a, b = make_leaves(2)
        tree = build_merkle_tree([a, b])

        assert len(tree) == 3
        assert tree[2] == a
        assert tree[1] == b
        assert tree[0] == combine(a, b)

    def test_three_leaves_no_padding(self):
        """Leaves sit at the tail; internal nodes need no duplication."""
        a, b, c = make_leaves(3)
        tree = build_merkle_tree([a, b, c])

        assert len(tree) == 5
        assert tree[4] == a
        assert tree[3] == b
        assert tree[2] == c
        assert tree[1] == combine(b, a)
        assert tree[0] == combine(tree[1], c)

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 8, 13, 33])
    def test_tree_length_is_odd(self, count):
        tree = build_merkle_tree(make_leaves(count))

        assert len(tree) == 2 * count - 1
        assert len(tree) % 2 == 1

    def test_every_internal_node_is_combination_of_children(self):
        tree = build_merkle_tree(make_leaves(6))

        for i in range(len(tree) // 2):
            assert tree[i] == combine(tree[2 * i + 1], tree[2 * i + 2])

    def test_deterministic(self):
        roots = [build_merkle_tree(make_leaves(7))[0] for _ in range(5)]

        assert all(r == roots[0] for r in roots)

    def test_leaf_order_matters(self):
        leaves = make_leaves(3)

        assert build_merkle_tree(leaves)[0] != build_merkle_tree(leaves[::-1])[0]

    def test_hash_function_changes_root(self):
        leaves = make_leaves(4)

        assert build_merkle_tree(leaves)[0] != build_merkle_tree(leaves, keccak256)[0]

    def test_tree_is_immutable_and_detached(self):
        """Mutating the caller's buffer after build leaves the tree unchanged."""
        buf = bytearray(sha256(b"mutable"))
        tree = build_merkle_tree([buf, sha256(b"other")])
        before = tree[2]

        buf[0] ^= 0xFF

        assert isinstance(tree, tuple)
        assert tree[2] == before
        assert isinstance(tree[2], bytes)

    def test_empty_leaves_raises(self):
        with pytest.raises(EmptyInputException, match="non-zero number of leaves") as exc_info:
            build_merkle_tree([])

        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    def test_short_leaf_raises(self):
        with pytest.raises(InvalidLeafLengthException) as exc_info:
            build_merkle_tree([bytes(1)])

        assert exc_info.value.details["actual_length"] == 1
        assert exc_info.value.details["position"] == 0
        assert exc_info.value.details["list"] == "leaves"

    def test_bad_leaf_anywhere_raises(self):
        leaves = make_leaves(3) + [bytes(33)]

        with pytest.raises(InvalidLeafLengthException) as exc_info:
            build_merkle_tree(leaves)

        assert exc_info.value.details["position"] == 3

    def test_non_bytes_leaf_raises(self):
        with pytest.raises(InvalidLeafLengthException):
            build_merkle_tree(["0" * 32])


class TestValidator:
    """Tests for is_valid_merkle_tree()."""

    @pytest.mark.parametrize("count", [1, 2, 3, 7, 10])
    def test_built_trees_are_valid(self, count):
        assert is_valid_merkle_tree(build_merkle_tree(make_leaves(count)))

    def test_keccak_tree_valid_only_with_keccak(self):
        tree = build_merkle_tree(make_leaves(4), keccak256)

        assert is_valid_merkle_tree(tree, keccak256)
        assert not is_valid_merkle_tree(tree)

    def test_empty_is_invalid(self):
        assert is_valid_merkle_tree([]) is False

    def test_wrong_length_node_is_invalid(self):
        assert is_valid_merkle_tree([bytes(1)]) is False

    def test_even_length_is_invalid(self):
        assert is_valid_merkle_tree([ZERO_NODE, ZERO_NODE]) is False
        assert is_valid_merkle_tree(list(build_merkle_tree(make_leaves(3)))[:4]) is False

    def test_zero_tree_is_invalid(self):
        """Root of three zero nodes is not the combination of its children."""
        assert combine(ZERO_NODE, ZERO_NODE) != ZERO_NODE
        assert is_valid_merkle_tree([ZERO_NODE, ZERO_NODE, ZERO_NODE]) is False

    def test_tampered_internal_node_is_invalid(self):
        tree = list(build_merkle_tree(make_leaves(5)))
        tree[1] = sha256(b"tampered")

        assert is_valid_merkle_tree(tree) is False

    def test_tampered_leaf_is_invalid(self):
        tree = list(build_merkle_tree(make_leaves(5)))
        tree[-1] = sha256(b"tampered")

        assert is_valid_merkle_tree(tree) is False

    def test_garbage_never_raises(self):
        assert is_valid_merkle_tree(None) is False
        assert is_valid_merkle_tree(42) is False
        assert is_valid_merkle_tree(b"\x00" * 32) is False
        assert is_valid_merkle_tree("not a tree") is False
        assert is_valid_merkle_tree([None, None, None]) is False
        assert is_valid_merkle_tree([ZERO_NODE, "x", ZERO_NODE]) is False


class TestRender:
    """Tests for render_merkle_tree()."""

    def test_render_two_zero_leaves(self):
        tree = build_merkle_tree([ZERO_NODE, ZERO_NODE])
        output = render_merkle_tree(tree)

        assert isinstance(output, str)
        assert len(output) > 0
        assert output.splitlines() == [
            f"0) {to_hex(tree[0])}",
            f"├─ 1) {to_hex(ZERO_NODE)}",
            f"└─ 2) {to_hex(ZERO_NODE)}",
        ]

    def test_render_nested_layout(self):
        tree = build_merkle_tree(make_leaves(3))
        lines = render_merkle_tree(tree).splitlines()

        assert lines == [
            f"0) {to_hex(tree[0])}",
            f"├─ 1) {to_hex(tree[1])}",
            f"│  ├─ 3) {to_hex(tree[3])}",
            f"│  └─ 4) {to_hex(tree[4])}",
            f"└─ 2) {to_hex(tree[2])}",
        ]

    def test_render_single_node(self):
        leaf = sha256(b"x")

        assert render_merkle_tree((leaf,)) == f"0) {to_hex(leaf)}"

    def test_render_invalid_tree(self):
        """Structurally invalid trees are still rendered."""
        output = render_merkle_tree([ZERO_NODE, ZERO_NODE, ZERO_NODE])

        assert output.count(")") == 3

    def test_render_lists_every_node(self):
        tree = build_merkle_tree(make_leaves(6))
        lines = render_merkle_tree(tree).splitlines()

        assert len(lines) == len(tree)

    def test_render_empty_raises(self):
        with pytest.raises(EmptyTreeException, match="non-zero number of nodes"):
            render_merkle_tree([])
