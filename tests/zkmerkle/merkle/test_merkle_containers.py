"""
Tests for the tree, path and statement containers.
"""

import pytest
from pydantic import ValidationError

from zkmerkle.hashing import Digest
from zkmerkle.koalabear import Fp
from zkmerkle.merkle import (
    MAX_TREE_HEIGHT,
    AuthenticationPath,
    MembershipStatement,
    MerkleTree,
)


def _digest(value: int) -> Digest:
    return Digest(elements=(Fp(value=value), Fp(value=value + 1)))


def test_path_lengths_must_match() -> None:
    with pytest.raises(ValidationError, match="2 siblings but 1 directions"):
        AuthenticationPath(siblings=(_digest(1), _digest(2)), is_right_child=(True,))


def test_path_height_is_bounded() -> None:
    levels = MAX_TREE_HEIGHT + 1
    with pytest.raises(ValidationError):
        AuthenticationPath(siblings=(_digest(0),) * levels, is_right_child=(False,) * levels)


@pytest.mark.parametrize(
    "bits, index",
    [((), 0), ((False, False, False), 0), ((True, False, False), 1), ((True, True, False), 3)],
)
def test_leaf_index_from_directions(bits: tuple[bool, ...], index: int) -> None:
    path = AuthenticationPath(siblings=(_digest(0),) * len(bits), is_right_child=bits)
    assert path.leaf_index == index
    assert path.height == len(bits)


def test_tree_shape_is_validated() -> None:
    nodes = tuple(_digest(i) for i in range(3))
    tree = MerkleTree(height=1, leaf_count=2, nodes=nodes)
    assert tree.root == nodes[0]
    assert tree.first_leaf_node == 1

    with pytest.raises(ValidationError, match="has 3 nodes, got 2"):
        MerkleTree(height=1, leaf_count=2, nodes=nodes[:2])
    with pytest.raises(ValidationError, match="do not fit"):
        MerkleTree(height=1, leaf_count=3, nodes=nodes)
    with pytest.raises(ValidationError):
        MerkleTree(height=1, leaf_count=0, nodes=nodes)


def test_leaf_digest_bounds() -> None:
    nodes = tuple(_digest(i) for i in range(3))
    tree = MerkleTree(height=1, leaf_count=1, nodes=nodes)
    assert tree.leaf_digest(1) == nodes[2]
    with pytest.raises(IndexError):
        tree.leaf_digest(2)


def test_containers_are_immutable() -> None:
    path = AuthenticationPath(siblings=(_digest(0),), is_right_child=(True,))
    with pytest.raises(ValidationError):
        path.is_right_child = (False,)  # type: ignore[misc]


def test_statement() -> None:
    statement = MembershipStatement(root=_digest(5), leaf=b"leaf")
    assert statement.auth_path is None

    with pytest.raises(ValidationError):
        MembershipStatement(root=_digest(5), leaf="leaf")  # type: ignore[arg-type]
