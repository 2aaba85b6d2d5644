"""
The reference scenario: eight leaves, each the hex Keccak-256 digest of one
byte out of `[1, 2, 3, 10, 9, 17, 70, 45]`.
"""

from collections.abc import Callable

import pytest

from zkmerkle.circuit import generate_constraints
from zkmerkle.hashing import HashParams
from zkmerkle.merkle import MERKLE_ACCUMULATOR, MembershipStatement, MerkleTree


def test_keccak_leaves(keccak_leaf: Callable[[int], bytes], keccak_leaves: list[bytes]) -> None:
    assert len(keccak_leaves) == 8
    assert all(len(leaf) == 64 for leaf in keccak_leaves)
    assert all(set(leaf) <= set(b"0123456789abcdef") for leaf in keccak_leaves)
    assert keccak_leaf(10) == keccak_leaves[3]


def test_tree_shape(keccak_tree: MerkleTree) -> None:
    assert keccak_tree.height == 3
    assert keccak_tree.leaf_count == keccak_tree.capacity == 8


def test_native_membership(
    keccak_tree: MerkleTree,
    leaf_params: HashParams,
    node_params: HashParams,
    keccak_leaf: Callable[[int], bytes],
) -> None:
    """The path for position 3 opens the leaf for 10, and not the one for 9."""
    path = MERKLE_ACCUMULATOR.generate_proof(keccak_tree, 3)
    root = MERKLE_ACCUMULATOR.root(keccak_tree)

    assert MERKLE_ACCUMULATOR.verify(leaf_params, node_params, root, keccak_leaf(10), path)
    assert not MERKLE_ACCUMULATOR.verify(leaf_params, node_params, root, keccak_leaf(9), path)


@pytest.mark.slow
def test_circuit_membership(
    keccak_tree: MerkleTree,
    leaf_params: HashParams,
    node_params: HashParams,
    keccak_leaf: Callable[[int], bytes],
) -> None:
    """The path for position 4 proves the leaf for 9 in-circuit."""
    path = MERKLE_ACCUMULATOR.generate_proof(keccak_tree, 4)
    statement = MembershipStatement(root=keccak_tree.root, leaf=keccak_leaf(9), auth_path=path)

    cs = generate_constraints(statement, leaf_params, node_params)
    assert cs.is_satisfied()


@pytest.mark.slow
def test_circuit_rejects_the_wrong_leaf(
    keccak_tree: MerkleTree,
    leaf_params: HashParams,
    node_params: HashParams,
    keccak_leaf: Callable[[int], bytes],
) -> None:
    path = MERKLE_ACCUMULATOR.generate_proof(keccak_tree, 4)
    statement = MembershipStatement(root=keccak_tree.root, leaf=keccak_leaf(10), auth_path=path)

    cs = generate_constraints(statement, leaf_params, node_params)
    assert not cs.is_satisfied()
    assert cs.which_is_unsatisfied() == "membership/is_member"
