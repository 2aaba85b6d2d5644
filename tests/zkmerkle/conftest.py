"""
Shared pytest fixtures for the zkmerkle tests.

Parameters come from seeded generators so every run hashes the same
values. The Keccak fixtures reproduce the reference scenario: eight leaves,
each the lowercase hex Keccak-256 digest of a single byte.
"""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest
from Crypto.Hash import keccak

from zkmerkle.hashing import POSEIDON2_SUITE, HashParams
from zkmerkle.merkle import MERKLE_ACCUMULATOR, MerkleTree

KECCAK_LEAF_VALUES = [1, 2, 3, 10, 9, 17, 70, 45]


def _keccak_hex(value: int) -> bytes:
    hasher = keccak.new(digest_bits=256)
    hasher.update(bytes([value]))
    return hasher.hexdigest().encode()


@pytest.fixture
def leaf_params() -> HashParams:
    """A fixed leaf-hash parameter."""
    return POSEIDON2_SUITE.setup(random.Random(0))


@pytest.fixture
def node_params() -> HashParams:
    """A fixed two-to-one-hash parameter, distinct from the leaf one."""
    return POSEIDON2_SUITE.setup(random.Random(1))


@pytest.fixture
def keccak_leaf() -> Callable[[int], bytes]:
    """Callable that maps a byte value to its hex Keccak-256 leaf."""
    return _keccak_hex


@pytest.fixture
def keccak_leaves() -> list[bytes]:
    return [_keccak_hex(value) for value in KECCAK_LEAF_VALUES]


@pytest.fixture
def keccak_tree(
    leaf_params: HashParams, node_params: HashParams, keccak_leaves: list[bytes]
) -> MerkleTree:
    return MERKLE_ACCUMULATOR.build(leaf_params, node_params, keccak_leaves)
