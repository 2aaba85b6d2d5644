"""The Merkle accumulator and its containers."""

from .accumulator import MERKLE_ACCUMULATOR, MerkleAccumulator, tree_height
from .containers import (
    MAX_TREE_HEIGHT,
    AuthenticationPath,
    MembershipStatement,
    MerkleTree,
)

__all__ = [
    "MerkleAccumulator",
    "MERKLE_ACCUMULATOR",
    "MerkleTree",
    "AuthenticationPath",
    "MembershipStatement",
    "MAX_TREE_HEIGHT",
    "tree_height",
]
