"""Containers for the Merkle accumulator: the tree, its paths, and statements."""

from __future__ import annotations

from typing import Self

from pydantic import Field, model_validator

from ..hashing import TARGET_CONFIG, Digest
from ..types import StrictBaseModel

MAX_TREE_HEIGHT = TARGET_CONFIG.MAX_TREE_HEIGHT
"""The largest height a tree or a path may have."""


class MerkleTree(StrictBaseModel):
    """
    A complete binary hash tree, stored as a flat array.

    Node 0 is the root and node `i` has children `2i + 1` and `2i + 2`, so
    the `2^height` leaf nodes occupy the last positions of `nodes`, in input
    order. Positions past `leaf_count` hold the filler digest.

    Note the parity this layout implies: below the root, a left child always
    has an odd index and a right child an even one.
    """

    height: int = Field(ge=0, le=MAX_TREE_HEIGHT)
    leaf_count: int = Field(gt=0)
    nodes: tuple[Digest, ...]

    @model_validator(mode="after")
    def check_shape(self) -> Self:
        """The node array must describe a complete tree holding every leaf."""
        if len(self.nodes) != 2 * self.capacity - 1:
            raise ValueError(
                f"A tree of height {self.height} has {2 * self.capacity - 1} nodes, "
                f"got {len(self.nodes)}"
            )
        if self.leaf_count > self.capacity:
            raise ValueError(f"{self.leaf_count} leaves do not fit in height {self.height}")
        return self

    @property
    def capacity(self) -> int:
        """Number of leaf slots, padding included."""
        return 1 << self.height

    @property
    def first_leaf_node(self) -> int:
        """Array index of leaf 0."""
        return self.capacity - 1

    @property
    def root(self) -> Digest:
        return self.nodes[0]

    def leaf_digest(self, index: int) -> Digest:
        """The stored leaf hash at a leaf position (padding slots included)."""
        if not 0 <= index < self.capacity:
            raise IndexError(f"Leaf slot {index} out of range for capacity {self.capacity}")
        return self.nodes[self.first_leaf_node + index]


class AuthenticationPath(StrictBaseModel):
    """
    The evidence that one leaf sits under a root.

    Both tuples are ordered from the leaf level upwards. At level `k`:

    - `siblings[k]` is the digest of the other child of the level-`k` parent,
    - `is_right_child[k]` is `True` when the node on the path (not the
      sibling) is the right child of that parent.

    A path is an independent value: it has no reference back to its tree.
    """

    siblings: tuple[Digest, ...] = Field(max_length=MAX_TREE_HEIGHT)
    is_right_child: tuple[bool, ...] = Field(max_length=MAX_TREE_HEIGHT)

    @model_validator(mode="after")
    def check_lengths(self) -> Self:
        """Every level needs exactly one sibling and one direction."""
        if len(self.siblings) != len(self.is_right_child):
            raise ValueError(
                f"Path has {len(self.siblings)} siblings but "
                f"{len(self.is_right_child)} directions"
            )
        return self

    @property
    def height(self) -> int:
        return len(self.siblings)

    @property
    def leaf_index(self) -> int:
        """The leaf position these directions lead to, read as little-endian bits."""
        return sum(1 << level for level, bit in enumerate(self.is_right_child) if bit)


class MembershipStatement(StrictBaseModel):
    """
    A claim that `leaf` is committed to by `root`.

    The root and the leaf are public. The path is the private witness and is
    optional so the same statement can drive a shape-only synthesis.
    """

    root: Digest
    leaf: bytes
    auth_path: AuthenticationPath | None = None
