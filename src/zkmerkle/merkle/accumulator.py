"""
The Merkle accumulator: commit to an ordered list of byte strings with a
single digest and prove membership of any one of them.

### Construction

1.  **Leaf hashing**: every input is hashed with the leaf hash.
2.  **Padding**: the leaf level is filled up to the next power of two with
    the suite's filler digest (`empty_digest`, all zeros for Poseidon2).
    The filler is a node value, not a leaf preimage, so a padding slot can
    never be opened as a member.
3.  **Bottom-up hashing**: each internal node `i` becomes
    `TwoToOneHash(nodes[2i + 1], nodes[2i + 2])`, from the last internal
    node back to the root at index 0.

### Authentication paths

The path for leaf `j` starts at array index `2^h - 1 + j` and climbs to the
root. In this layout a node is a right child exactly when its index is even;
its sibling is then at `i - 1`, otherwise at `i + 1`; its parent is at
`(i - 1) // 2`. Verification replays those left/right decisions, so a path
whose direction bit is flipped at any level reconstructs a different root.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..hashing import POSEIDON2_SUITE, Digest, HashParams, HashSuite
from ..types import EmptyInputError, IndexOutOfRangeError, TreeTooLargeError
from .containers import MAX_TREE_HEIGHT, AuthenticationPath, MerkleTree

logger = logging.getLogger(__name__)


def tree_height(leaf_count: int) -> int:
    """`ceil(log2(leaf_count))`, with a single leaf giving height 0."""
    return (leaf_count - 1).bit_length()


class MerkleAccumulator:
    """Builds trees and checks authentication paths for one hash suite."""

    def __init__(self, suite: HashSuite = POSEIDON2_SUITE):
        self.suite = suite

    def build(
        self,
        leaf_params: HashParams,
        two_to_one_params: HashParams,
        leaves: Sequence[bytes],
    ) -> MerkleTree:
        """
        Build a tree over `leaves`, in order.

        Args:
            leaf_params: Public parameter of the leaf hash.
            two_to_one_params: Public parameter of the two-to-one hash.
            leaves: The byte strings to commit to; the i-th entry is leaf i.

        Returns:
            The immutable tree.

        Raises:
            EmptyInputError: If `leaves` is empty.
            TreeTooLargeError: If the leaves need more than `MAX_TREE_HEIGHT`
                levels.
        """
        if len(leaves) == 0:
            raise EmptyInputError()

        # Checked before hashing anything.
        height = tree_height(len(leaves))
        if height > MAX_TREE_HEIGHT:
            raise TreeTooLargeError(len(leaves), MAX_TREE_HEIGHT)
        capacity = 1 << height
        first_leaf = capacity - 1

        nodes: list[Digest] = [self.suite.empty_digest()] * (2 * capacity - 1)
        for i, leaf in enumerate(leaves):
            nodes[first_leaf + i] = self.suite.leaf_hash(leaf_params, bytes(leaf))

        # Parents always sit at lower indices than their children.
        for i in reversed(range(first_leaf)):
            nodes[i] = self.suite.two_to_one_hash(
                two_to_one_params, nodes[2 * i + 1], nodes[2 * i + 2]
            )

        logger.debug(
            "Built Merkle tree: %d leaves, capacity %d, height %d", len(leaves), capacity, height
        )
        return MerkleTree(height=height, leaf_count=len(leaves), nodes=tuple(nodes))

    def root(self, tree: MerkleTree) -> Digest:
        """The public commitment to the whole leaf set."""
        return tree.root

    def generate_proof(self, tree: MerkleTree, index: int) -> AuthenticationPath:
        """
        Compute the authentication path of a leaf.

        Args:
            tree: The tree the leaf belongs to.
            index: The leaf's position in the original input (0-indexed).

        Returns:
            An independent path of length `tree.height`.

        Raises:
            IndexOutOfRangeError: If `index` does not name a real leaf.
        """
        if not 0 <= index < tree.leaf_count:
            raise IndexOutOfRangeError(index, tree.leaf_count)

        siblings: list[Digest] = []
        is_right_child: list[bool] = []

        # Climb from the leaf node to the root, one level per step.
        node = tree.first_leaf_node + index
        while node > 0:
            # Right children sit at even indices, their siblings just before.
            is_right = node % 2 == 0
            sibling = node - 1 if is_right else node + 1
            siblings.append(tree.nodes[sibling])
            is_right_child.append(is_right)
            node = (node - 1) // 2

        logger.debug("Generated path for leaf %d (height %d)", index, tree.height)
        return AuthenticationPath(siblings=tuple(siblings), is_right_child=tuple(is_right_child))

    def compute_root(
        self,
        leaf_params: HashParams,
        two_to_one_params: HashParams,
        leaf: bytes,
        path: AuthenticationPath,
    ) -> Digest:
        """Fold a leaf through a path and return the root it implies."""
        current = self.suite.leaf_hash(leaf_params, leaf)
        for sibling, is_right in zip(path.siblings, path.is_right_child, strict=True):
            # Order the pair as it sat under the parent.
            left, right = (sibling, current) if is_right else (current, sibling)
            current = self.suite.two_to_one_hash(two_to_one_params, left, right)
        return current

    def verify(
        self,
        leaf_params: HashParams,
        two_to_one_params: HashParams,
        root: Digest,
        leaf: bytes,
        path: AuthenticationPath,
    ) -> bool:
        """
        Check that `path` proves `leaf` is committed to by `root`.

        A failed check is an ordinary outcome and returns `False`; this
        includes digests and parameters of a length the suite never uses.
        """
        width = self.suite.digest_length
        if len(root) != width or any(len(sibling) != width for sibling in path.siblings):
            logger.debug("Rejecting path: digest width differs from %d", width)
            return False

        expected = self.suite.parameter_length
        if any(len(p.elements) != expected for p in (leaf_params, two_to_one_params)):
            logger.debug("Rejecting path: parameter length differs from %d", expected)
            return False

        candidate = self.compute_root(leaf_params, two_to_one_params, leaf, path)
        if candidate != root:
            logger.debug("Rejecting path: reconstructed root %s", candidate.hex())
            return False
        return True


MERKLE_ACCUMULATOR = MerkleAccumulator()
"""The accumulator over `POSEIDON2_SUITE`."""
