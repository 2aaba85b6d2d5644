"""
Exception hierarchy for the accumulator and the membership circuit.

Two families exist and they never overlap:

- `MerkleError`: the caller asked the accumulator for something that
  cannot exist (an empty tree, an oversized tree, a leaf past the end).
- `SynthesisError`: the circuit could not even be built.

A membership check that simply does not hold is neither. Native
verification returns `False` and a synthesized constraint system reports
itself unsatisfied.
"""

from __future__ import annotations


class ZkMerkleError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class MerkleError(ZkMerkleError):
    """Base class for accumulator errors."""


class EmptyInputError(MerkleError, ValueError):
    """Raised when a tree is built from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from zero leaves") -> None:
        super().__init__(message)


class TreeTooLargeError(MerkleError, ValueError):
    """
    Raised when a tree would need more levels than the preset allows.

    Attributes:
        leaf_count: The number of leaves supplied.
        max_height: The largest supported tree height.
    """

    def __init__(self, leaf_count: int, max_height: int) -> None:
        self.leaf_count = leaf_count
        self.max_height = max_height
        super().__init__(
            f"{leaf_count} leaves exceed the {1 << max_height} a tree of "
            f"height {max_height} can hold"
        )


class IndexOutOfRangeError(MerkleError, IndexError):
    """
    Raised when a path is requested for a leaf that does not exist.

    Attributes:
        index: The requested leaf index.
        leaf_count: The number of real (non-padding) leaves in the tree.
    """

    def __init__(self, index: int, leaf_count: int) -> None:
        self.index = index
        self.leaf_count = leaf_count
        super().__init__(f"Leaf index {index} out of range for a tree of {leaf_count} leaves")


class SynthesisError(ZkMerkleError):
    """
    Raised when constraint generation cannot complete.

    Attributes:
        namespace: The constraint-system namespace active at the failure, if known.
    """

    def __init__(self, message: str, *, namespace: str | None = None) -> None:
        self.namespace = namespace
        if namespace:
            message = f"{message} (in {namespace})"
        super().__init__(message)


class MissingWitnessError(SynthesisError):
    """Raised when a proving synthesis is attempted without its private witness."""


class MalformedInputError(SynthesisError):
    """Raised when circuit inputs do not have the shape the circuit was defined for."""


class AssignmentMissingError(SynthesisError):
    """Raised when a value is requested from a system synthesized without values."""
