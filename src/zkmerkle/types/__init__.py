"""Reusable type definitions and the error taxonomy."""

from .base import StrictBaseModel
from .exceptions import (
    AssignmentMissingError,
    EmptyInputError,
    IndexOutOfRangeError,
    MalformedInputError,
    MerkleError,
    MissingWitnessError,
    SynthesisError,
    TreeTooLargeError,
    ZkMerkleError,
)

__all__ = [
    "StrictBaseModel",
    # Exceptions
    "ZkMerkleError",
    "MerkleError",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "TreeTooLargeError",
    "SynthesisError",
    "MissingWitnessError",
    "MalformedInputError",
    "AssignmentMissingError",
]
