"""Native hash values: digests and public parameters."""

from __future__ import annotations

from typing import Self

from pydantic import Field

from ..koalabear import P_BYTES, Fp
from ..types import StrictBaseModel


class Digest(StrictBaseModel):
    """
    A hash output: a fixed-length vector of field elements.

    Digests are only ever produced by a hash suite (or decoded from bytes a
    suite produced); the suite fixes the length.
    """

    elements: tuple[Fp, ...] = Field(min_length=1)

    def __len__(self) -> int:
        return len(self.elements)

    def __bytes__(self) -> bytes:
        """Little-endian concatenation of the elements, 4 bytes each."""
        return Fp.serialize_list(list(self.elements))

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a digest from its byte encoding.

        Raises:
            ValueError: If the length is not a positive multiple of 4 or an
                element is not canonical.
        """
        if not data or len(data) % P_BYTES:
            raise ValueError(f"Digest encoding must be a positive multiple of {P_BYTES} bytes")
        return cls(elements=tuple(Fp.deserialize_list(data, len(data) // P_BYTES)))

    def hex(self) -> str:
        return bytes(self).hex()


class HashParams(StrictBaseModel):
    """
    The public parameter of one hash function.

    Sampled once by `setup`, then shared read-only by every tree build and
    every circuit synthesis that uses it.
    """

    elements: tuple[Fp, ...] = Field(min_length=1)
