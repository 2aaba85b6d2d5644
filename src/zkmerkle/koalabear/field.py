"""
The KoalaBear prime field.

Every value in this package lives here: hash states, digests, parameters,
and every variable of the constraint system.
"""

from typing import Self

from pydantic import Field, field_validator

from zkmerkle.types import StrictBaseModel

# =================================================================
# Modulus
#
# gcd(3, P - 1) = 1, so cubing permutes the field and Poseidon2 can
# use x^3 as its S-box: two constraints per S-box in the circuit.
# =================================================================

P: int = 2**31 - 2**24 + 1
"""The KoalaBear prime, 0x7f000001."""

P_BITS: int = P.bit_length()
"""Bit length of P (31)."""

P_BYTES: int = (P_BITS + 7) // 8
"""Width of the canonical encoding of one element (4)."""


# =================================================================
# Elements
# =================================================================


class Fp(StrictBaseModel):
    """An element of F_P, stored as its canonical representative."""

    value: int = Field(ge=0, lt=P, description="Canonical representative in [0, P)")

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo_p(cls, v: int) -> int:
        """Accept any integer and store it reduced, so `Fp(value=-1)` is P - 1."""
        return v % P

    # Operators only combine two `Fp`. For any other operand they return
    # NotImplemented, and circuit variables take over through `__radd__`
    # and friends.

    def __add__(self, other: object) -> Self:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.__class__(value=self.value + other.value)

    def __sub__(self, other: object) -> Self:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.__class__(value=self.value - other.value)

    def __neg__(self) -> Self:
        return self.__class__(value=-self.value)

    def __mul__(self, other: object) -> Self:
        if not isinstance(other, Fp):
            return NotImplemented
        return self.__class__(value=self.value * other.value)

    def __pow__(self, exponent: int) -> Self:
        return self.__class__(value=pow(self.value, exponent, P))

    def inverse(self) -> Self:
        """
        The multiplicative inverse, by Fermat: a^(P - 2).

        Raises:
            ZeroDivisionError: For the zero element.
        """
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert the zero element.")
        return self ** (P - 2)

    def __truediv__(self, other: object) -> Self:
        if not isinstance(other, Fp):
            return NotImplemented
        return self * other.inverse()

    # =================================================================
    # Encoding
    # =================================================================

    def __bytes__(self) -> bytes:
        """
        The canonical encoding: `P_BYTES` bytes, little-endian.

        >>> bytes(Fp(value=1))
        b'\\x01\\x00\\x00\\x00'
        """
        return self.value.to_bytes(P_BYTES, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a canonical encoding.

        Raises:
            ValueError: If `data` is not `P_BYTES` long, or encodes a
                value of P or more.
        """
        if len(data) != P_BYTES:
            raise ValueError(f"Expected {P_BYTES} bytes, got {len(data)}")

        decoded = int.from_bytes(data, "little")
        if decoded >= P:
            raise ValueError(f"Value {decoded:#010x} exceeds field modulus {P:#010x}")
        return cls(value=decoded)

    @classmethod
    def serialize_list(cls, elements: list[Self]) -> bytes:
        """Concatenate the encodings of `elements`, in order."""
        return b"".join(bytes(element) for element in elements)

    @classmethod
    def deserialize_list(cls, data: bytes, count: int) -> list[Self]:
        """
        Split `data` into exactly `count` encoded elements.

        Raises:
            ValueError: If the length is not `count * P_BYTES`, or any chunk
                is not canonical.
        """
        if len(data) != count * P_BYTES:
            raise ValueError(
                f"Expected {count * P_BYTES} bytes for {count} elements, got {len(data)}"
            )
        return [cls.from_bytes(data[i : i + P_BYTES]) for i in range(0, len(data), P_BYTES)]


ZERO: Fp = Fp(value=0)
"""The additive identity."""

ONE: Fp = Fp(value=1)
"""The multiplicative identity."""
