"""The KoalaBear finite field, shared by the hash and the constraint system."""

from .field import ONE, P, P_BITS, P_BYTES, ZERO, Fp

__all__ = [
    "P",
    "P_BITS",
    "P_BYTES",
    "Fp",
    "ZERO",
    "ONE",
]
