"""
Round constants for the width-24 Poseidon2 permutation.

The constants are expanded from a fixed, public label with SHAKE-128 and
rejection-sampled below P, so anyone can regenerate them and no value is
chosen by hand.
"""

import hashlib

from ..koalabear import P, Fp

ROUND_CONSTANTS_LABEL: bytes = b"zkmerkle/poseidon2/koalabear/width-24/v1"
"""The label fed to SHAKE-128 to expand the round constants."""


def derive_round_constants(label: bytes, count: int) -> list[Fp]:
    """
    Deterministically expand `count` field elements from a label.

    Each candidate is a 4-byte little-endian word with its top bit cleared.
    Candidates greater than or equal to P are discarded, which keeps the
    output uniform over the field.

    Args:
        label: The domain label to expand.
        count: The number of constants to produce.

    Returns:
        A list of `count` field elements.
    """
    constants: list[Fp] = []
    # Ask for a generous stream up front and extend it on the rare miss.
    stream_len = 8 * count
    while True:
        stream = hashlib.shake_128(label).digest(stream_len)
        constants.clear()
        for offset in range(0, stream_len, 4):
            word = int.from_bytes(stream[offset : offset + 4], "little") & 0x7FFFFFFF
            if word < P:
                constants.append(Fp(value=word))
                if len(constants) == count:
                    return constants
        stream_len *= 2


WIDTH_24: int = 24
ROUNDS_F_24: int = 8
ROUNDS_P_24: int = 23

ROUND_CONSTANTS_24: list[Fp] = derive_round_constants(
    ROUND_CONSTANTS_LABEL, ROUNDS_F_24 * WIDTH_24 + ROUNDS_P_24
)
"""Flat list of round constants: full rounds use `width` each, partial rounds one each."""
