"""
Poseidon2 hash modes, shared by native hashing and the circuit gadget.

This module provides the two ways the permutation is used:

1.  **Compression Mode**: a fixed-input-size mode, used for internal nodes.
2.  **Sponge Mode**: a variable-input-size mode, used for leaves.

Both are written over a generic field-like element, exactly like the
permutation. Native callers pass `Fp` lists; the gadget passes lists of
`FieldVar` mixed with `Fp` constants.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from ..koalabear import ZERO, Fp, P
from ..poseidon2.permutation import PARAMS_24, F, Poseidon2Params, permute
from .constants import BYTES_PER_ELEMENT


def int_to_base_p(value: int, num_limbs: int) -> list[Fp]:
    """Decompose an integer into `num_limbs` little-endian base-P digits."""
    limbs: list[Fp] = []
    acc = value
    for _ in range(num_limbs):
        limbs.append(Fp(value=acc))
        acc //= P
    return limbs


def pack_bytes(data: bytes) -> list[Fp]:
    """
    Pack bytes into field elements, `BYTES_PER_ELEMENT` per element.

    Each chunk is read little-endian; the final chunk may be shorter. The
    gadget mirrors this with `sum(byte_k * 256^k)`.
    """
    return [
        Fp(value=int.from_bytes(data[i : i + BYTES_PER_ELEMENT], "little"))
        for i in range(0, len(data), BYTES_PER_ELEMENT)
    ]


class Poseidon2Engine:
    """The Poseidon2 hash modes for one permutation instance."""

    def __init__(self, params: Poseidon2Params):
        self.params = params

    @property
    def width(self) -> int:
        return self.params.width

    def compress(self, input_vec: Sequence[F | Fp], output_len: int) -> list[F]:
        """
        Poseidon2 in compression mode: `Truncate(Permute(x) + x)`.

        The input is zero-padded to the state width; the feed-forward adds
        the padded input back before truncation.
        """
        if len(input_vec) > self.width:
            raise ValueError("Input vector does not fit in the permutation state.")
        if len(input_vec) < output_len:
            raise ValueError("Input vector is too short for requested output length.")

        # Zero-pad the input into a full state.
        padded_input: list = [ZERO] * self.width
        padded_input[: len(input_vec)] = input_vec

        # Permute, then feed the input forward.
        permuted_state = permute(padded_input, self.params)
        final_state = [p + i for p, i in zip(permuted_state, padded_input, strict=True)]

        return final_state[:output_len]

    @lru_cache(maxsize=256)  # noqa: B019
    def safe_domain_separator(
        self, lengths: tuple[int, ...], capacity_len: int
    ) -> tuple[Fp, ...]:
        """
        Derive a sponge capacity value from the parameters of a hashing task.

        The lengths are packed into a single integer (32 bits each),
        decomposed into base-P digits and compressed. Two tasks with
        different lengths therefore start from unrelated sponge states.
        """
        # Pack the lengths into one integer, 32 bits each.
        acc = 0
        for length in lengths:
            acc = (acc << 32) | length

        input_vec = int_to_base_p(acc, self.width)
        return tuple(self.compress(input_vec, capacity_len))

    def sponge(
        self,
        input_vec: Sequence[F | Fp],
        capacity_value: Sequence[Fp],
        output_len: int,
    ) -> list[F]:
        """
        Poseidon2 in sponge mode.

        The capacity part of the state starts at `capacity_value`; the input
        is zero-padded to a multiple of the rate and absorbed one chunk per
        permutation. Output is squeezed from the rate part, permuting again
        only while more output is needed.
        """
        if len(capacity_value) >= self.width:
            raise ValueError("Capacity length must be smaller than the state width.")

        rate = self.width - len(capacity_value)

        # Pad the input with zeros to a whole number of rate-sized chunks.
        num_extra = (rate - (len(input_vec) % rate)) % rate
        padded_input = list(input_vec) + [ZERO] * num_extra

        # The rate part starts at zero, the capacity part at `capacity_value`.
        state: list = [ZERO] * self.width
        state[rate:] = capacity_value

        # Absorb: add each chunk into the rate part, then permute.
        for i in range(0, len(padded_input), rate):
            chunk = padded_input[i : i + rate]
            for j in range(rate):
                state[j] = state[j] + chunk[j]
            state = permute(state, self.params)

        # Squeeze: read the rate part, permuting between reads.
        output = list(state[:rate])
        while len(output) < output_len:
            state = permute(state, self.params)
            output.extend(state[:rate])

        return output[:output_len]


POSEIDON2_ENGINE = Poseidon2Engine(PARAMS_24)
"""The width-24 engine used by the default suite and gadget."""
