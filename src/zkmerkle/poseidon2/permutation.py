"""
The Poseidon2 permutation over KoalaBear, width 24.

Reference: Grassi, Khovratovich, Schofnegger, "Poseidon2: A Faster Version
of the Poseidon Hash Function", https://eprint.iacr.org/2023/323.

The code only asks three things of a state element: `+`, `*` and `**` with
`Fp` constants (see `FieldLike`). Native hashing passes `Fp` values. The
circuit passes `FieldVar` values through the very same functions, and each
variable product there becomes one rank-1 constraint. There is one
definition of the permutation, so a native digest and its in-circuit
recomputation cannot drift apart.
"""

from itertools import chain
from typing import Any, List, Protocol, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..koalabear.field import ZERO, Fp
from .constants import ROUND_CONSTANTS_24, ROUNDS_F_24, ROUNDS_P_24, WIDTH_24

S_BOX_DEGREE = 3
"""Exponent of the S-box `x -> x^3`; a permutation of F_P since gcd(3, P - 1) = 1."""


class FieldLike(Protocol):
    """The arithmetic the permutation needs from a state element."""

    def __add__(self, other: Any, /) -> Any: ...

    def __mul__(self, other: Any, /) -> Any: ...

    def __pow__(self, exponent: int, /) -> Any: ...


F = TypeVar("F", bound=FieldLike)


class Poseidon2Params(BaseModel):
    """One Poseidon2 instance: its shape and its constants."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width: int = Field(gt=0, multiple_of=4, description="State size t, a multiple of 4.")
    rounds_f: int = Field(gt=0, multiple_of=2, description="Full rounds, split evenly.")
    rounds_p: int = Field(ge=0, description="Partial rounds, run between the two halves.")
    internal_diag_vectors: List[Fp] = Field(
        min_length=1,
        description="The diagonal D of the internal matrix M_I = J + D.",
    )
    round_constants: List[Fp] = Field(
        min_length=1,
        description="Flat constants: `width` per full round, one per partial round.",
    )

    @model_validator(mode="after")
    def check_lengths(self) -> Self:
        """The diagonal and the constants must agree with the declared shape."""
        if len(self.internal_diag_vectors) != self.width:
            raise ValueError("Length of internal_diag_vectors must equal width.")
        if len(self.round_constants) != self.rounds_f * self.width + self.rounds_p:
            raise ValueError("Incorrect number of round constants provided.")
        return self


# D[i] = numerator / 2^shift, the width-24 diagonal used by Plonky3.
_DIAGONAL_24 = [
    (-2, 0), (1, 0), (2, 0), (1, 1), (3, 0), (4, 0), (-1, 1), (-3, 0),
    (-4, 0), (1, 8), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6), (1, 24),
    (-1, 8), (-1, 3), (-1, 4), (-1, 5), (-1, 6), (-1, 7), (-1, 9), (-1, 24),
]  # fmt: skip

PARAMS_24 = Poseidon2Params(
    width=WIDTH_24,
    rounds_f=ROUNDS_F_24,
    rounds_p=ROUNDS_P_24,
    internal_diag_vectors=[
        Fp(value=numerator) / Fp(value=1 << shift) for numerator, shift in _DIAGONAL_24
    ],
    round_constants=ROUND_CONSTANTS_24,
)
"""The width-24 instance used by every hash in the package."""

M4_MATRIX = [
    [Fp(value=2), Fp(value=3), Fp(value=1), Fp(value=1)],
    [Fp(value=1), Fp(value=2), Fp(value=3), Fp(value=1)],
    [Fp(value=1), Fp(value=1), Fp(value=2), Fp(value=3)],
    [Fp(value=3), Fp(value=1), Fp(value=1), Fp(value=2)],
]
"""The 4x4 MDS block of the external layer."""


def _apply_m4(chunk: List[F]) -> List[F]:
    return [sum((M4_MATRIX[row][col] * chunk[col] for col in range(4)), ZERO) for row in range(4)]


def external_linear_layer(state: List[F], width: int) -> List[F]:
    """
    The external matrix M_E = circ(2 * M4, M4, ..., M4).

    Each 4-lane block is mixed by M4; every lane then also receives the sum
    of the lanes at the same offset in all blocks (its own included, which
    doubles the diagonal block).
    """
    mixed = list(chain.from_iterable(_apply_m4(state[i : i + 4]) for i in range(0, width, 4)))
    column_sums = [sum((mixed[j] for j in range(k, width, 4)), ZERO) for k in range(4)]
    return [lane + column_sums[i % 4] for i, lane in enumerate(mixed)]


def internal_linear_layer(state: List[F], params: Poseidon2Params) -> List[F]:
    """
    The internal matrix M_I = J + D, in linear time.

    `J` is all ones, so `(M_I s)_i = sum(s) + D_i * s_i`.
    """
    total = sum(state, ZERO)
    return [total + d * s for d, s in zip(params.internal_diag_vectors, state, strict=True)]


def _full_round(state: List[F], constants: List[Fp], width: int) -> List[F]:
    state = [(s + c) ** S_BOX_DEGREE for s, c in zip(state, constants, strict=True)]
    return external_linear_layer(state, width)


def _partial_round(state: List[F], constant: Fp, params: Poseidon2Params) -> List[F]:
    state = list(state)
    state[0] = (state[0] + constant) ** S_BOX_DEGREE
    return internal_linear_layer(state, params)


def permute(state: List[F], params: Poseidon2Params = PARAMS_24) -> List[F]:
    """
    Apply the permutation to a full state.

    Layout: `M_E`, then `rounds_f / 2` full rounds, then `rounds_p` partial
    rounds, then the remaining full rounds. A full round adds a constant to
    and cubes every lane; a partial round only touches lane 0.

    Args:
        state: `params.width` elements; `Fp`, circuit variables, or a mix.
        params: The instance to run.

    Returns:
        A new list; the input is left untouched.
    """
    width = params.width
    if len(state) != width:
        raise ValueError(f"Input state must have length {width}")

    constants = iter(params.round_constants)

    def take(n: int) -> List[Fp]:
        return [next(constants) for _ in range(n)]

    # Initial mix, before any constant is added.
    state = external_linear_layer(list(state), width)

    # First half of the full rounds.
    for _ in range(params.rounds_f // 2):
        state = _full_round(state, take(width), width)

    # Partial rounds: one constant and one S-box each, on lane 0.
    for _ in range(params.rounds_p):
        state = _partial_round(state, next(constants), params)

    # Second half of the full rounds.
    for _ in range(params.rounds_f // 2):
        state = _full_round(state, take(width), width)
    return state
