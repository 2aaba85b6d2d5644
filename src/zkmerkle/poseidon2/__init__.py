"""The Poseidon2 permutation over KoalaBear."""

from .constants import ROUND_CONSTANTS_24, derive_round_constants
from .permutation import (
    PARAMS_24,
    S_BOX_DEGREE,
    Poseidon2Params,
    permute,
)

__all__ = [
    "permute",
    "Poseidon2Params",
    "PARAMS_24",
    "S_BOX_DEGREE",
    "ROUND_CONSTANTS_24",
    "derive_round_constants",
]
