"""
Configuration presets for the hash suite.

`TARGET_CONFIG` follows the `ZKMERKLE_ENV` environment variable: the
production preset gives 248-bit digests, the test preset trades security
for smaller circuits.
"""

import os
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Final

from ..koalabear import Fp

ENVIRONMENTS: Final = ("prod", "test")
"""Accepted values of `ZKMERKLE_ENV`."""


def read_environment() -> str:
    """
    Read `ZKMERKLE_ENV`, case-insensitively, defaulting to `prod`.

    Raises:
        ValueError: For any value outside `ENVIRONMENTS`.
    """
    env = os.environ.get("ZKMERKLE_ENV", "prod").lower()
    if env not in ENVIRONMENTS:
        raise ValueError(f"Invalid ZKMERKLE_ENV {env!r}; expected one of {ENVIRONMENTS}")
    return env


ZKMERKLE_ENV: Final = read_environment()
"""The environment read at import time; it picks `TARGET_CONFIG`."""

SPONGE_WIDTH: Final = 24
"""State width of the Poseidon2 instance used for every hash."""


class HashConfig(BaseModel):
    """A model holding the constants of one hash-suite preset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    HASH_LEN_FE: int = Field(gt=0)
    """The length of a digest, in field elements."""

    PARAMETER_LEN: int = Field(gt=0)
    """
    The length of the public parameter.

    It is mixed into every hash to specialize the function to one setup.
    """

    CAPACITY: int = Field(gt=0)
    """The capacity of the Poseidon2 sponge, defining its security level."""

    MAX_TREE_HEIGHT: int = Field(gt=0)
    """The largest authentication path accepted, in levels."""

    @property
    def RATE(self) -> int:  # noqa: N802
        """The number of field elements absorbed per permutation."""
        return SPONGE_WIDTH - self.CAPACITY

    @model_validator(mode="after")
    def check_fits_in_state(self) -> Self:
        """A node hash and a single squeeze must each fit in one permutation."""
        if 1 + self.PARAMETER_LEN + 2 * self.HASH_LEN_FE > SPONGE_WIDTH:
            raise ValueError("Domain tag, parameter and two digests must fit in the state.")
        if self.HASH_LEN_FE > self.RATE:
            raise ValueError("A digest must fit in the sponge rate.")
        return self


PROD_CONFIG: Final = HashConfig(
    HASH_LEN_FE=8,
    PARAMETER_LEN=5,
    CAPACITY=9,
    MAX_TREE_HEIGHT=32,
)

TEST_CONFIG: Final = HashConfig(
    HASH_LEN_FE=4,
    PARAMETER_LEN=2,
    CAPACITY=9,
    MAX_TREE_HEIGHT=16,
)

TARGET_CONFIG: Final = TEST_CONFIG if ZKMERKLE_ENV == "test" else PROD_CONFIG
"""The preset selected by `ZKMERKLE_ENV`."""


LEAF_DOMAIN: Final = 0x01
"""Domain tag folded into the sponge capacity of every leaf hash."""

NODE_DOMAIN: Final = Fp(value=0x02)
"""Domain tag prefixed to every two-to-one (internal node) hash."""

BYTES_PER_ELEMENT: Final = 3
"""Bytes packed per field element; 24 bits always fit below P."""
