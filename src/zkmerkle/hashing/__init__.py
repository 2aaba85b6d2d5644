"""
The hash suite: leaf hash, two-to-one hash, their parameters and gadgets.

Native and in-circuit implementations sit behind two small protocols,
`HashSuite` and `HashSuiteGadget`, so another hash can be substituted
without touching the accumulator or the circuit.
"""

from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, HashConfig
from .containers import Digest, HashParams
from .gadgets import (
    POSEIDON2_GADGET,
    DigestVar,
    HashParamsVar,
    HashSuiteGadget,
    Poseidon2HashGadget,
)
from .poseidon import POSEIDON2_ENGINE, Poseidon2Engine, pack_bytes
from .suite import POSEIDON2_SUITE, HashSuite, Poseidon2HashSuite

__all__ = [
    "HashConfig",
    "PROD_CONFIG",
    "TEST_CONFIG",
    "TARGET_CONFIG",
    "Digest",
    "HashParams",
    "HashSuite",
    "Poseidon2HashSuite",
    "POSEIDON2_SUITE",
    "HashSuiteGadget",
    "Poseidon2HashGadget",
    "POSEIDON2_GADGET",
    "DigestVar",
    "HashParamsVar",
    "Poseidon2Engine",
    "POSEIDON2_ENGINE",
    "pack_bytes",
]
