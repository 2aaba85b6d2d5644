"""
The native hash suite.

A Merkle accumulator needs exactly two hash functions:

- a **leaf hash**, compressing an arbitrary byte string to a digest, and
- a **two-to-one hash**, compressing a pair of digests to one digest.

Each has a public parameter produced by a setup routine. `HashSuite` is
the capability boundary the accumulator depends on; `Poseidon2HashSuite`
is the implementation shipped here, and `Poseidon2HashGadget` (in
`gadgets`) is its in-circuit twin.

### Domain separation

The two functions can never collide with each other:

- Leaves go through the sponge, whose capacity is seeded with a separator
  derived from `(LEAF_DOMAIN, PARAMETER_LEN, len(data))`. Folding the
  byte length in makes byte packing injective across lengths.
- Internal nodes go through the compression function with the input
  `NODE_DOMAIN || params || left || right`.
"""

from __future__ import annotations

import random
import secrets
from typing import Protocol, runtime_checkable

from ..koalabear import ZERO, Fp, P
from .constants import LEAF_DOMAIN, NODE_DOMAIN, TARGET_CONFIG, HashConfig
from .containers import Digest, HashParams
from .poseidon import POSEIDON2_ENGINE, Poseidon2Engine, pack_bytes


@runtime_checkable
class HashSuite(Protocol):
    """The native hashing capability consumed by the Merkle accumulator."""

    @property
    def digest_length(self) -> int:
        """Number of field elements in every digest this suite produces."""
        ...

    @property
    def parameter_length(self) -> int:
        """Number of field elements in a public parameter."""
        ...

    def setup(self, rng: random.Random | None = None) -> HashParams:
        """Sample a fresh public parameter."""
        ...

    def leaf_hash(self, params: HashParams, data: bytes) -> Digest:
        """Hash a leaf's bytes."""
        ...

    def two_to_one_hash(self, params: HashParams, left: Digest, right: Digest) -> Digest:
        """Hash an ordered pair of child digests into their parent."""
        ...

    def empty_digest(self) -> Digest:
        """The filler node used to pad the leaf level to a power of two."""
        ...


class Poseidon2HashSuite:
    """Poseidon2-based leaf and two-to-one hashes for one configuration."""

    def __init__(
        self, config: HashConfig = TARGET_CONFIG, engine: Poseidon2Engine = POSEIDON2_ENGINE
    ):
        self.config = config
        self.engine = engine

    @property
    def digest_length(self) -> int:
        return self.config.HASH_LEN_FE

    @property
    def parameter_length(self) -> int:
        return self.config.PARAMETER_LEN

    def setup(self, rng: random.Random | None = None) -> HashParams:
        """
        Sample `PARAMETER_LEN` uniform field elements.

        Args:
            rng: The randomness source. Pass a seeded `random.Random` for
                reproducible parameters; `None` uses the OS CSPRNG.
        """
        draw = secrets.randbelow if rng is None else rng.randrange
        return HashParams(
            elements=tuple(Fp(value=draw(P)) for _ in range(self.config.PARAMETER_LEN))
        )

    def empty_digest(self) -> Digest:
        """
        The all-zero digest.

        It is not the leaf hash of any byte string a prover could name, so
        padding positions cannot be opened as members.
        """
        return Digest(elements=(ZERO,) * self.digest_length)

    # =================================================================
    # Input layout, shared with the gadget
    # =================================================================

    def check_params(self, params_len: int) -> None:
        if params_len != self.config.PARAMETER_LEN:
            raise ValueError(
                f"Expected a parameter of {self.config.PARAMETER_LEN} elements, got {params_len}"
            )

    def check_digest(self, digest_len: int) -> None:
        if digest_len != self.digest_length:
            raise ValueError(
                f"Expected a digest of {self.digest_length} elements, got {digest_len}"
            )

    def leaf_capacity(self, data_len: int) -> tuple[Fp, ...]:
        """The sponge capacity value for a leaf of `data_len` bytes."""
        return self.engine.safe_domain_separator(
            (LEAF_DOMAIN, self.config.PARAMETER_LEN, data_len), self.config.CAPACITY
        )

    # =================================================================
    # Hashes
    # =================================================================

    def leaf_hash(self, params: HashParams, data: bytes) -> Digest:
        """Sponge over `params || pack_bytes(data)`."""
        self.check_params(len(params.elements))
        output = self.engine.sponge(
            [*params.elements, *pack_bytes(data)],
            self.leaf_capacity(len(data)),
            self.digest_length,
        )
        return Digest(elements=tuple(output))

    def two_to_one_hash(self, params: HashParams, left: Digest, right: Digest) -> Digest:
        """Compression over `NODE_DOMAIN || params || left || right`."""
        self.check_params(len(params.elements))
        self.check_digest(len(left))
        self.check_digest(len(right))
        output = self.engine.compress(
            [NODE_DOMAIN, *params.elements, *left.elements, *right.elements],
            self.digest_length,
        )
        return Digest(elements=tuple(output))


POSEIDON2_SUITE = Poseidon2HashSuite()
"""The suite for the preset selected by `ZKMERKLE_ENV`."""
