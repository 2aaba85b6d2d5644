"""
In-circuit counterparts of the hash suite.

Every gadget here computes, over circuit variables, exactly what its native
twin computes over `Fp`: the Poseidon2 modes are the same functions, and
the input layouts come from the native suite itself. A gadget that drifted
from its native twin would make every honest proof fail, so the tests pin
the two together on random inputs.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from ..koalabear import Fp
from ..r1cs import Boolean, ConstraintSystem, FieldVar, UInt8Var
from ..types import MalformedInputError
from .constants import BYTES_PER_ELEMENT, NODE_DOMAIN
from .containers import Digest, HashParams
from .suite import POSEIDON2_SUITE, Poseidon2HashSuite


class DigestVar:
    """A digest inside the circuit: one `FieldVar` per element."""

    __slots__ = ("elements",)

    def __init__(self, elements: list[FieldVar]) -> None:
        self.elements = elements

    @classmethod
    def new_input(cls, cs: ConstraintSystem, name: str, digest: Digest) -> DigestVar:
        """Allocate every element of a known digest as a public input."""
        with cs.namespace(name):
            return cls(
                [
                    FieldVar.new_input(cs, f"element_{i}", lambda e=element: e)
                    for i, element in enumerate(digest.elements)
                ]
            )

    @classmethod
    def new_witness(
        cls,
        cs: ConstraintSystem,
        name: str,
        length: int,
        value_fn: Callable[[], Digest | None],
    ) -> DigestVar:
        """Allocate a private digest of `length` elements."""

        def element(i: int) -> Fp | None:
            digest = value_fn()
            return None if digest is None else digest.elements[i]

        with cs.namespace(name):
            return cls(
                [
                    FieldVar.new_witness(cs, f"element_{i}", lambda i=i: element(i))
                    for i in range(length)
                ]
            )

    @property
    def value(self) -> Digest | None:
        values = [element.value for element in self.elements]
        if any(value is None for value in values):
            return None
        return Digest(elements=tuple(values))  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self.elements)

    def is_eq(self, other: DigestVar) -> Boolean:
        """True exactly when every element matches."""
        if len(self) != len(other):
            raise MalformedInputError(
                f"Cannot compare digests of {len(self)} and {len(other)} elements"
            )
        cs = self.elements[0].cs
        with cs.namespace("digest_is_eq"):
            return Boolean.all_of(cs, [a.is_eq(b) for a, b in zip(self.elements, other.elements)])

    @staticmethod
    def conditionally_swap(
        bit: Boolean, first: DigestVar, second: DigestVar
    ) -> tuple[DigestVar, DigestVar]:
        """
        Return `(second, first)` when `bit` is set, `(first, second)` otherwise.

        One constraint per element: the second output is derived linearly as
        `first + second - selected`.
        """
        left: list[FieldVar] = []
        right: list[FieldVar] = []
        for a, b in zip(first.elements, second.elements, strict=True):
            chosen = bit.select(b, a)
            left.append(chosen)
            right.append(a + b - chosen)
        return DigestVar(left), DigestVar(right)


class HashParamsVar:
    """A public parameter baked into the circuit as constants."""

    __slots__ = ("elements",)

    def __init__(self, elements: list[FieldVar]) -> None:
        self.elements = elements

    @classmethod
    def new_constant(cls, cs: ConstraintSystem, params: HashParams) -> HashParamsVar:
        return cls([FieldVar.constant(cs, element) for element in params.elements])


@runtime_checkable
class HashSuiteGadget(Protocol):
    """The in-circuit hashing capability consumed by the membership circuit."""

    @property
    def digest_length(self) -> int: ...

    @property
    def parameter_length(self) -> int: ...

    def leaf_hash(self, params: HashParamsVar, data: Sequence[UInt8Var]) -> DigestVar:
        """In-circuit leaf hash of a byte string."""
        ...

    def two_to_one_hash(
        self, params: HashParamsVar, left: DigestVar, right: DigestVar
    ) -> DigestVar:
        """In-circuit hash of an ordered pair of digests."""
        ...


class Poseidon2HashGadget:
    """The in-circuit twin of `Poseidon2HashSuite`."""

    def __init__(self, suite: Poseidon2HashSuite = POSEIDON2_SUITE):
        self.suite = suite

    @property
    def digest_length(self) -> int:
        return self.suite.digest_length

    @property
    def parameter_length(self) -> int:
        return self.suite.parameter_length

    def _check_params(self, params: HashParamsVar) -> None:
        try:
            self.suite.check_params(len(params.elements))
        except ValueError as exc:
            raise MalformedInputError(str(exc)) from exc

    def _check_digest(self, digest: DigestVar) -> None:
        try:
            self.suite.check_digest(len(digest))
        except ValueError as exc:
            raise MalformedInputError(str(exc)) from exc

    @staticmethod
    def _pack(data: Sequence[UInt8Var]) -> list[FieldVar]:
        """Circuit version of `pack_bytes`; linear, so it costs nothing."""
        packed: list[FieldVar] = []
        for i in range(0, len(data), BYTES_PER_ELEMENT):
            chunk = data[i : i + BYTES_PER_ELEMENT]
            packed.append(
                sum(
                    (byte.var * Fp(value=1 << (8 * k)) for k, byte in enumerate(chunk)),
                    Fp(value=0),
                )
            )
        return packed

    def leaf_hash(self, params: HashParamsVar, data: Sequence[UInt8Var]) -> DigestVar:
        self._check_params(params)
        cs = params.elements[0].cs
        with cs.namespace("leaf_hash"):
            output = self.suite.engine.sponge(
                [*params.elements, *self._pack(data)],
                self.suite.leaf_capacity(len(data)),
                self.digest_length,
            )
        return DigestVar([FieldVar.lift(cs, element) for element in output])

    def two_to_one_hash(
        self, params: HashParamsVar, left: DigestVar, right: DigestVar
    ) -> DigestVar:
        self._check_params(params)
        self._check_digest(left)
        self._check_digest(right)
        cs = params.elements[0].cs
        with cs.namespace("two_to_one_hash"):
            output = self.suite.engine.compress(
                [NODE_DOMAIN, *params.elements, *left.elements, *right.elements],
                self.digest_length,
            )
        return DigestVar([FieldVar.lift(cs, element) for element in output])


POSEIDON2_GADGET = Poseidon2HashGadget()
"""The gadget paired with `POSEIDON2_SUITE`."""
