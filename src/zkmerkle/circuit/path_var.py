"""The authentication path as a private circuit witness."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..hashing import DigestVar, HashParamsVar, HashSuiteGadget
from ..merkle import AuthenticationPath
from ..r1cs import Boolean, ConstraintSystem, UInt8Var


class AuthenticationPathVar:
    """
    In-circuit twin of `AuthenticationPath`.

    Every sibling element and every direction bit is a witness; the verifier
    learns nothing about them beyond what the final equality reveals.
    """

    def __init__(
        self,
        cs: ConstraintSystem,
        siblings: list[DigestVar],
        is_right_child: list[Boolean],
    ) -> None:
        self.cs = cs
        self.siblings = siblings
        self.is_right_child = is_right_child

    @classmethod
    def new_witness(
        cls,
        cs: ConstraintSystem,
        name: str,
        height: int,
        digest_length: int,
        value_fn: Callable[[], AuthenticationPath | None],
    ) -> AuthenticationPathVar:
        """
        Allocate a path of `height` levels.

        `value_fn` is only consulted in prove mode; returning `None` there
        surfaces as `MissingWitnessError` on the first allocation.
        """

        def sibling(level: int):
            path = value_fn()
            return None if path is None else path.siblings[level]

        def direction(level: int) -> bool | None:
            path = value_fn()
            return None if path is None else path.is_right_child[level]

        siblings: list[DigestVar] = []
        bits: list[Boolean] = []
        with cs.namespace(name):
            for level in range(height):
                with cs.namespace(f"level_{level}"):
                    siblings.append(
                        DigestVar.new_witness(
                            cs, "sibling", digest_length, lambda level=level: sibling(level)
                        )
                    )
                    bits.append(
                        Boolean.new_witness(
                            cs, "is_right_child", lambda level=level: direction(level)
                        )
                    )
        return cls(cs, siblings, bits)

    @property
    def height(self) -> int:
        return len(self.siblings)

    def calculate_root(
        self,
        gadget: HashSuiteGadget,
        leaf_params: HashParamsVar,
        two_to_one_params: HashParamsVar,
        leaf: Sequence[UInt8Var],
    ) -> DigestVar:
        """Fold the leaf through the path, exactly as the native verifier does."""
        current = gadget.leaf_hash(leaf_params, leaf)
        for level, (sibling, is_right) in enumerate(zip(self.siblings, self.is_right_child)):
            with self.cs.namespace(f"level_{level}"):
                left, right = DigestVar.conditionally_swap(is_right, current, sibling)
                current = gadget.two_to_one_hash(two_to_one_params, left, right)
        return current

    def verify_membership(
        self,
        gadget: HashSuiteGadget,
        leaf_params: HashParamsVar,
        two_to_one_params: HashParamsVar,
        root: DigestVar,
        leaf: Sequence[UInt8Var],
    ) -> Boolean:
        """A boolean that holds exactly when the path leads from `leaf` to `root`."""
        return self.calculate_root(gadget, leaf_params, two_to_one_params, leaf).is_eq(root)
