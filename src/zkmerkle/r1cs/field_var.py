"""
In-circuit field elements.

A `FieldVar` is a linear combination of constraint-system variables. Adding,
subtracting and scaling by constants are free: they only rewrite the linear
combination. Multiplying two non-constant values allocates the product as a
new witness and emits exactly one constraint.

`FieldVar` interoperates with native `Fp` constants in both operand orders,
so code written for `Fp` (such as the Poseidon2 permutation) runs unchanged
on circuit values.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ..koalabear import P, Fp
from .constraint_system import ONE_VARIABLE, ConstraintSystem, LinearCombination

if TYPE_CHECKING:
    from .boolean import Boolean


def _scaled(lc: LinearCombination, scale: int) -> LinearCombination:
    scale %= P
    if scale == 0:
        return {}
    return {index: (coeff * scale) % P for index, coeff in lc.items()}


def _summed(left: LinearCombination, right: LinearCombination) -> LinearCombination:
    out = dict(left)
    for index, coeff in right.items():
        merged = (out.get(index, 0) + coeff) % P
        if merged:
            out[index] = merged
        else:
            out.pop(index, None)
    return out


class FieldVar:
    """A field element inside a constraint system."""

    __slots__ = ("cs", "lc")

    def __init__(self, cs: ConstraintSystem, lc: LinearCombination) -> None:
        self.cs = cs
        self.lc = lc

    # =================================================================
    # Construction
    # =================================================================

    @classmethod
    def constant(cls, cs: ConstraintSystem, value: Fp) -> FieldVar:
        """A constant baked into the circuit; allocates nothing."""
        return cls(cs, {ONE_VARIABLE: value.value} if value.value else {})

    @classmethod
    def new_input(
        cls, cs: ConstraintSystem, name: str, value_fn: Callable[[], Fp | None]
    ) -> FieldVar:
        """Allocate a public input."""
        return cls(cs, {cs.new_input(name, value_fn): 1})

    @classmethod
    def new_witness(
        cls, cs: ConstraintSystem, name: str, value_fn: Callable[[], Fp | None]
    ) -> FieldVar:
        """Allocate a private witness."""
        return cls(cs, {cs.new_witness(name, value_fn): 1})

    @classmethod
    def lift(cls, cs: ConstraintSystem, value: FieldVar | Fp) -> FieldVar:
        """Return `value` as a `FieldVar`, wrapping native constants."""
        if isinstance(value, FieldVar):
            return value
        return cls.constant(cs, value)

    # =================================================================
    # Inspection
    # =================================================================

    @property
    def is_constant(self) -> bool:
        """Whether the combination only involves the constant-one variable."""
        return all(index == ONE_VARIABLE for index in self.lc)

    @property
    def value(self) -> Fp | None:
        """The assigned value, or `None` when synthesizing in setup mode."""
        evaluated = self.cs.evaluate(self.lc)
        return None if evaluated is None else Fp(value=evaluated)

    # =================================================================
    # Linear arithmetic (free)
    # =================================================================

    def _coerce(self, other: object) -> LinearCombination | None:
        if isinstance(other, FieldVar):
            return other.lc
        if isinstance(other, Fp):
            return {ONE_VARIABLE: other.value} if other.value else {}
        return None

    def __add__(self, other: object) -> FieldVar:
        lc = self._coerce(other)
        if lc is None:
            return NotImplemented
        return FieldVar(self.cs, _summed(self.lc, lc))

    __radd__ = __add__

    def __neg__(self) -> FieldVar:
        return FieldVar(self.cs, _scaled(self.lc, -1))

    def __sub__(self, other: object) -> FieldVar:
        lc = self._coerce(other)
        if lc is None:
            return NotImplemented
        return FieldVar(self.cs, _summed(self.lc, _scaled(lc, -1)))

    def __rsub__(self, other: object) -> FieldVar:
        lc = self._coerce(other)
        if lc is None:
            return NotImplemented
        return FieldVar(self.cs, _summed(lc, _scaled(self.lc, -1)))

    # =================================================================
    # Multiplication (one constraint per non-constant product)
    # =================================================================

    def __mul__(self, other: object) -> FieldVar:
        if isinstance(other, Fp):
            return FieldVar(self.cs, _scaled(self.lc, other.value))
        if not isinstance(other, FieldVar):
            return NotImplemented
        return self.mul(other)

    __rmul__ = __mul__

    def mul(self, other: FieldVar, name: str = "mul") -> FieldVar:
        """Multiply two circuit values, emitting a constraint when both vary."""
        if self.is_constant:
            return FieldVar(self.cs, _scaled(other.lc, self.lc.get(ONE_VARIABLE, 0)))
        if other.is_constant:
            return FieldVar(self.cs, _scaled(self.lc, other.lc.get(ONE_VARIABLE, 0)))

        def product() -> Fp | None:
            left, right = self.value, other.value
            if left is None or right is None:
                return None
            return left * right

        out = FieldVar.new_witness(self.cs, name, product)
        self.cs.enforce(self.lc, other.lc, out.lc, name)
        return out

    def __pow__(self, exponent: int) -> FieldVar:
        """Square-and-multiply; costs one constraint per multiplication."""
        if exponent < 1:
            raise ValueError("Exponent must be positive")
        result: FieldVar | None = None
        base = self
        while exponent:
            if exponent & 1:
                result = base if result is None else result.mul(base, "pow")
            exponent >>= 1
            if exponent:
                base = base.mul(base, "square")
        assert result is not None
        return result

    # =================================================================
    # Equality
    # =================================================================

    def enforce_equal(self, other: FieldVar | Fp, name: str = "enforce_equal") -> None:
        """Emit `(self - other) * 1 = 0`."""
        self.cs.enforce((self - other).lc, {ONE_VARIABLE: 1}, {}, name)

    def is_zero(self) -> Boolean:
        """
        Return a boolean that is true exactly when this value is zero.

        Uses the inverse-witness gadget with two constraints:

            self * inv = 1 - z
            self * z   = 0

        If `self != 0` the second forces `z = 0`; if `self = 0` the first
        forces `z = 1`. `z` is therefore boolean without a separate check.
        """
        from .boolean import Boolean

        cs = self.cs
        if self.is_constant:
            return Boolean.constant(cs, self.lc.get(ONE_VARIABLE, 0) == 0)

        with cs.namespace("is_zero"):

            def flag() -> Fp | None:
                value = self.value
                return None if value is None else Fp(value=int(value.value == 0))

            def inverse() -> Fp | None:
                value = self.value
                if value is None:
                    return None
                return Fp(value=0) if value.value == 0 else value.inverse()

            z = FieldVar.new_witness(cs, "flag", flag)
            inv = FieldVar.new_witness(cs, "inverse", inverse)
            cs.enforce(self.lc, inv.lc, (Fp(value=1) - z).lc, "nonzero_has_inverse")
            cs.enforce(self.lc, z.lc, {}, "zero_when_flagged")

        return Boolean(z)

    def is_eq(self, other: FieldVar | Fp) -> Boolean:
        """Return a boolean that is true exactly when both values are equal."""
        return (self - other).is_zero()

    def __repr__(self) -> str:
        return f"FieldVar(value={self.value!r}, terms={len(self.lc)})"
