"""In-circuit booleans and the small gadgets built on them."""

from __future__ import annotations

from collections.abc import Callable

from ..koalabear import Fp
from .constraint_system import ONE_VARIABLE, ConstraintSystem
from .field_var import FieldVar


class Boolean:
    """
    A circuit value constrained to be 0 or 1.

    Booleans allocated with `new_witness` carry the constraint `b * b = b`.
    Booleans produced by other gadgets (products of booleans, `is_zero`) are
    boolean by construction and carry no extra constraint.
    """

    __slots__ = ("var",)

    def __init__(self, var: FieldVar) -> None:
        self.var = var

    @classmethod
    def constant(cls, cs: ConstraintSystem, bit: bool) -> Boolean:
        return cls(FieldVar.constant(cs, Fp(value=int(bit))))

    @classmethod
    def new_witness(
        cls, cs: ConstraintSystem, name: str, value_fn: Callable[[], bool | None]
    ) -> Boolean:
        """Allocate a private bit and enforce its booleanity."""

        def as_field() -> Fp | None:
            bit = value_fn()
            return None if bit is None else Fp(value=int(bit))

        var = FieldVar.new_witness(cs, name, as_field)
        cs.enforce(var.lc, var.lc, var.lc, f"{name}_is_boolean")
        return cls(var)

    @property
    def cs(self) -> ConstraintSystem:
        return self.var.cs

    @property
    def value(self) -> bool | None:
        value = self.var.value
        return None if value is None else value.value == 1

    def not_(self) -> Boolean:
        """Logical negation; free."""
        return Boolean(Fp(value=1) - self.var)

    def and_(self, other: Boolean) -> Boolean:
        """Logical conjunction; one constraint unless an operand is constant."""
        return Boolean(self.var.mul(other.var, "and"))

    @classmethod
    def all_of(cls, cs: ConstraintSystem, bits: list[Boolean]) -> Boolean:
        """Conjunction of a list of booleans; true for an empty list."""
        result = cls.constant(cs, True)
        for bit in bits:
            result = result.and_(bit)
        return result

    def select(self, if_true: FieldVar, if_false: FieldVar) -> FieldVar:
        """
        Return `if_true` when this bit is set, `if_false` otherwise.

        Computed as `if_false + bit * (if_true - if_false)`: one constraint.
        """
        return if_false + self.var.mul(if_true - if_false, "select")

    def enforce_equal(self, other: Boolean | bool, name: str = "enforce_equal") -> None:
        """Constrain this bit to equal another bit or a constant."""
        if isinstance(other, bool):
            expected: FieldVar | Fp = Fp(value=int(other))
        else:
            expected = other.var
        self.var.enforce_equal(expected, name)

    @property
    def is_constant(self) -> bool:
        return all(index == ONE_VARIABLE for index in self.var.lc)

    def __repr__(self) -> str:
        return f"Boolean(value={self.value!r})"
