"""Rank-1 constraint system over KoalaBear and its basic gadgets."""

from .boolean import Boolean
from .constraint_system import (
    ONE_VARIABLE,
    Constraint,
    ConstraintSystem,
    ConstraintTrace,
    ConstraintTracer,
    LinearCombination,
    SynthesisMode,
)
from .field_var import FieldVar
from .uint8 import UInt8Var

__all__ = [
    "ConstraintSystem",
    "Constraint",
    "ConstraintTrace",
    "ConstraintTracer",
    "LinearCombination",
    "SynthesisMode",
    "ONE_VARIABLE",
    "FieldVar",
    "Boolean",
    "UInt8Var",
]
