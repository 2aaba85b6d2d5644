"""
A rank-1 constraint system over the KoalaBear field.

### What is being built

A rank-1 constraint system (R1CS) is a list of equations of the form

    <A, z> * <B, z> = <C, z>

where `z` is the full variable assignment and `A`, `B`, `C` are linear
combinations. Variable 0 is fixed to the constant one, so affine terms are
just coefficients on that variable.

Variables come in two visibilities:

- **Instance** variables (public inputs): supplied by the verifier.
- **Witness** variables: known only to the prover.

A succinct proof backend consumes the finished system together with the
instance assignment; this module only builds and inspects it.

### Modes

In `SynthesisMode.PROVE` every allocation carries a value and the system
can be checked for satisfiability. In `SynthesisMode.SETUP` the same shape
is produced without any values; this is the shape a backend needs for key
generation, and it never asks for a witness.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from ..koalabear import P, Fp
from ..types import AssignmentMissingError, MissingWitnessError

logger = logging.getLogger(__name__)

LinearCombination = dict[int, int]
"""Sparse linear combination: variable index -> coefficient in [0, P)."""

ONE_VARIABLE: int = 0
"""Index of the variable pinned to the constant one."""


class SynthesisMode(Enum):
    """Whether allocations carry values."""

    PROVE = "prove"
    """Every variable is assigned; satisfiability can be checked."""

    SETUP = "setup"
    """Shape only; value closures are never invoked."""


@dataclass(frozen=True, slots=True)
class Constraint:
    """A single rank-1 constraint `a * b = c`."""

    a: LinearCombination
    b: LinearCombination
    c: LinearCombination
    label: str
    """Fully namespaced name, used to report the offending constraint."""


@dataclass(frozen=True, slots=True)
class ConstraintTrace:
    """What a tracer sees for each emitted constraint."""

    index: int
    label: str
    num_terms: int
    """Total number of non-zero terms across a, b and c."""


ConstraintTracer = Callable[[ConstraintTrace], None]


class ConstraintSystem:
    """
    A mutable R1CS instance, owned by a single synthesis pass.

    The system is not thread-safe and is not meant to be: exactly one circuit
    writes to it, then it is handed over for inspection or proving.
    """

    def __init__(
        self,
        mode: SynthesisMode = SynthesisMode.PROVE,
        tracer: ConstraintTracer | None = None,
    ) -> None:
        """
        Args:
            mode: Whether allocations carry values.
            tracer: Optional diagnostic hook, called once per emitted constraint.
        """
        self.mode = mode
        self.tracer = tracer
        self.constraints: list[Constraint] = []

        # Variable 0 is the constant one and counts as an instance variable.
        self._values: list[int | None] = [1]
        self._is_public: list[bool] = [True]
        self._labels: list[str] = ["one"]
        self._namespace: list[str] = []

    # =================================================================
    # Namespaces
    # =================================================================

    @property
    def is_in_setup_mode(self) -> bool:
        """Whether this system is being synthesized without values."""
        return self.mode is SynthesisMode.SETUP

    @contextmanager
    def namespace(self, name: str) -> Iterator[None]:
        """
        Scope every allocation and constraint under `name`.

        Namespaces nest, and labels are joined with `/`, e.g.
        `path_var/level_1/sibling_3`.
        """
        self._namespace.append(name)
        try:
            yield
        finally:
            self._namespace.pop()

    @property
    def current_namespace(self) -> str:
        """The active namespace path, or the empty string at the top level."""
        return "/".join(self._namespace)

    def _qualify(self, name: str) -> str:
        return "/".join([*self._namespace, name])

    # =================================================================
    # Allocation
    # =================================================================

    def _allocate(self, name: str, value_fn: Callable[[], Fp | None], public: bool) -> int:
        label = self._qualify(name)
        value: int | None = None
        if not self.is_in_setup_mode:
            assigned = value_fn()
            if assigned is None:
                raise MissingWitnessError("No value supplied for variable", namespace=label)
            value = assigned.value

        self._values.append(value)
        self._is_public.append(public)
        self._labels.append(label)
        return len(self._values) - 1

    def new_input(self, name: str, value_fn: Callable[[], Fp | None]) -> int:
        """Allocate a public (instance) variable and return its index."""
        return self._allocate(name, value_fn, public=True)

    def new_witness(self, name: str, value_fn: Callable[[], Fp | None]) -> int:
        """Allocate a private (witness) variable and return its index."""
        return self._allocate(name, value_fn, public=False)

    # =================================================================
    # Constraints
    # =================================================================

    def enforce(
        self,
        a: LinearCombination,
        b: LinearCombination,
        c: LinearCombination,
        name: str = "constraint",
    ) -> None:
        """Emit the constraint `a * b = c` under the current namespace."""
        constraint = Constraint(a=dict(a), b=dict(b), c=dict(c), label=self._qualify(name))
        self.constraints.append(constraint)

        if self.tracer is not None:
            self.tracer(
                ConstraintTrace(
                    index=len(self.constraints) - 1,
                    label=constraint.label,
                    num_terms=len(a) + len(b) + len(c),
                )
            )

    # =================================================================
    # Evaluation
    # =================================================================

    def evaluate(self, lc: LinearCombination) -> int | None:
        """
        Evaluate a linear combination against the current assignment.

        Returns `None` when any referenced variable has no value, which is
        always the case in setup mode.
        """
        acc = 0
        for index, coeff in lc.items():
            value = self._values[index]
            if value is None:
                return None
            acc += coeff * value
        return acc % P

    def value(self, index: int) -> Fp:
        """
        Return the value assigned to a variable.

        Raises:
            AssignmentMissingError: If the variable carries no value.
        """
        value = self._values[index]
        if value is None:
            raise AssignmentMissingError(
                "Variable has no assigned value", namespace=self._labels[index]
            )
        return Fp(value=value)

    def which_is_unsatisfied(self) -> str | None:
        """
        Find the first constraint that does not hold.

        Returns:
            The namespaced label of that constraint, or `None` if all hold.

        Raises:
            AssignmentMissingError: If the system was synthesized without values.
        """
        if self.is_in_setup_mode:
            raise AssignmentMissingError("Cannot check satisfiability of a setup-mode system")

        for constraint in self.constraints:
            a = self.evaluate(constraint.a)
            b = self.evaluate(constraint.b)
            c = self.evaluate(constraint.c)
            if a is None or b is None or c is None:
                raise AssignmentMissingError(
                    "Constraint references an unassigned variable", namespace=constraint.label
                )
            if (a * b - c) % P != 0:
                logger.debug("Constraint %s is unsatisfied", constraint.label)
                return constraint.label
        return None

    def is_satisfied(self) -> bool:
        """Whether every constraint holds under the current assignment."""
        return self.which_is_unsatisfied() is None

    # =================================================================
    # Shape and assignment
    # =================================================================

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_instance_variables(self) -> int:
        """Number of public variables, including the constant one."""
        return sum(self._is_public)

    @property
    def num_witness_variables(self) -> int:
        return len(self._is_public) - self.num_instance_variables

    @property
    def instance_assignment(self) -> list[Fp]:
        """
        Public input values in allocation order, without the constant one.

        This is the vector a verifier hands to the proof backend.
        """
        return [
            self.value(index)
            for index in range(1, len(self._values))
            if self._is_public[index]
        ]

    @property
    def witness_assignment(self) -> list[Fp]:
        """Private values in allocation order."""
        return [self.value(index) for index, public in enumerate(self._is_public) if not public]

    def variable_label(self, index: int) -> str:
        """The namespaced label a variable was allocated under."""
        return self._labels[index]
