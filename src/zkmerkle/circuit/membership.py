"""
The membership circuit.

### Statement

Public: the Merkle `root` and the claimed `leaf` bytes.
Private: the authentication path.
Constants: the two hash parameters, fixed when the circuit is defined.

### Synthesis

A single pass, in this order:

1.  Allocate the root elements and the leaf bytes as public inputs.
2.  Embed both hash parameters as constants.
3.  Allocate the path (siblings and direction bits) as witnesses.
4.  Recompute the root from the leaf and the path with the hash gadgets.
5.  Compare it with the public root and enforce the result to be true.

A false statement still synthesizes; it just yields a system that is not
satisfied. `SynthesisError` is reserved for circuits that cannot be built.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..hashing import (
    POSEIDON2_GADGET,
    Digest,
    DigestVar,
    HashParams,
    HashParamsVar,
    HashSuiteGadget,
)
from ..koalabear import Fp
from ..merkle import MembershipStatement
from ..r1cs import ConstraintSystem, ConstraintTracer, SynthesisMode, UInt8Var
from ..types import MalformedInputError, MissingWitnessError
from .path_var import AuthenticationPathVar

logger = logging.getLogger(__name__)


class MembershipCircuit:
    """Constraint generator for one membership statement."""

    def __init__(
        self,
        statement: MembershipStatement,
        leaf_params: HashParams,
        two_to_one_params: HashParams,
        gadget: HashSuiteGadget = POSEIDON2_GADGET,
        height: int | None = None,
    ) -> None:
        """
        Args:
            statement: Root, leaf and (optionally) the path.
            leaf_params: Constant parameter of the leaf hash.
            two_to_one_params: Constant parameter of the two-to-one hash.
            gadget: The in-circuit hash suite.
            height: Path height. Required for a setup-mode synthesis without
                a path; otherwise taken from the path.
        """
        self.statement = statement
        self.leaf_params = leaf_params
        self.two_to_one_params = two_to_one_params
        self.gadget = gadget
        self.height = height

    @staticmethod
    def public_inputs(root: Digest, leaf: bytes) -> list[Fp]:
        """
        The instance assignment a verifier supplies for `(root, leaf)`.

        Matches the allocation order of `generate_constraints`: the root
        elements, then one input per leaf byte.
        """
        return [*root.elements, *(Fp(value=byte) for byte in leaf)]

    def _check_inputs(self) -> None:
        width = self.gadget.digest_length
        if len(self.statement.root) != width:
            raise MalformedInputError(
                f"Root must have {width} elements, got {len(self.statement.root)}",
                namespace="root_var",
            )
        expected = self.gadget.parameter_length
        for params in (self.leaf_params, self.two_to_one_params):
            if len(params.elements) != expected:
                raise MalformedInputError(
                    f"Expected a parameter of {expected} elements, got {len(params.elements)}"
                )

    def _resolve_height(self, cs: ConstraintSystem) -> int:
        path = self.statement.auth_path
        if path is None:
            if not cs.is_in_setup_mode:
                raise MissingWitnessError(
                    "No authentication path supplied", namespace="path_var"
                )
            if self.height is None:
                raise MalformedInputError(
                    "Setup synthesis needs the path height", namespace="path_var"
                )
            return self.height

        if self.height is not None and self.height != path.height:
            raise MalformedInputError(
                f"Path has {path.height} levels, circuit expects {self.height}",
                namespace="path_var",
            )
        width = self.gadget.digest_length
        if any(len(sibling) != width for sibling in path.siblings):
            raise MalformedInputError(
                f"Path siblings must have {width} elements", namespace="path_var"
            )
        return path.height

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        """
        Emit the membership constraints into `cs`.

        Every input is checked before the first allocation, so `cs` is
        left untouched when this raises.

        Raises:
            MissingWitnessError: If proving without a path.
            MalformedInputError: If the root, parameters or path have the
                wrong shape.
        """
        statement = self.statement
        width = self.gadget.digest_length
        self._check_inputs()
        height = self._resolve_height(cs)

        # Public inputs.
        root = DigestVar.new_input(cs, "root_var", statement.root)
        leaf = UInt8Var.new_input_vec(cs, "leaf_var", statement.leaf)

        # Constants.
        leaf_params = HashParamsVar.new_constant(cs, self.leaf_params)
        two_to_one_params = HashParamsVar.new_constant(cs, self.two_to_one_params)

        # Private witness.
        path = AuthenticationPathVar.new_witness(
            cs, "path_var", height, width, lambda: statement.auth_path
        )

        with cs.namespace("membership"):
            is_member = path.verify_membership(
                self.gadget, leaf_params, two_to_one_params, root, leaf
            )
            is_member.enforce_equal(True, "is_member")

        logger.debug(
            "Synthesized membership circuit (%s): %d constraints, %d instance, %d witness",
            cs.mode.value,
            cs.num_constraints,
            cs.num_instance_variables,
            cs.num_witness_variables,
        )


def generate_constraints(
    statement: MembershipStatement,
    leaf_params: HashParams,
    two_to_one_params: HashParams,
    *,
    gadget: HashSuiteGadget = POSEIDON2_GADGET,
    mode: SynthesisMode = SynthesisMode.PROVE,
    height: int | None = None,
    tracer: ConstraintTracer | None = None,
) -> ConstraintSystem:
    """
    Synthesize a statement into a fresh constraint system.

    The system is only returned once synthesis has completed, so a failure
    never leaves a half-built system behind.
    """
    cs = ConstraintSystem(mode=mode, tracer=tracer)
    circuit = MembershipCircuit(statement, leaf_params, two_to_one_params, gadget, height)
    circuit.generate_constraints(cs)
    return cs


def public_inputs(root: Digest, leaf: bytes | Sequence[int]) -> list[Fp]:
    """Module-level alias of `MembershipCircuit.public_inputs`."""
    return MembershipCircuit.public_inputs(root, bytes(leaf))
