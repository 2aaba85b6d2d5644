"""
The boundary to a succinct proof backend.

No backend ships with this package. Anything that can turn a satisfied
constraint system into a proof, and check that proof against an instance
assignment, fits the `ProofBackend` protocol.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

from ..hashing import POSEIDON2_GADGET, Digest, HashParams, HashSuiteGadget
from ..koalabear import Fp
from ..merkle import MembershipStatement
from ..r1cs import ConstraintSystem
from .membership import MembershipCircuit, generate_constraints

ProofT = TypeVar("ProofT")


class ProofBackend(Protocol[ProofT]):
    """A proving system over KoalaBear rank-1 constraint systems."""

    def prove(self, cs: ConstraintSystem) -> ProofT:
        """Produce a proof for a fully assigned system."""
        ...

    def verify(self, proof: ProofT, public_inputs: Sequence[Fp]) -> bool:
        """Accept or reject a proof for the given instance assignment."""
        ...


def prove_membership(
    backend: ProofBackend[ProofT],
    statement: MembershipStatement,
    leaf_params: HashParams,
    two_to_one_params: HashParams,
    gadget: HashSuiteGadget = POSEIDON2_GADGET,
) -> ProofT:
    """Synthesize the statement and hand the system to the backend."""
    cs = generate_constraints(statement, leaf_params, two_to_one_params, gadget=gadget)
    return backend.prove(cs)


def verify_membership(
    backend: ProofBackend[ProofT],
    proof: ProofT,
    root: Digest,
    leaf: bytes,
) -> bool:
    """Check a proof using only the public root and leaf."""
    return backend.verify(proof, MembershipCircuit.public_inputs(root, leaf))
