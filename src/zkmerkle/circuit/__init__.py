"""The membership circuit and the proof-backend boundary."""

from .backend import ProofBackend, prove_membership, verify_membership
from .membership import MembershipCircuit, generate_constraints, public_inputs
from .path_var import AuthenticationPathVar

__all__ = [
    "MembershipCircuit",
    "generate_constraints",
    "public_inputs",
    "AuthenticationPathVar",
    "ProofBackend",
    "prove_membership",
    "verify_membership",
]
