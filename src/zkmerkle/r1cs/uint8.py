"""Public bytes, range-checked to eight bits."""

from __future__ import annotations

from ..koalabear import Fp
from .boolean import Boolean
from .constraint_system import ConstraintSystem
from .field_var import FieldVar


class UInt8Var:
    """
    A byte inside the circuit.

    The byte is a single field variable, backed by eight witness bits whose
    weighted sum is constrained to equal it. Without that decomposition a
    prover could substitute any field element for a byte and break the
    injectivity of byte packing.
    """

    __slots__ = ("var", "bits")

    def __init__(self, var: FieldVar, bits: list[Boolean]) -> None:
        self.var = var
        self.bits = bits

    @classmethod
    def new_input_vec(cls, cs: ConstraintSystem, name: str, data: bytes) -> list[UInt8Var]:
        """
        Allocate every byte of `data` as a public input.

        Costs nine constraints per byte: eight booleanity checks and one
        recomposition.
        """
        out: list[UInt8Var] = []
        with cs.namespace(name):
            for i, byte in enumerate(data):
                with cs.namespace(f"byte_{i}"):
                    var = FieldVar.new_input(cs, "value", lambda byte=byte: Fp(value=byte))
                    bits = [
                        Boolean.new_witness(
                            cs, f"bit_{k}", lambda byte=byte, k=k: bool((byte >> k) & 1)
                        )
                        for k in range(8)
                    ]
                    recomposed = sum(
                        (bit.var * Fp(value=1 << k) for k, bit in enumerate(bits)),
                        Fp(value=0),
                    )
                    var.enforce_equal(recomposed, "recompose")
                out.append(cls(var, bits))
        return out

    @property
    def value(self) -> int | None:
        value = self.var.value
        return None if value is None else value.value
