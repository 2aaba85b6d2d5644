"""
Tests for the membership circuit.

A true statement must synthesize to a satisfied system and a false one to
an unsatisfied system; only malformed or incomplete inputs may raise.
"""

import logging
import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from zkmerkle.circuit import MembershipCircuit, generate_constraints, public_inputs
from zkmerkle.hashing import POSEIDON2_SUITE, Digest, HashParams
from zkmerkle.merkle import MERKLE_ACCUMULATOR, MembershipStatement, MerkleTree
from zkmerkle.r1cs import ConstraintSystem, ConstraintTrace, SynthesisMode
from zkmerkle.types import MalformedInputError, MissingWitnessError, SynthesisError

LEAVES = [b"alice", b"bob", b"carol", b"dave"]


@pytest.fixture
def tree(leaf_params: HashParams, node_params: HashParams) -> MerkleTree:
    return MERKLE_ACCUMULATOR.build(leaf_params, node_params, LEAVES)


def _statement(tree: MerkleTree, index: int, leaf: bytes | None = None) -> MembershipStatement:
    return MembershipStatement(
        root=tree.root,
        leaf=LEAVES[index] if leaf is None else leaf,
        auth_path=MERKLE_ACCUMULATOR.generate_proof(tree, index),
    )


@pytest.mark.parametrize("index", [0, 3])
def test_true_statement_is_satisfied(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams, index: int
) -> None:
    cs = generate_constraints(_statement(tree, index), leaf_params, node_params)
    assert cs.is_satisfied()
    assert cs.which_is_unsatisfied() is None


def test_single_leaf_tree(leaf_params: HashParams, node_params: HashParams) -> None:
    tree = MERKLE_ACCUMULATOR.build(leaf_params, node_params, [b"solo"])
    statement = MembershipStatement(
        root=tree.root, leaf=b"solo", auth_path=MERKLE_ACCUMULATOR.generate_proof(tree, 0)
    )
    assert generate_constraints(statement, leaf_params, node_params).is_satisfied()


def test_wrong_leaf_is_unsatisfied(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    cs = generate_constraints(_statement(tree, 1, leaf=b"mallory"), leaf_params, node_params)
    assert not cs.is_satisfied()
    assert cs.which_is_unsatisfied() == "membership/is_member"


def test_flipped_direction_is_unsatisfied(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = _statement(tree, 2)
    path = statement.auth_path
    assert path is not None
    flipped = path.copy(is_right_child=(not path.is_right_child[0], *path.is_right_child[1:]))

    cs = generate_constraints(statement.copy(auth_path=flipped), leaf_params, node_params)
    assert cs.which_is_unsatisfied() == "membership/is_member"


def test_tampered_sibling_is_unsatisfied(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = _statement(tree, 0)
    path = statement.auth_path
    assert path is not None
    tampered = path.copy(siblings=(POSEIDON2_SUITE.empty_digest(), *path.siblings[1:]))

    cs = generate_constraints(statement.copy(auth_path=tampered), leaf_params, node_params)
    assert not cs.is_satisfied()


def test_foreign_root_is_unsatisfied(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    other = MERKLE_ACCUMULATOR.build(leaf_params, node_params, [*LEAVES[:3], b"eve"])
    statement = _statement(tree, 0).copy(root=other.root)

    cs = generate_constraints(statement, leaf_params, node_params)
    assert not cs.is_satisfied()


def test_public_inputs(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    """The verifier's instance is the root elements followed by the leaf bytes."""
    statement = _statement(tree, 1)
    cs = generate_constraints(statement, leaf_params, node_params)

    expected = MembershipCircuit.public_inputs(statement.root, statement.leaf)
    assert cs.instance_assignment == expected
    assert public_inputs(statement.root, list(statement.leaf)) == expected
    assert cs.num_instance_variables == 1 + len(statement.root) + len(statement.leaf)


def test_allocation_layout(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = _statement(tree, 1)
    cs = generate_constraints(statement, leaf_params, node_params)
    width = len(statement.root)
    first_path_var = 1 + width + 9 * len(statement.leaf)

    assert cs.variable_label(1) == "root_var/element_0"
    assert cs.variable_label(1 + width) == "leaf_var/byte_0/value"
    assert cs.variable_label(first_path_var) == "path_var/level_0/sibling/element_0"
    assert cs.variable_label(first_path_var + width) == "path_var/level_0/is_right_child"

    namespaces = {constraint.label.split("/")[0] for constraint in cs.constraints}
    assert namespaces == {"leaf_var", "path_var", "membership"}


def test_synthesis_into_existing_system(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    cs = ConstraintSystem()
    MembershipCircuit(_statement(tree, 3), leaf_params, node_params).generate_constraints(cs)
    assert cs.num_constraints > 0
    assert cs.is_satisfied()


def test_missing_path_in_prove_mode(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = MembershipStatement(root=tree.root, leaf=LEAVES[0])

    with pytest.raises(MissingWitnessError) as exc_info:
        generate_constraints(statement, leaf_params, node_params)
    assert exc_info.value.namespace == "path_var"

    # A height does not stand in for the witness, and nothing is allocated.
    cs = ConstraintSystem()
    circuit = MembershipCircuit(statement, leaf_params, node_params, height=tree.height)
    with pytest.raises(MissingWitnessError) as exc_info:
        circuit.generate_constraints(cs)
    assert exc_info.value.namespace == "path_var"
    assert isinstance(exc_info.value, SynthesisError)
    assert cs.num_instance_variables == 1
    assert cs.num_witness_variables == 0
    assert cs.num_constraints == 0


def test_setup_mode_has_the_proving_shape(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    """Key generation sees the same system a prover builds, minus the values."""
    proving = generate_constraints(_statement(tree, 2), leaf_params, node_params)
    setup = generate_constraints(
        MembershipStatement(root=tree.root, leaf=LEAVES[2]),
        leaf_params,
        node_params,
        mode=SynthesisMode.SETUP,
        height=tree.height,
    )

    assert setup.num_constraints == proving.num_constraints
    assert setup.num_instance_variables == proving.num_instance_variables
    assert setup.num_witness_variables == proving.num_witness_variables
    assert [c.label for c in setup.constraints] == [c.label for c in proving.constraints]


def test_setup_mode_needs_a_height(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = MembershipStatement(root=tree.root, leaf=LEAVES[0])
    with pytest.raises(MalformedInputError, match="needs the path height"):
        generate_constraints(statement, leaf_params, node_params, mode=SynthesisMode.SETUP)


def test_height_mismatch(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    with pytest.raises(MalformedInputError, match="circuit expects 5"):
        generate_constraints(_statement(tree, 0), leaf_params, node_params, height=5)


def test_malformed_root(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = _statement(tree, 0).copy(root=Digest(elements=tree.root.elements[:1]))
    with pytest.raises(MalformedInputError) as exc_info:
        generate_constraints(statement, leaf_params, node_params)
    assert exc_info.value.namespace == "root_var"


def test_malformed_sibling(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    statement = _statement(tree, 0)
    path = statement.auth_path
    assert path is not None
    short = Digest(elements=path.siblings[0].elements[:1])
    bad_path = path.copy(siblings=(short, *path.siblings[1:]))

    with pytest.raises(MalformedInputError, match="siblings must have"):
        generate_constraints(statement.copy(auth_path=bad_path), leaf_params, node_params)


def test_malformed_params(
    tree: MerkleTree, leaf_params: HashParams, node_params: HashParams
) -> None:
    short = HashParams(elements=leaf_params.elements[:1])
    with pytest.raises(MalformedInputError, match="Expected a parameter"):
        generate_constraints(_statement(tree, 0), short, node_params)

    cs = ConstraintSystem()
    circuit = MembershipCircuit(_statement(tree, 0), leaf_params, short)
    with pytest.raises(MalformedInputError, match="Expected a parameter"):
        circuit.generate_constraints(cs)
    assert (cs.num_instance_variables, cs.num_constraints) == (1, 0)


def test_tracer_and_logging(
    tree: MerkleTree,
    leaf_params: HashParams,
    node_params: HashParams,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger="zkmerkle")
    traces: list[ConstraintTrace] = []
    cs = generate_constraints(
        _statement(tree, 0), leaf_params, node_params, tracer=traces.append
    )

    assert len(traces) == cs.num_constraints
    assert [t.index for t in traces] == list(range(cs.num_constraints))
    assert traces[0].label == "leaf_var/byte_0/bit_0_is_boolean"
    assert traces[-1].label == "membership/is_member"
    assert f"Synthesized membership circuit (prove): {cs.num_constraints} constraints" in (
        caplog.text
    )


@pytest.mark.slow
@settings(max_examples=5)
@given(
    leaves=st.lists(st.binary(min_size=1, max_size=4), min_size=1, max_size=4, unique=True),
    data=st.data(),
)
def test_circuit_agrees_with_native_verify(leaves: list[bytes], data: st.DataObject) -> None:
    """Satisfiability tracks `verify` on honest and forged claims alike."""
    leaf_params = POSEIDON2_SUITE.setup(random.Random(0))
    node_params = POSEIDON2_SUITE.setup(random.Random(1))
    tree = MERKLE_ACCUMULATOR.build(leaf_params, node_params, leaves)

    index = data.draw(st.integers(min_value=0, max_value=len(leaves) - 1))
    claimed = data.draw(st.sampled_from(leaves))
    path = MERKLE_ACCUMULATOR.generate_proof(tree, index)

    native = MERKLE_ACCUMULATOR.verify(leaf_params, node_params, tree.root, claimed, path)
    statement = MembershipStatement(root=tree.root, leaf=claimed, auth_path=path)
    cs = generate_constraints(statement, leaf_params, node_params)

    assert native == (claimed == leaves[index])
    assert cs.is_satisfied() == native
