"""
Property-based tests using Hypothesis.

These tests verify invariants across a wide range of inputs,
replacing the need for exhaustive example-based tests.
"""

import pytest
import yaml
from hypothesis import given, settings
from hypothesis import strategies as st

from electro_emitter.core import ir
from electro_emitter.core.errors import UnsupportedTypeError
from electro_emitter.schema import (
    AttributeValidationError,
    ConstraintSet,
    map_type,
    serialize,
    synthesize_validator,
    walk_scalar_chain,
)
from electro_emitter.schema.constraints import MAX_SCALAR_DEPTH

identifiers = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8).map(
    lambda s: f"k_{s}"
)
printable = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=126), min_size=0, max_size=20
)
leaves = st.one_of(
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.integers(min_value=-40, max_value=40).map(lambda i: i / 4),
    printable,
)
trees = st.recursive(
    leaves,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(identifiers, children, max_size=4),
    ),
    max_leaves=20,
)


def _derive(depth: int) -> ir.ScalarType:
    scalar = ir.builtin_scalars()["string"]
    for i in range(depth):
        scalar = ir.ScalarType(name=f"s{i}", base=scalar)
    return scalar


# =============================================================================
# Scalar chain Property Tests
# =============================================================================


class TestScalarChainProperties:
    @given(st.integers(min_value=0, max_value=MAX_SCALAR_DEPTH - 1))
    @settings(max_examples=50)
    def test_chain_length_matches_derivation(self, depth: int) -> None:
        """Invariant: a chain of n derivations yields n + 1 scalars, root last."""
        chain = list(walk_scalar_chain(_derive(depth)))
        assert len(chain) == depth + 1
        assert chain[-1].name == "string"

    @given(st.integers(min_value=0, max_value=MAX_SCALAR_DEPTH - 1))
    @settings(max_examples=50)
    def test_derived_string_maps_to_string(self, depth: int) -> None:
        assert map_type(_derive(depth)) == {"type": "string"}

    def test_overlong_chain_rejected(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            list(walk_scalar_chain(_derive(MAX_SCALAR_DEPTH)))


# =============================================================================
# Validator Property Tests
# =============================================================================


class TestValidatorProperties:
    @given(st.integers(min_value=0, max_value=30), printable)
    @settings(max_examples=200)
    def test_min_length_accepts_exactly_long_enough(self, n: int, value: str) -> None:
        """Invariant: minLength(n) accepts a string iff it has at least n characters."""
        validator = synthesize_validator(ConstraintSet(min_length=n), "pk")
        if len(value) >= n:
            assert validator(value) is True
        else:
            with pytest.raises(AttributeValidationError, match=f"at least {n} characters"):
                validator(value)

    @given(st.integers(min_value=-1000, max_value=1000))
    @settings(max_examples=100)
    def test_integers_pass_integer_check(self, value: int) -> None:
        validator = synthesize_validator(ConstraintSet(is_integer=True), "age")
        assert validator(value) is True
        assert validator(float(value)) is True

    @given(st.integers(min_value=-1000, max_value=1000))
    @settings(max_examples=100)
    def test_halves_fail_integer_check(self, value: int) -> None:
        validator = synthesize_validator(ConstraintSet(is_integer=True), "age")
        with pytest.raises(AttributeValidationError, match="'age' must be an integer"):
            validator(value + 0.5)


# =============================================================================
# Enum Property Tests
# =============================================================================


class TestEnumProperties:
    @given(st.lists(identifiers, min_size=1, max_size=10, unique=True))
    @settings(max_examples=100)
    def test_member_order_preserved(self, names: list[str]) -> None:
        """Invariant: enum literals keep declaration order."""
        enum = ir.EnumType(name="E", members=[ir.EnumMember(name=n) for n in names])
        assert map_type(enum) == {"type": names}


# =============================================================================
# Serializer Property Tests
# =============================================================================


class TestSerializerProperties:
    @given(trees)
    @settings(max_examples=200)
    def test_deterministic(self, tree) -> None:
        """Invariant: the same tree always serializes to the same text."""
        assert serialize(tree) == serialize(tree)

    @given(trees)
    @settings(max_examples=200)
    def test_output_is_valid_yaml_literal(self, tree) -> None:
        """Invariant: serialized trees read back as the same value.

        With identifier keys, printable ASCII strings and quarter-step floats
        the emitted literal is also a YAML flow document.
        """
        assert yaml.safe_load(serialize(tree)) == tree

    @given(st.dictionaries(identifiers, st.integers(), max_size=8))
    @settings(max_examples=100)
    def test_key_order_preserved(self, mapping: dict) -> None:
        text = serialize(mapping)
        positions = [text.index(f"{key}: ") for key in mapping]
        assert positions == sorted(positions)
