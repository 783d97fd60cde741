"""Tests for constraint resolution over scalar derivation chains."""

import pytest

from electro_emitter.core import ir
from electro_emitter.core.errors import UnsupportedTypeError
from electro_emitter.schema import resolve_constraints, walk_scalar_chain
from electro_emitter.schema.constraints import MAX_SCALAR_DEPTH, root_scalar


def _prop(prop_type, **facets) -> ir.ModelProperty:
    return ir.ModelProperty(name="value", type=prop_type, facets=ir.Facets(**facets))


class TestScalarChain:
    """Test walking scalar derivation chains."""

    def test_chain_most_specific_first(self, scalars):
        names = [link.name for link in walk_scalar_chain(scalars["int16"])]
        assert names == ["int16", "int32", "int64", "integer", "numeric"]

    def test_root_scalar(self, scalars, uuid_scalar):
        assert root_scalar(uuid_scalar) is scalars["string"]
        assert root_scalar(scalars["string"]) is scalars["string"]

    def test_too_deep_chain_rejected(self, scalars):
        scalar = scalars["string"]
        for i in range(MAX_SCALAR_DEPTH + 1):
            scalar = ir.ScalarType(name=f"s{i}", base=scalar)
        with pytest.raises(UnsupportedTypeError, match="deeper than"):
            list(walk_scalar_chain(scalar))

    def test_cyclic_chain_rejected(self):
        # Frozen models cannot form a cycle, so bypass validation to build one
        first = ir.ScalarType.model_construct(name="a", base=None)
        second = ir.ScalarType.model_construct(name="b", base=first)
        first.__dict__["base"] = second
        with pytest.raises(UnsupportedTypeError, match="cycle") as exc_info:
            list(walk_scalar_chain(first))
        assert exc_info.value.kind == "UnsupportedType"


class TestFacetPrecedence:
    """Test that property facets win and chain facets fill the gaps."""

    def test_chain_facets_adopted(self, uuid_scalar):
        constraints = resolve_constraints(_prop(uuid_scalar))
        assert constraints.min_length == 25
        assert constraints.max_length == 25

    def test_property_facets_are_final(self, uuid_scalar):
        constraints = resolve_constraints(_prop(uuid_scalar, max_length=30))
        assert constraints.max_length == 30
        assert constraints.min_length == 25

    def test_most_specific_chain_value_wins(self, scalars):
        base = ir.ScalarType(name="Short", base=scalars["string"], facets=ir.Facets(max_length=64))
        derived = ir.ScalarType(name="Shorter", base=base, facets=ir.Facets(max_length=10))
        assert resolve_constraints(_prop(derived)).max_length == 10

    def test_pattern_inherited_from_chain(self, scalars):
        code = ir.ScalarType(
            name="Code", base=scalars["string"], facets=ir.Facets(pattern="^[A-Z]+$")
        )
        assert resolve_constraints(_prop(code)).pattern == "^[A-Z]+$"


class TestClassification:
    """Test integer, float and date-time classification."""

    @pytest.mark.parametrize("name", ["int8", "int16", "int32", "int64", "uint8", "safeint"])
    def test_integers(self, scalars, name):
        constraints = resolve_constraints(_prop(scalars[name]))
        assert constraints.is_integer
        assert not constraints.is_float

    @pytest.mark.parametrize("name", ["float32", "float64", "decimal128"])
    def test_floats(self, scalars, name):
        constraints = resolve_constraints(_prop(scalars[name]))
        assert constraints.is_float
        assert not constraints.is_integer

    def test_integer_takes_priority(self, scalars):
        # A scalar whose chain touches both families counts as integer only
        odd = ir.ScalarType(name="odd", base=scalars["float32"])
        both = ir.ScalarType(name="int32", base=odd)
        constraints = resolve_constraints(_prop(both))
        assert constraints.is_integer
        assert not constraints.is_float

    @pytest.mark.parametrize("name", ["utcDateTime", "offsetDateTime", "plainDate", "plainTime"])
    def test_date_time_kinds(self, scalars, name):
        derived = ir.ScalarType(name="Stamp", base=scalars[name])
        constraints = resolve_constraints(_prop(derived))
        assert constraints.is_date_time
        assert constraints.date_time_kind == name

    def test_plain_string_has_no_classification(self, scalars):
        constraints = resolve_constraints(_prop(scalars["string"]))
        assert not constraints.is_integer
        assert not constraints.is_float
        assert not constraints.is_date_time


class TestEnumValues:
    def test_enum_values_in_order(self, priority_enum):
        assert resolve_constraints(_prop(priority_enum)).enum_values == ["LOW", "MEDIUM", "HIGH"]

    def test_enum_member_values_preferred(self):
        coffee = ir.EnumType(
            name="Coffee",
            members=[ir.EnumMember(name="ESPRESSO", value="01"), ir.EnumMember(name="LATTE")],
        )
        assert resolve_constraints(_prop(coffee)).enum_values == ["01", "LATTE"]

    def test_literal_union_values(self):
        union = ir.UnionType(
            variants=[
                ir.UnionVariant(type=ir.StringLiteralType(value="home")),
                ir.UnionVariant(type=ir.NumberLiteralType(value=2)),
            ]
        )
        assert resolve_constraints(_prop(union)).enum_values == ["home", "2"]

    def test_mixed_union_has_no_enum_values(self, scalars):
        union = ir.UnionType(
            variants=[
                ir.UnionVariant(type=ir.StringLiteralType(value="home")),
                ir.UnionVariant(type=scalars["boolean"]),
            ]
        )
        assert resolve_constraints(_prop(union)).enum_values is None
