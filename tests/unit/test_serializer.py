"""Tests for the object-to-source serializer."""

import math

import pytest
import yaml

from electro_emitter.core.errors import UnsupportedValueError
from electro_emitter.schema import UNDEFINED, CurrentTime, CustomAttributeType, serialize
from electro_emitter.schema.serializer import ObjectExpression, number_text, to_node


class TestScalars:
    """Test rendering of scalar values."""

    def test_undefined_and_null(self):
        assert serialize(UNDEFINED) == "undefined"
        assert serialize(None) == "null"

    def test_booleans(self):
        assert serialize(True) == "true"
        assert serialize(False) == "false"

    def test_strings_are_double_quoted(self):
        assert serialize("string") == '"string"'

    def test_strings_are_escaped(self):
        assert serialize('say "hi"\n') == '"say \\"hi\\"\\n"'

    def test_non_ascii_kept_verbatim(self):
        assert serialize("café") == '"café"'

    def test_numbers(self):
        assert serialize(0) == "0"
        assert serialize(-12) == "-12"
        assert serialize(2.5) == "2.5"
        assert serialize(3.0) == "3"

    def test_non_finite_numbers(self):
        assert number_text(math.inf) == "Infinity"
        assert number_text(-math.inf) == "-Infinity"
        assert number_text(math.nan) == "NaN"


class TestContainers:
    """Test rendering of arrays and objects."""

    def test_array_inline_in_order(self):
        assert serialize(["LOW", "MEDIUM", "HIGH"]) == '["LOW", "MEDIUM", "HIGH"]'

    def test_empty_containers(self):
        assert serialize([]) == "[]"
        assert serialize({}) == "{}"

    def test_object_multiline(self):
        text = serialize({"type": "string", "required": True})
        assert text == '{\n  type: "string",\n  required: true\n}'

    def test_nested_object_indentation(self):
        text = serialize({"pk": {"field": "pk", "composite": ["pk"]}})
        assert text == '{\n  pk: {\n    field: "pk",\n    composite: ["pk"]\n  }\n}'

    def test_key_order_is_insertion_order(self):
        text = serialize({"zeta": 1, "alpha": 2, "mid": 3})
        assert text.index("zeta") < text.index("alpha") < text.index("mid")

    def test_non_identifier_keys_are_quoted(self):
        text = serialize({"with-dash": 1, "ok_key": 2})
        assert '"with-dash": 1' in text
        assert "ok_key: 2" in text

    def test_object_built_key_by_key(self):
        node = to_node({"a": 1, "b": [True]})
        assert isinstance(node, ObjectExpression)
        assert [member.key for member in node.members] == ["a", "b"]

    def test_tuples_render_as_arrays(self):
        assert serialize((1, 2)) == "[1, 2]"


class TestSourceFragments:
    """Test that fragments are emitted as live expressions."""

    def test_current_time_is_not_quoted(self):
        text = serialize({"default": CurrentTime()})
        assert "default: () => Date.now()" in text
        assert '"() => Date.now()"' not in text

    def test_custom_attribute_type(self):
        text = serialize({"type": CustomAttributeType("boolean | number")})
        assert 'type: CustomAttributeType<boolean | number>("any")' in text

    def test_fragments_in_arrays_verbatim(self):
        assert serialize([CurrentTime()]) == "[() => Date.now()]"

    def test_current_time_returns_epoch_millis(self):
        value = CurrentTime()()
        assert isinstance(value, int)
        assert value > 1_600_000_000_000


class TestUnsupportedValues:
    """Test that shapes without a rendering rule abort serialization."""

    def test_set_is_unsupported(self):
        with pytest.raises(UnsupportedValueError) as exc_info:
            serialize({"items": {1, 2}})
        assert exc_info.value.kind == "UnsupportedValue"

    def test_arbitrary_object_is_unsupported(self):
        with pytest.raises(UnsupportedValueError):
            serialize(object())

    def test_non_string_key_is_unsupported(self):
        with pytest.raises(UnsupportedValueError):
            serialize({1: "one"})


class TestDeterminismAndRoundTrip:
    def test_serialize_twice_is_identical(self):
        value = {"attributes": {"a": {"type": ["x", "y"], "required": False}}, "indexes": {}}
        assert serialize(value) == serialize(value)

    def test_output_parses_back_to_same_structure(self):
        value = {
            "attributes": {
                "priority": {"type": ["LOW", "MEDIUM", "HIGH"], "required": True},
                "count": {"type": "number", "required": True, "default": 0},
            },
            "indexes": {},
            "model": {"entity": "task", "service": "org", "version": "1"},
        }
        assert yaml.safe_load(serialize(value)) == value
