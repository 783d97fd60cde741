"""
Type mapper.

Translates model graph types into ElectroDB attribute descriptors (plain
ordered dicts). Only the type part is produced here; requiredness, labels,
timestamps and validators are added by the attribute composer.

Mapping rules:
- Scalar: root of the derivation chain -> "boolean" | "number" | "string"
- Record: "map" with one nested descriptor per property
- Array of enum: "set" of member literals
- Array: "list" of the element descriptor
- Enum / literal union: list of literal values
- Other union: CustomAttributeType escape hatch
"""

from __future__ import annotations

import json
from typing import Any

from ..core.errors import ErrorContext, UnsupportedTypeError
from ..core.ir import (
    ArrayType,
    BooleanLiteralType,
    EnumType,
    ModelProperty,
    NumberLiteralType,
    RecordType,
    ScalarType,
    StringLiteralType,
    UnionType,
)
from .constraints import NUMERIC_SCALARS, literal_union_values, member_literal, root_scalar
from .defaults import extract_default
from .fragments import CustomAttributeType
from .serializer import number_text

Attribute = dict[str, Any]


def _root_kind(root_name: str) -> str:
    if root_name == "boolean":
        return "boolean"
    if root_name in NUMERIC_SCALARS:
        return "number"
    return "string"


def scalar_kind(scalar: ScalarType) -> str:
    """
    Map a scalar to "boolean", "number" or "string" through its root.

    Raises:
        UnsupportedTypeError: For binary (bytes) scalars or broken chains
    """
    root = root_scalar(scalar)
    if root.name == "bytes":
        raise UnsupportedTypeError("bytes not supported", ErrorContext(type_name=scalar.name))
    return _root_kind(root.name)


def enum_literals(enum: EnumType) -> list[str]:
    return [member_literal(member.value, member.name) for member in enum.members]


def map_type(model_type: Any) -> Attribute:
    """
    Map a model graph type to an attribute descriptor.

    Args:
        model_type: Any model graph type

    Returns:
        Descriptor with the type keys only ("type", "items", "properties")

    Raises:
        UnsupportedTypeError: If the type kind has no mapping rule
    """
    if isinstance(model_type, ScalarType):
        return {"type": scalar_kind(model_type)}
    if isinstance(model_type, RecordType):
        return _map_record(model_type)
    if isinstance(model_type, ArrayType):
        return _map_array(model_type)
    if isinstance(model_type, EnumType):
        return {"type": enum_literals(model_type)}
    if isinstance(model_type, UnionType):
        return _map_union(model_type)

    kind = getattr(model_type, "kind", type(model_type).__name__)
    raise UnsupportedTypeError(
        f"Type kind {getattr(kind, 'value', kind)} is currently not supported",
        ErrorContext(type_name=_type_name(model_type)),
    )


def _type_name(model_type: Any) -> str | None:
    name = getattr(model_type, "name", None)
    if name is None and hasattr(model_type, "value"):
        return repr(model_type.value)
    return name


def _map_record(record: RecordType) -> Attribute:
    properties: dict[str, Attribute] = {}
    for prop in record.walk_properties_inherited():
        properties[prop.name] = map_nested_property(prop)
    return {"type": "map", "properties": properties}


def _map_array(array: ArrayType) -> Attribute:
    element = array.element
    if isinstance(element, EnumType):
        return {"type": "set", "items": enum_literals(element)}
    return {"type": "list", "items": map_type(element)}


def _map_union(union: UnionType) -> Attribute:
    literals = literal_union_values(union)
    if literals is not None:
        return {"type": literals}
    return {"type": CustomAttributeType(render_type_expression(union))}


def map_nested_property(prop: ModelProperty) -> Attribute:
    """
    Map a property of a nested record.

    Nested properties carry their type, requiredness and a scalar default;
    labels, timestamps and validators only apply to entity attributes.
    """
    attr: Attribute = {**map_type(prop.type), "required": not prop.optional}
    default = extract_default(prop)
    if default is not None:
        attr["default"] = default
    return attr


# =============================================================================
# TypeScript type expressions (for CustomAttributeType)
# =============================================================================


def render_type_expression(model_type: Any) -> str:
    """
    Render a model graph type as a TypeScript type expression.

    Records render as ``{ name: T; other?: U }``, arrays as ``T[]``, enums
    and literal unions as string-literal unions.
    """
    if isinstance(model_type, ScalarType):
        return _root_kind(root_scalar(model_type).name)
    if isinstance(model_type, ArrayType):
        element = render_type_expression(model_type.element)
        if " | " in element:
            element = f"({element})"
        return f"{element}[]"
    if isinstance(model_type, RecordType):
        members = [
            f"{prop.name}{'?' if prop.optional else ''}: {render_type_expression(prop.type)}"
            for prop in model_type.walk_properties_inherited()
        ]
        return "{ " + "; ".join(members) + " }" if members else "{}"
    if isinstance(model_type, EnumType):
        return " | ".join(json.dumps(value) for value in enum_literals(model_type))
    if isinstance(model_type, UnionType):
        literals = literal_union_values(model_type)
        if literals is not None:
            return " | ".join(json.dumps(value) for value in literals)
        return " | ".join(render_type_expression(v.type) for v in model_type.variants)
    if isinstance(model_type, StringLiteralType):
        return json.dumps(model_type.value)
    if isinstance(model_type, NumberLiteralType):
        return number_text(model_type.value)
    if isinstance(model_type, BooleanLiteralType):
        return "true" if model_type.value else "false"
    return "any"
