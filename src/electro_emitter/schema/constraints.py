"""
Constraint resolution.

Collects the validation constraints of a property from its own facets and
from the derivation chain of its scalar type.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel

from ..core.errors import ErrorContext, UnsupportedTypeError
from ..core.ir import EnumType, ModelProperty, ScalarType, UnionType
from ..core.ir.types import NumberLiteralType, StringLiteralType

# Depth bound for scalar derivation chains
MAX_SCALAR_DEPTH = 64

INTEGER_SCALARS = frozenset(
    {
        "integer",
        "int64",
        "int32",
        "int16",
        "int8",
        "uint64",
        "uint32",
        "uint16",
        "uint8",
        "safeint",
    }
)
FLOAT_SCALARS = frozenset({"float", "float32", "float64", "decimal", "decimal128"})
NUMERIC_SCALARS = INTEGER_SCALARS | FLOAT_SCALARS | {"numeric"}
DATE_TIME_SCALARS = ("utcDateTime", "offsetDateTime", "plainDate", "plainTime")


class ConstraintSet(BaseModel):
    """
    Normalized validation constraints of one property.

    Property facets take precedence over facets inherited from the scalar
    chain; along the chain the most specific value wins.
    """

    min_length: int | None = None
    max_length: int | None = None
    min_value: int | float | None = None
    max_value: int | float | None = None
    pattern: str | None = None
    format: str | None = None
    is_integer: bool = False
    is_float: bool = False
    is_date_time: bool = False
    date_time_kind: str | None = None
    enum_values: list[str] | None = None


_FACET_SLOTS = ("min_length", "max_length", "min_value", "max_value", "pattern", "format")


def walk_scalar_chain(scalar: ScalarType) -> Iterator[ScalarType]:
    """
    Yield ``scalar`` and its bases, most specific first.

    Raises:
        UnsupportedTypeError: If the chain loops or exceeds MAX_SCALAR_DEPTH
    """
    seen: set[int] = set()
    current: ScalarType | None = scalar
    depth = 0
    while current is not None:
        if id(current) in seen:
            raise UnsupportedTypeError(
                "scalar derivation chain contains a cycle",
                ErrorContext(type_name=scalar.name),
            )
        depth += 1
        if depth > MAX_SCALAR_DEPTH:
            raise UnsupportedTypeError(
                f"scalar derivation chain is deeper than {MAX_SCALAR_DEPTH}",
                ErrorContext(type_name=scalar.name),
            )
        seen.add(id(current))
        yield current
        current = current.base


def root_scalar(scalar: ScalarType) -> ScalarType:
    """Return the last scalar of the derivation chain."""
    root = scalar
    for root in walk_scalar_chain(scalar):
        pass
    return root


def _first_in_chain(scalar: ScalarType, names: frozenset[str] | tuple[str, ...]) -> str | None:
    for link in walk_scalar_chain(scalar):
        if link.name in names:
            return link.name
    return None


def is_integer_scalar(scalar: ScalarType) -> bool:
    return _first_in_chain(scalar, INTEGER_SCALARS) is not None


def is_float_scalar(scalar: ScalarType) -> bool:
    return _first_in_chain(scalar, FLOAT_SCALARS) is not None


def date_time_kind(scalar: ScalarType) -> str | None:
    """Return which date-time family ``scalar`` belongs to, if any."""
    return _first_in_chain(scalar, DATE_TIME_SCALARS)


def member_literal(value: str | int | float | None, name: str) -> str:
    """Text of an enum member: its literal value, or its name when it has none."""
    if value is None:
        return name
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def literal_union_values(union: UnionType) -> list[str] | None:
    """
    Return the variant literals of a union made only of string/number literals.

    Returns:
        Literal values in variant order, or None when any variant is not a literal
    """
    literals: list[str] = []
    for variant in union.variants:
        if isinstance(variant.type, StringLiteralType):
            literals.append(variant.type.value)
        elif isinstance(variant.type, NumberLiteralType):
            literals.append(member_literal(variant.type.value, ""))
        else:
            return None
    return literals


def resolve_constraints(prop: ModelProperty) -> ConstraintSet:
    """
    Resolve the validation constraints of a property.

    Args:
        prop: Model property

    Returns:
        ConstraintSet combining property facets, chain facets and
        integer/float/date-time classification
    """
    values: dict[str, object] = {}
    for slot in _FACET_SLOTS:
        value = getattr(prop.facets, slot)
        if value is not None:
            values[slot] = value

    prop_type = prop.type
    if isinstance(prop_type, ScalarType):
        for link in walk_scalar_chain(prop_type):
            for slot in _FACET_SLOTS:
                value = getattr(link.facets, slot)
                if value is not None and slot not in values:
                    values[slot] = value

        if is_integer_scalar(prop_type):
            values["is_integer"] = True
        elif is_float_scalar(prop_type):
            values["is_float"] = True

        kind = date_time_kind(prop_type)
        if kind:
            values["is_date_time"] = True
            values["date_time_kind"] = kind

    elif isinstance(prop_type, EnumType):
        values["enum_values"] = [member_literal(m.value, m.name) for m in prop_type.members]

    elif isinstance(prop_type, UnionType):
        literals = literal_union_values(prop_type)
        if literals is not None:
            values["enum_values"] = literals

    return ConstraintSet(**values)
