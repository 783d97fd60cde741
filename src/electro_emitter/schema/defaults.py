"""Default-value extraction."""

from __future__ import annotations

from ..core.ir import ModelProperty, ValueKind
from .constraints import member_literal


def extract_default(prop: ModelProperty) -> str | int | float | bool | None:
    """
    Return the scalar default of a property.

    Strings, numbers, booleans and enum members (as their literal value, or
    name when they have none) are kept. Object and array defaults are not
    representable as a plain default and are dropped.

    Returns:
        The default value, or None when there is none to emit
    """
    default = prop.default
    if default is None:
        return None

    if default.kind == ValueKind.STRING:
        return str(default.value)
    if default.kind == ValueKind.NUMERIC:
        return default.value
    if default.kind == ValueKind.BOOLEAN:
        return bool(default.value)
    if default.kind == ValueKind.ENUM and default.member is not None:
        return member_literal(default.member.value, default.member.name)
    return None
