"""
Object-to-source serializer.

Turns a descriptor tree (scalars, lists, dicts and source fragments) into the
text of an equivalent JavaScript literal expression. Values are first turned
into a small expression tree; dicts are built one key at a time, each key as
its own object-expression fragment whose members are merged into the result,
so every emitted member is independently well formed.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import UnsupportedValueError
from .fragments import SourceFragment

INDENT = "  "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class _Undefined:
    """JavaScript ``undefined``, distinct from ``None`` (``null``)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# =============================================================================
# Expression tree
# =============================================================================


@dataclass
class Literal:
    """Leaf expression: literal text or fragment source."""

    text: str


@dataclass
class ArrayExpression:
    elements: list[Node] = field(default_factory=list)


@dataclass
class ObjectMember:
    key: str
    value: Node


@dataclass
class ObjectExpression:
    members: list[ObjectMember] = field(default_factory=list)


Node = Literal | ArrayExpression | ObjectExpression


# =============================================================================
# Value -> tree
# =============================================================================


def number_text(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _key_text(key: str) -> str:
    if _IDENTIFIER.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def to_node(value: Any) -> Node:
    """
    Build the expression tree for ``value``.

    Raises:
        UnsupportedValueError: If a value (or dict key) has no rendering rule
    """
    if value is UNDEFINED:
        return Literal("undefined")
    if value is None:
        return Literal("null")
    if isinstance(value, SourceFragment):
        return Literal(value.to_source())
    if isinstance(value, bool):
        return Literal("true" if value else "false")
    if isinstance(value, str):
        return Literal(json.dumps(value, ensure_ascii=False))
    if isinstance(value, int | float):
        return Literal(number_text(value))
    if isinstance(value, list | tuple):
        return ArrayExpression([to_node(item) for item in value])
    if isinstance(value, dict):
        return _object_node(value)
    raise UnsupportedValueError(f"Unsupported value type: {type(value).__name__}")


def _key_value_fragment(key: Any, value: Any) -> ObjectExpression:
    if not isinstance(key, str):
        raise UnsupportedValueError(f"Unsupported object key type: {type(key).__name__}")
    return ObjectExpression([ObjectMember(_key_text(key), to_node(value))])


def _object_node(value: dict[Any, Any]) -> ObjectExpression:
    node = ObjectExpression()
    for key, item in value.items():
        fragment = _key_value_fragment(key, item)
        node.members.extend(fragment.members)
    return node


# =============================================================================
# Tree -> text
# =============================================================================


def render(node: Node, indent: str = "") -> str:
    """Render an expression tree; objects span lines, arrays stay inline."""
    if isinstance(node, Literal):
        return node.text
    if isinstance(node, ArrayExpression):
        return "[" + ", ".join(render(element, indent) for element in node.elements) + "]"
    if not node.members:
        return "{}"
    inner = indent + INDENT
    members = ",\n".join(
        f"{inner}{member.key}: {render(member.value, inner)}" for member in node.members
    )
    return "{\n" + members + "\n" + indent + "}"


def serialize(value: Any) -> str:
    """
    Serialize a value tree to literal-expression source text.

    Dict key order is preserved, nothing is sorted, and the same input always
    produces the same text.

    Args:
        value: Scalars, lists/tuples, dicts with str keys, source fragments,
            ``None`` (null) or ``UNDEFINED``

    Returns:
        Source text of the literal expression

    Raises:
        UnsupportedValueError: If the tree contains a value with no rendering rule
    """
    return render(to_node(value))
