"""
Model graph types.

The model graph is the typed, resolved input of the schema compiler: named
records with ordered properties, scalars that may derive from a base scalar,
enums, arrays, unions and literal types. Nodes are immutable once built and
are shared by reference, so one scalar can be the base of many others.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TypeKind(str, Enum):
    """Closed set of model graph type kinds."""

    SCALAR = "scalar"
    ENUM = "enum"
    RECORD = "record"
    ARRAY = "array"
    UNION = "union"
    STRING_LITERAL = "string_literal"
    NUMBER_LITERAL = "number_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    INTRINSIC = "intrinsic"


class Facets(BaseModel):
    """
    Length, value, pattern and format facets declared on a scalar or property.

    Examples:
        - @maxLength(64): Facets(max_length=64)
        - @minValue(0) @maxValue(10): Facets(min_value=0, max_value=10)
    """

    min_length: int | None = None
    max_length: int | None = None
    min_value: int | float | None = None
    max_value: int | float | None = None
    pattern: str | None = None
    format: str | None = None

    model_config = ConfigDict(frozen=True)


class ScalarType(BaseModel):
    """
    A scalar, optionally derived from a base scalar.

    ``scalar uuid extends string`` is ScalarType(name="uuid", base=<string>).
    """

    kind: Literal[TypeKind.SCALAR] = TypeKind.SCALAR
    name: str
    base: ScalarType | None = None
    facets: Facets = Field(default_factory=Facets)

    model_config = ConfigDict(frozen=True)


class EnumMember(BaseModel):
    """A single enum member with an optional literal value."""

    name: str
    value: str | int | float | None = None

    model_config = ConfigDict(frozen=True)


class EnumType(BaseModel):
    """An enum with ordered members."""

    kind: Literal[TypeKind.ENUM] = TypeKind.ENUM
    name: str
    members: list[EnumMember] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def get_member(self, name: str) -> EnumMember | None:
        for member in self.members:
            if member.name == name:
                return member
        return None


class ArrayType(BaseModel):
    """An array of ``element``."""

    kind: Literal[TypeKind.ARRAY] = TypeKind.ARRAY
    element: ModelType

    model_config = ConfigDict(frozen=True)


class UnionVariant(BaseModel):
    """One variant of a union, named or anonymous."""

    name: str | None = None
    type: ModelType

    model_config = ConfigDict(frozen=True)


class UnionType(BaseModel):
    """A union with ordered variants."""

    kind: Literal[TypeKind.UNION] = TypeKind.UNION
    name: str | None = None
    variants: list[UnionVariant] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class StringLiteralType(BaseModel):
    kind: Literal[TypeKind.STRING_LITERAL] = TypeKind.STRING_LITERAL
    value: str

    model_config = ConfigDict(frozen=True)


class NumberLiteralType(BaseModel):
    kind: Literal[TypeKind.NUMBER_LITERAL] = TypeKind.NUMBER_LITERAL
    value: int | float

    model_config = ConfigDict(frozen=True)


class BooleanLiteralType(BaseModel):
    kind: Literal[TypeKind.BOOLEAN_LITERAL] = TypeKind.BOOLEAN_LITERAL
    value: bool

    model_config = ConfigDict(frozen=True)


class IntrinsicType(BaseModel):
    """unknown, null, void, never."""

    kind: Literal[TypeKind.INTRINSIC] = TypeKind.INTRINSIC
    name: str

    model_config = ConfigDict(frozen=True)


class ValueKind(str, Enum):
    """Kinds of default-value expressions."""

    STRING = "string"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"


class DefaultValue(BaseModel):
    """
    Default-value expression of a property.

    Examples:
        - = "draft": DefaultValue(kind=STRING, value="draft")
        - = Priority.MEDIUM: DefaultValue(kind=ENUM, member=EnumMember(name="MEDIUM"))
        - = #{a: 1}: DefaultValue(kind=OBJECT, value={"a": 1})
    """

    kind: ValueKind
    value: Any = None
    member: EnumMember | None = None

    model_config = ConfigDict(frozen=True)


class ModelProperty(BaseModel):
    """
    A property of a record.

    Attributes:
        name: Property identifier
        type: Declared type
        optional: Whether the property was declared with ``?``
        default: Optional default-value expression
        facets: Facets declared directly on the property
    """

    name: str
    type: ModelType
    optional: bool = False
    default: DefaultValue | None = None
    facets: Facets = Field(default_factory=Facets)

    model_config = ConfigDict(frozen=True)


class RecordType(BaseModel):
    """A named record with ordered properties and an optional base record."""

    kind: Literal[TypeKind.RECORD] = TypeKind.RECORD
    name: str
    properties: list[ModelProperty] = Field(default_factory=list)
    base: RecordType | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def property_names(self) -> list[str]:
        """Names of the properties declared on this record itself."""
        return [prop.name for prop in self.properties]

    def get_property(self, name: str) -> ModelProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def walk_properties_inherited(self) -> Iterator[ModelProperty]:
        """Yield own properties, then base properties not shadowed by a derived one."""
        seen: set[str] = set()
        visited: set[int] = set()
        record: RecordType | None = self
        while record is not None and id(record) not in visited:
            visited.add(id(record))
            for prop in record.properties:
                if prop.name not in seen:
                    seen.add(prop.name)
                    yield prop
            record = record.base


ModelType = Annotated[
    ScalarType
    | EnumType
    | RecordType
    | ArrayType
    | UnionType
    | StringLiteralType
    | NumberLiteralType
    | BooleanLiteralType
    | IntrinsicType,
    Field(discriminator="kind"),
]


class ModelGraph(BaseModel):
    """
    Named types of a compilation unit, in declaration order.

    Anonymous types (arrays, inline unions, literals) live inside the
    properties that use them.
    """

    types: dict[str, ModelType] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def get(self, name: str) -> Any:
        return self.types.get(name)

    @property
    def records(self) -> list[RecordType]:
        return [t for t in self.types.values() if isinstance(t, RecordType)]


for _model in (
    ScalarType,
    ArrayType,
    UnionVariant,
    UnionType,
    ModelProperty,
    RecordType,
    ModelGraph,
):
    _model.model_rebuild()


# Built-in scalar hierarchy, mirroring the standard library of the modelling language
_BUILTIN_HIERARCHY: list[tuple[str, str | None]] = [
    ("string", None),
    ("boolean", None),
    ("bytes", None),
    ("numeric", None),
    ("integer", "numeric"),
    ("float", "numeric"),
    ("int64", "integer"),
    ("int32", "int64"),
    ("int16", "int32"),
    ("int8", "int16"),
    ("safeint", "int64"),
    ("uint64", "integer"),
    ("uint32", "uint64"),
    ("uint16", "uint32"),
    ("uint8", "uint16"),
    ("float64", "float"),
    ("float32", "float64"),
    ("decimal", "numeric"),
    ("decimal128", "decimal"),
    ("utcDateTime", None),
    ("offsetDateTime", None),
    ("plainDate", None),
    ("plainTime", None),
    ("duration", None),
    ("url", "string"),
]


def builtin_scalars() -> dict[str, ScalarType]:
    """
    Build the built-in scalars.

    Returns:
        Mapping of scalar name to ScalarType, bases resolved
    """
    scalars: dict[str, ScalarType] = {}
    for name, base in _BUILTIN_HIERARCHY:
        scalars[name] = ScalarType(name=name, base=scalars[base] if base else None)
    return scalars
