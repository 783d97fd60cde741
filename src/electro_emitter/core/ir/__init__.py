"""
Intermediate representation consumed by the schema compiler.

- types: the typed model graph (records, scalars, enums, arrays, unions)
- metadata: the annotation side table (entities, labels, timestamps, indexes)
"""

from .metadata import (
    EntityMeta,
    IndexSpec,
    KeySpec,
    MetadataTable,
    PropertyKey,
    TimestampMarker,
)
from .types import (
    ArrayType,
    BooleanLiteralType,
    DefaultValue,
    EnumMember,
    EnumType,
    Facets,
    IntrinsicType,
    ModelGraph,
    ModelProperty,
    ModelType,
    NumberLiteralType,
    RecordType,
    ScalarType,
    StringLiteralType,
    TypeKind,
    UnionType,
    UnionVariant,
    ValueKind,
    builtin_scalars,
)

__all__ = [
    # Types
    "ArrayType",
    "BooleanLiteralType",
    "DefaultValue",
    "EnumMember",
    "EnumType",
    "Facets",
    "IntrinsicType",
    "ModelGraph",
    "ModelProperty",
    "ModelType",
    "NumberLiteralType",
    "RecordType",
    "ScalarType",
    "StringLiteralType",
    "TypeKind",
    "UnionType",
    "UnionVariant",
    "ValueKind",
    "builtin_scalars",
    # Metadata
    "EntityMeta",
    "IndexSpec",
    "KeySpec",
    "MetadataTable",
    "PropertyKey",
    "TimestampMarker",
]
