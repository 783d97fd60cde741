"""
Model document loader.

Reads a YAML (or JSON) model document and builds the model graph plus its
annotation table. Document layout:

    scalars:
      uuid: {extends: string, minLength: 25, maxLength: 25}
    enums:
      Priority: [LOW, MEDIUM, HIGH]
      Coffee: {members: {ESPRESSO: "01", LATTE: "02"}}
    unions:
      Info: [BooleanValue, Int64Value]
    models:
      Task:
        extends: Base
        entity: {entity: task, service: org}
        indexes:
          tasks: {pk: {field: pk, composite: [pk]}, sk: {field: sk, composite: []}}
        properties:
          pk: uuid
          priority: {type: Priority, default: MEDIUM}
          kind: {type: '"home" | "work"', optional: true, label: k}
          createdAt: {type: int64, createdAt: true}

Type references are type names, ``T[]``, unions ``A | B``, string/number
literals and ``true``/``false``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .annotations import MetadataBuilder
from .errors import EmitterError, ErrorContext, ModelLoadError, with_context
from .ir import (
    ArrayType,
    BooleanLiteralType,
    DefaultValue,
    EnumMember,
    EnumType,
    Facets,
    IntrinsicType,
    MetadataTable,
    ModelGraph,
    ModelProperty,
    NumberLiteralType,
    RecordType,
    ScalarType,
    StringLiteralType,
    UnionType,
    UnionVariant,
    ValueKind,
    builtin_scalars,
)

logger = logging.getLogger(__name__)

INTRINSIC_TYPES = frozenset({"unknown", "null", "void", "never"})

FACET_KEYS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minValue": "min_value",
    "maxValue": "max_value",
    "pattern": "pattern",
    "format": "format",
}

SECTIONS = ("scalars", "enums", "unions", "models")


@dataclass
class LoadedModel:
    """Model graph and annotations read from one document."""

    graph: ModelGraph
    metadata: MetadataTable


# =============================================================================
# Type expressions
# =============================================================================

_TOKEN = re.compile(
    r"""\s*(?:
        (?P<string>"(?:[^"\\]|\\.)*"|'[^']*')
      | (?P<number>-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)
      | (?P<name>[A-Za-z_$][\w$.]*)
      | (?P<op>\[\]|\||\(|\))
    )""",
    re.VERBOSE,
)


def tokenize(expression: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    text = expression.rstrip()
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if not match or match.end() == pos:
            raise ModelLoadError(f"invalid type expression {expression!r} at offset {pos}")
        kind = match.lastgroup or ""
        tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


class _ExpressionParser:
    """Recursive-descent parser for type references."""

    def __init__(self, expression: str, resolve: Callable[[str], Any]):
        self.expression = expression
        self.tokens = tokenize(expression)
        self.pos = 0
        self.resolve = resolve

    def parse(self) -> Any:
        result = self._union()
        if self.pos != len(self.tokens):
            raise ModelLoadError(f"unexpected {self.tokens[self.pos][1]!r} in {self.expression!r}")
        return result

    def _peek(self) -> tuple[str, str] | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _union(self) -> Any:
        variants = [self._postfix()]
        while self._peek() == ("op", "|"):
            self.pos += 1
            variants.append(self._postfix())
        if len(variants) == 1:
            return variants[0]
        return UnionType(variants=[UnionVariant(type=variant) for variant in variants])

    def _postfix(self) -> Any:
        result = self._primary()
        while self._peek() == ("op", "[]"):
            self.pos += 1
            result = ArrayType(element=result)
        return result

    def _primary(self) -> Any:
        token = self._peek()
        if token is None:
            raise ModelLoadError(f"incomplete type expression {self.expression!r}")
        self.pos += 1
        kind, text = token
        if kind == "string":
            body = text[1:-1]
            if text[0] == '"':
                body = re.sub(r"\\(.)", r"\1", body)
            return StringLiteralType(value=body)
        if kind == "number":
            value = float(text)
            if value.is_integer() and "." not in text:
                return NumberLiteralType(value=int(value))
            return NumberLiteralType(value=value)
        if kind == "name":
            if text in ("true", "false"):
                return BooleanLiteralType(value=text == "true")
            if text in INTRINSIC_TYPES:
                return IntrinsicType(name=text)
            return self.resolve(text)
        if text == "(":
            inner = self._union()
            if self._peek() != ("op", ")"):
                raise ModelLoadError(f"missing ')' in {self.expression!r}")
            self.pos += 1
            return inner
        raise ModelLoadError(f"unexpected {text!r} in {self.expression!r}")


# =============================================================================
# Document resolution
# =============================================================================


def _facets(data: Mapping[str, Any]) -> Facets:
    return Facets(
        **{attr: data[key] for key, attr in FACET_KEYS.items() if data.get(key) is not None}
    )


def _enum_members(data: Any) -> list[EnumMember]:
    if isinstance(data, Mapping) and "members" in data:
        data = data["members"]
    if isinstance(data, Mapping):
        return [EnumMember(name=str(name), value=value) for name, value in data.items()]
    members = []
    for item in data or []:
        if isinstance(item, Mapping):
            members.append(EnumMember(name=str(item["name"]), value=item.get("value")))
        else:
            members.append(EnumMember(name=str(item)))
    return members


def _enum_of(model_type: Any) -> EnumType | None:
    if isinstance(model_type, EnumType):
        return model_type
    if isinstance(model_type, ArrayType) and isinstance(model_type.element, EnumType):
        return model_type.element
    return None


def classify_default(value: Any, model_type: Any) -> DefaultValue:
    """Turn a YAML default into a DefaultValue, recognising enum member names."""
    if isinstance(value, bool):
        return DefaultValue(kind=ValueKind.BOOLEAN, value=value)
    if isinstance(value, int | float):
        return DefaultValue(kind=ValueKind.NUMERIC, value=value)
    if isinstance(value, str):
        enum = _enum_of(model_type)
        member = enum.get_member(value) if enum else None
        if member is not None:
            return DefaultValue(kind=ValueKind.ENUM, member=member)
        return DefaultValue(kind=ValueKind.STRING, value=value)
    if isinstance(value, Mapping):
        return DefaultValue(kind=ValueKind.OBJECT, value=dict(value))
    if isinstance(value, list):
        return DefaultValue(kind=ValueKind.ARRAY, value=value)
    # YAML dates and timestamps
    text = value.isoformat() if hasattr(value, "isoformat") else str(value)
    return DefaultValue(kind=ValueKind.STRING, value=text)


class _DocumentResolver:
    """Builds named types on demand, detecting reference cycles."""

    def __init__(self, document: Mapping[str, Any]):
        self.sections: dict[str, Mapping[str, Any]] = {}
        for section in SECTIONS:
            data = document.get(section) or {}
            if not isinstance(data, Mapping):
                raise ModelLoadError(f"'{section}' must be a mapping")
            self.sections[section] = data
        self.builtins = builtin_scalars()
        self.resolved: dict[str, Any] = {}
        self.resolving: list[str] = []

    def declared_names(self) -> Iterator[str]:
        for section in SECTIONS:
            yield from (str(name) for name in self.sections[section])

    def resolve(self, name: str) -> Any:
        if name in self.resolved:
            return self.resolved[name]
        if name in self.resolving:
            chain = " -> ".join([*self.resolving[self.resolving.index(name) :], name])
            raise ModelLoadError(f"circular type reference: {chain}", ErrorContext(type_name=name))

        for section in SECTIONS:
            if name in self.sections[section]:
                self.resolving.append(name)
                try:
                    node = getattr(self, f"_build_{section}")(name, self.sections[section][name])
                finally:
                    self.resolving.pop()
                self.resolved[name] = node
                return node

        if name in self.builtins:
            return self.builtins[name]
        raise ModelLoadError(f"unknown type '{name}'", ErrorContext(type_name=name))

    def parse_type(self, expression: Any) -> Any:
        if not isinstance(expression, str):
            raise ModelLoadError(f"type reference must be a string, got {expression!r}")
        return _ExpressionParser(expression, self.resolve).parse()

    def _build_scalars(self, name: str, data: Any) -> ScalarType:
        data = data or {}
        if isinstance(data, str):
            data = {"extends": data}
        base_name = data.get("extends")
        base = self.resolve(base_name) if base_name else None
        if base is not None and not isinstance(base, ScalarType):
            raise ModelLoadError(f"scalar '{name}' extends non-scalar '{base_name}'")
        return ScalarType(name=name, base=base, facets=_facets(data))

    def _build_enums(self, name: str, data: Any) -> EnumType:
        return EnumType(name=name, members=_enum_members(data))

    def _build_unions(self, name: str, data: Any) -> UnionType:
        if isinstance(data, Mapping) and "variants" in data:
            data = data["variants"]
        if isinstance(data, Mapping):
            variants = [UnionVariant(name=str(k), type=self.parse_type(v)) for k, v in data.items()]
        else:
            variants = [UnionVariant(type=self.parse_type(v)) for v in data or []]
        return UnionType(name=name, variants=variants)

    def _build_models(self, name: str, data: Any) -> RecordType:
        data = data or {}
        base_name = data.get("extends")
        base = self.resolve(base_name) if base_name else None
        if base is not None and not isinstance(base, RecordType):
            raise ModelLoadError(f"model '{name}' extends non-model '{base_name}'")

        properties = []
        for prop_name, prop_data in (data.get("properties") or {}).items():
            try:
                properties.append(self._build_property(str(prop_name), prop_data))
            except EmitterError as e:
                raise with_context(e, entity=name, property=str(prop_name)) from e
        return RecordType(name=name, properties=properties, base=base)

    def _build_property(self, name: str, data: Any) -> ModelProperty:
        if not isinstance(data, Mapping):
            data = {"type": data}
        if "type" not in data:
            raise ModelLoadError("property has no type")
        prop_type = self.parse_type(data["type"])
        default = data.get("default")
        return ModelProperty(
            name=name,
            type=prop_type,
            optional=bool(data.get("optional", False)),
            default=classify_default(default, prop_type) if default is not None else None,
            facets=_facets(data),
        )


def _timestamp_field(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _collect_annotations(resolver: _DocumentResolver) -> MetadataTable:
    builder = MetadataBuilder()
    for name, data in resolver.sections["models"].items():
        model = resolver.resolve(str(name))
        data = data or {}

        for prop_name, prop_data in (data.get("properties") or {}).items():
            if not isinstance(prop_data, Mapping):
                continue
            if prop_data.get("label"):
                builder.label(model, str(prop_name), str(prop_data["label"]))
            if prop_data.get("createdAt"):
                builder.created_at(model, str(prop_name), _timestamp_field(prop_data["createdAt"]))
            if prop_data.get("updatedAt"):
                builder.updated_at(model, str(prop_name), _timestamp_field(prop_data["updatedAt"]))

        entity = data.get("entity")
        if entity:
            if not isinstance(entity, Mapping) or "entity" not in entity or "service" not in entity:
                raise ModelLoadError(
                    "entity annotation needs 'entity' and 'service'", ErrorContext(entity=str(name))
                )
            builder.entity(model, entity["entity"], entity["service"], entity.get("version"))

        for index_name, pattern in (data.get("indexes") or {}).items():
            builder.index(model, str(index_name), pattern or {})

    return builder.build()


def parse_model_document(document: Any) -> LoadedModel:
    """
    Build the model graph and annotation table from a parsed document.

    Raises:
        ModelLoadError: If the document is malformed or references are broken
        InvalidAccessPatternError: If an index uses a foreign property
    """
    if not isinstance(document, Mapping):
        raise ModelLoadError("model document must be a mapping")

    resolver = _DocumentResolver(document)
    try:
        types = {name: resolver.resolve(name) for name in resolver.declared_names()}
        metadata = _collect_annotations(resolver)
    except ValidationError as e:
        raise ModelLoadError(f"invalid model document: {e}") from e

    graph = ModelGraph(types=types)
    logger.info(
        "Loaded %d types (%d models, %d entities)",
        len(types),
        len(graph.records),
        len(metadata.entities),
    )
    return LoadedModel(graph=graph, metadata=metadata)


def load_model_document(path: Path) -> LoadedModel:
    """
    Load a YAML or JSON model document.

    Args:
        path: Path to the document

    Returns:
        LoadedModel with graph and annotations
    """
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ModelLoadError(f"cannot read model document {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ModelLoadError(f"invalid YAML in {path}: {e}") from e
    return parse_model_document(document)
