"""
Annotation processing.

Collects entity, label, timestamp and index annotations on model graph nodes
into a MetadataTable. Each method mirrors one annotation:

    builder = MetadataBuilder()
    builder.entity(person, "person", "org")
    builder.label(person, "firstName", "fn")
    builder.created_at(person, "createdAt")
    builder.index(person, "persons", {"pk": ["pk"], "sk": []})
    metadata = builder.build()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .errors import ErrorContext, InvalidAccessPatternError, ModelLoadError, NotAnEntityError
from .ir import (
    EntityMeta,
    IndexSpec,
    KeySpec,
    MetadataTable,
    ModelProperty,
    PropertyKey,
    RecordType,
    TimestampMarker,
)

logger = logging.getLogger(__name__)

INDEX_KEYS = ("pk", "sk")
INDEX_OPTIONS = ("index", "collection", "type", "scope")


def _require_model(target: Any, annotation: str) -> RecordType:
    if not isinstance(target, RecordType):
        name = getattr(target, "name", None) or type(target).__name__
        raise NotAnEntityError(
            f"@{annotation} can only be applied to models", ErrorContext(entity=name)
        )
    return target


def _require_property(model: RecordType, prop: str, annotation: str) -> PropertyKey:
    if model.get_property(prop) is None:
        raise ModelLoadError(
            f"@{annotation} targets unknown property",
            ErrorContext(entity=model.name, property=prop),
        )
    return (model.name, prop)


def extract_field_names(model: RecordType, index_name: str, values: Sequence[Any]) -> list[str]:
    """
    Turn composite references into property names of ``model``.

    References are property names or ModelProperty nodes; both must belong
    to ``model`` itself.

    Raises:
        InvalidAccessPatternError: If a reference points outside the model
    """
    names: list[str] = []
    for value in values:
        if isinstance(value, ModelProperty):
            owned = any(prop is value for prop in model.properties)
            name = value.name
        elif isinstance(value, str):
            owned = model.get_property(value) is not None
            name = value
        else:
            owned = False
            name = repr(value)
        if not owned:
            raise InvalidAccessPatternError(
                "Access patterns must use properties from the model "
                f"(index '{index_name}' uses {name})",
                ErrorContext(entity=model.name),
            )
        names.append(name)
    return names


def normalize_key(model: RecordType, index_name: str, key_name: str, key: Any) -> KeySpec:
    """
    Normalize the pk/sk part of an access pattern.

    - a list of references: field named after the key, e.g. {"field": "pk", ...}
    - a mapping with ``field`` and ``composite``: taken as declared
    - missing: empty composite, no field
    """
    if key is None:
        return KeySpec()
    if isinstance(key, Mapping):
        return KeySpec(
            field=key.get("field"),
            composite=extract_field_names(model, index_name, key.get("composite") or []),
        )
    if isinstance(key, Sequence) and not isinstance(key, str):
        return KeySpec(field=key_name, composite=extract_field_names(model, index_name, key))
    raise ModelLoadError(
        f"index '{index_name}' has an invalid {key_name}: {key!r}",
        ErrorContext(entity=model.name),
    )


class MetadataBuilder:
    """Accumulates annotations and produces a read-only MetadataTable."""

    def __init__(self) -> None:
        self._entities: dict[str, EntityMeta] = {}
        self._labels: dict[PropertyKey, str] = {}
        self._created_at: dict[PropertyKey, TimestampMarker] = {}
        self._updated_at: dict[PropertyKey, TimestampMarker] = {}
        self._indexes: dict[str, dict[str, IndexSpec]] = {}

    def entity(
        self,
        target: Any,
        entity: str,
        service: str,
        version: str | int | None = None,
    ) -> EntityMeta:
        model = _require_model(target, "entity")
        meta = EntityMeta(entity=entity, service=service, version=version)
        self._entities[model.name] = meta
        return meta

    def label(self, target: Any, prop: str, label: str) -> None:
        model = _require_model(target, "label")
        self._labels[_require_property(model, prop, "label")] = label

    def created_at(self, target: Any, prop: str, field: str | None = None) -> None:
        model = _require_model(target, "createdAt")
        self._created_at[_require_property(model, prop, "createdAt")] = TimestampMarker(field=field)

    def updated_at(self, target: Any, prop: str, field: str | None = None) -> None:
        model = _require_model(target, "updatedAt")
        self._updated_at[_require_property(model, prop, "updatedAt")] = TimestampMarker(field=field)

    def index(self, target: Any, name: str, pattern: Mapping[str, Any]) -> IndexSpec:
        """
        Record an access pattern on a model.

        Args:
            target: Model the index belongs to
            name: Access pattern name
            pattern: Mapping with pk, sk and optional index/collection/type/scope

        Returns:
            The normalized IndexSpec

        Raises:
            InvalidAccessPatternError: If a composite references a foreign property
        """
        model = _require_model(target, "index")
        options = {
            option: pattern[option] for option in INDEX_OPTIONS if pattern.get(option) is not None
        }
        spec = IndexSpec(
            pk=normalize_key(model, name, "pk", pattern.get("pk")),
            sk=normalize_key(model, name, "sk", pattern.get("sk")),
            **options,
        )
        self._indexes.setdefault(model.name, {})[name] = spec
        logger.debug("Index %s on %s: %s", name, model.name, spec)
        return spec

    def build(self) -> MetadataTable:
        return MetadataTable(
            entities=dict(self._entities),
            labels=dict(self._labels),
            created_at=dict(self._created_at),
            updated_at=dict(self._updated_at),
            indexes={name: dict(specs) for name, specs in self._indexes.items()},
        )
