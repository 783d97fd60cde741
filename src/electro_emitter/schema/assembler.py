"""
Entity/index assembler.

Builds one EntitySchema per annotated model:

    {
        "attributes": {<property>: <attribute descriptor>, ...},
        "indexes": {<access pattern>: <index descriptor>, ...},
        "model": {"entity": ..., "service": ..., "version": ...},
    }

Schemas are rebuilt from scratch on every call.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.errors import (
    EmitterError,
    ErrorContext,
    InvalidAccessPatternError,
    NotAnEntityError,
    with_context,
)
from ..core.ir import EntityMeta, IndexSpec, KeySpec, MetadataTable, ModelGraph, RecordType
from .attributes import compose_attribute

logger = logging.getLogger(__name__)

EntitySchema = dict[str, Any]

_INDEX_OPTIONS = ("index", "collection", "type", "scope")


def _require_record(graph: ModelGraph, name: str, what: str) -> RecordType:
    node = graph.get(name)
    if not isinstance(node, RecordType):
        found = "nothing" if node is None else f"a {getattr(node.kind, 'value', node.kind)}"
        raise NotAnEntityError(
            f"{what} is attached to {found}, expected a model",
            ErrorContext(entity=name),
        )
    return node


def key_descriptor(key: KeySpec) -> dict[str, Any]:
    descriptor: dict[str, Any] = {}
    if key.field is not None:
        descriptor["field"] = key.field
    descriptor["composite"] = list(key.composite)
    return descriptor


def index_descriptor(entity: RecordType, name: str, index: IndexSpec) -> dict[str, Any]:
    """
    Build the descriptor of one index after checking its composites.

    Raises:
        InvalidAccessPatternError: If a composite is not an own property of ``entity``
    """
    owned = set(entity.property_names)
    for composite in index.composite_names:
        if composite not in owned:
            raise InvalidAccessPatternError(
                f"index '{name}' references '{composite}', which is not a property of the model",
                ErrorContext(entity=entity.name),
            )

    descriptor: dict[str, Any] = {"pk": key_descriptor(index.pk), "sk": key_descriptor(index.sk)}
    for option in _INDEX_OPTIONS:
        value = getattr(index, option)
        if value is not None:
            descriptor[option] = list(value) if isinstance(value, list) else value
    return descriptor


def model_descriptor(meta: EntityMeta) -> dict[str, str]:
    return {"entity": meta.entity, "service": meta.service, "version": meta.version or "1"}


def assemble_entity(entity: RecordType, meta: EntityMeta, metadata: MetadataTable) -> EntitySchema:
    """Assemble the schema of one entity from its own properties and indexes."""
    attributes: dict[str, Any] = {}
    for prop in entity.properties:
        try:
            attributes[prop.name] = compose_attribute(prop, metadata, entity.name)
        except EmitterError as e:
            raise with_context(e, entity=entity.name, property=prop.name) from e

    indexes = {
        name: index_descriptor(entity, name, index)
        for name, index in metadata.indexes_for(entity.name).items()
    }

    return {
        "attributes": attributes,
        "indexes": indexes,
        "model": model_descriptor(meta),
    }


def assemble_schemas(graph: ModelGraph, metadata: MetadataTable) -> dict[str, EntitySchema]:
    """
    Assemble every annotated entity of a model graph.

    Args:
        graph: Model graph
        metadata: Annotation side table

    Returns:
        Entity name -> EntitySchema, in annotation order

    Raises:
        NotAnEntityError: If entity or index metadata names a non-record node
        EmitterError: Any mapping error, located at the offending property
    """
    for name in metadata.indexes:
        _require_record(graph, name, "index metadata")

    schemas: dict[str, EntitySchema] = {}
    for name, meta in metadata.entities.items():
        entity = _require_record(graph, name, "entity metadata")
        schemas[name] = assemble_entity(entity, meta, metadata)
        logger.info(
            "Assembled entity %s (%d attributes, %d indexes)",
            name,
            len(schemas[name]["attributes"]),
            len(schemas[name]["indexes"]),
        )
    return schemas
