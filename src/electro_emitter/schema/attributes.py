"""
Attribute composer.

Combines the mapped type of an entity property with requiredness, default,
label, timestamp behaviour and the synthesized validator.
"""

from __future__ import annotations

import logging

from ..core.errors import ErrorContext, InvalidTimestampTypeError
from ..core.ir import MetadataTable, ModelProperty, TimestampMarker
from .constraints import resolve_constraints
from .defaults import extract_default
from .fragments import CurrentTime
from .type_mapper import Attribute, map_type
from .validators import synthesize_validator

logger = logging.getLogger(__name__)


def _timestamp_attribute(
    mapped: Attribute,
    marker: TimestampMarker,
    marker_name: str,
    entity_name: str,
    prop: ModelProperty,
) -> Attribute:
    if mapped.get("type") != "number":
        raise InvalidTimestampTypeError(
            f"{marker_name} must be a number",
            ErrorContext(entity=entity_name, property=prop.name),
        )

    attr: Attribute = {**mapped, "type": "number"}
    if marker_name == "updatedAt":
        attr["watch"] = "*"
    else:
        attr["readOnly"] = True
    attr["required"] = True
    attr["default"] = CurrentTime()
    attr["set"] = CurrentTime()
    if marker.field:
        attr["field"] = marker.field
    return attr


def compose_attribute(
    prop: ModelProperty,
    metadata: MetadataTable,
    entity_name: str,
) -> Attribute:
    """
    Compose the attribute descriptor of one entity property.

    Args:
        prop: Property declared on the entity
        metadata: Annotation side table
        entity_name: Name of the model owning ``prop``

    Returns:
        Attribute descriptor

    Raises:
        InvalidTimestampTypeError: If a createdAt/updatedAt property is not numeric
        UnsupportedTypeError: If the property type cannot be mapped
    """
    mapped = map_type(prop.type)

    updated_at = metadata.updated_at_for(entity_name, prop.name)
    if updated_at is not None:
        return _timestamp_attribute(mapped, updated_at, "updatedAt", entity_name, prop)

    created_at = metadata.created_at_for(entity_name, prop.name)
    if created_at is not None:
        return _timestamp_attribute(mapped, created_at, "createdAt", entity_name, prop)

    attr: Attribute = {**mapped, "required": not prop.optional}

    label = metadata.label_for(entity_name, prop.name)
    if label:
        attr["label"] = label

    default = extract_default(prop)
    if default is not None:
        attr["default"] = default

    validator = synthesize_validator(resolve_constraints(prop), prop.name)
    if validator is not None:
        attr["validate"] = validator

    logger.debug("Composed %s.%s as %s", entity_name, prop.name, attr.get("type"))
    return attr
