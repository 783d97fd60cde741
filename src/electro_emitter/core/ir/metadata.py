"""
Attached metadata for the model graph.

Annotations (entity identity, labels, timestamp markers, indexes) are kept in
an explicit read-only side table keyed by model name, or by
``(model name, property name)`` for property annotations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

PropertyKey = tuple[str, str]


class EntityMeta(BaseModel):
    """
    Entity identity attached to a record.

    Attributes:
        entity: Entity name written into the schema model block
        service: Service the entity belongs to
        version: Schema version, "1" when not given
    """

    entity: str
    service: str
    version: str = "1"

    model_config = ConfigDict(frozen=True)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: object) -> object:
        """Accept numeric versions and store them as text."""
        if v is None:
            return "1"
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v


class KeySpec(BaseModel):
    """Partition or sort key of an index."""

    field: str | None = None
    composite: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IndexSpec(BaseModel):
    """
    Access pattern (index) declared on an entity.

    Examples:
        - primary: IndexSpec(pk=KeySpec(field="pk", composite=["pk"]), sk=KeySpec(field="sk"))
        - GSI: IndexSpec(pk=..., sk=..., index="gsi1", collection="jobs")
    """

    pk: KeySpec = Field(default_factory=KeySpec)
    sk: KeySpec = Field(default_factory=KeySpec)
    index: str | None = None
    collection: str | list[str] | None = None
    type: str | None = None
    scope: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def composite_names(self) -> list[str]:
        return [*self.pk.composite, *self.sk.composite]


class TimestampMarker(BaseModel):
    """createdAt / updatedAt marker with an optional field-name override."""

    field: str | None = None

    model_config = ConfigDict(frozen=True)


class MetadataTable(BaseModel):
    """
    Read-only lookup of every annotation of one compilation unit.

    Entities keep their annotation order, which is the order schemas are
    emitted in.
    """

    entities: dict[str, EntityMeta] = Field(default_factory=dict)
    labels: dict[PropertyKey, str] = Field(default_factory=dict)
    created_at: dict[PropertyKey, TimestampMarker] = Field(default_factory=dict)
    updated_at: dict[PropertyKey, TimestampMarker] = Field(default_factory=dict)
    indexes: dict[str, dict[str, IndexSpec]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def label_for(self, model: str, prop: str) -> str | None:
        return self.labels.get((model, prop))

    def created_at_for(self, model: str, prop: str) -> TimestampMarker | None:
        return self.created_at.get((model, prop))

    def updated_at_for(self, model: str, prop: str) -> TimestampMarker | None:
        return self.updated_at.get((model, prop))

    def indexes_for(self, model: str) -> dict[str, IndexSpec]:
        return self.indexes.get(model, {})
