"""
Schema compiler.

Turns a model graph and its annotations into ElectroDB entity schemas and
serializes them to source text:

- type_mapper: model graph type -> attribute descriptor
- constraints: property -> ConstraintSet
- validators: ConstraintSet -> Validator
- attributes: property + metadata -> attribute descriptor
- assembler: model graph + metadata -> EntitySchema per entity
- serializer: descriptor tree -> literal-expression source text
"""

from .assembler import EntitySchema, assemble_entity, assemble_schemas
from .attributes import compose_attribute
from .constraints import ConstraintSet, resolve_constraints, walk_scalar_chain
from .defaults import extract_default
from .fragments import CurrentTime, CustomAttributeType, SourceFragment
from .serializer import UNDEFINED, serialize
from .type_mapper import Attribute, map_type, render_type_expression
from .validators import AttributeValidationError, Validator, synthesize_validator

__all__ = [
    "Attribute",
    "AttributeValidationError",
    "ConstraintSet",
    "CurrentTime",
    "CustomAttributeType",
    "EntitySchema",
    "SourceFragment",
    "UNDEFINED",
    "Validator",
    "assemble_entity",
    "assemble_schemas",
    "compose_attribute",
    "extract_default",
    "map_type",
    "render_type_expression",
    "resolve_constraints",
    "serialize",
    "synthesize_validator",
    "walk_scalar_chain",
]
