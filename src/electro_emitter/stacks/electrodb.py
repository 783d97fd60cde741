"""
ElectroDB backend.

Compiles every annotated model into an entity schema and writes:

    <output_dir>/index.ts       # export const <Entity> = {...} as const
    <output_dir>/package.json   # package manifest pointing at index.ts
"""

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from ..core.errors import BackendError
from ..core.ir import MetadataTable, ModelGraph
from ..schema import CustomAttributeType, EntitySchema, assemble_schemas, serialize
from . import Backend, BackendCapabilities

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_NAME = "entities"
DEFAULT_PACKAGE_VERSION = "1.0.0"
SOURCE_FILE = "index.ts"
MANIFEST_FILE = "package.json"


def _walk_values(value: Any) -> Iterator[Any]:
    yield value
    if isinstance(value, Mapping):
        for item in value.values():
            yield from _walk_values(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _walk_values(item)


def uses_custom_attribute(schemas: Mapping[str, EntitySchema]) -> bool:
    return any(isinstance(v, CustomAttributeType) for v in _walk_values(dict(schemas)))


def render_document(schemas: Mapping[str, EntitySchema]) -> str:
    """
    Render compiled entity schemas as one TypeScript module.

    Args:
        schemas: Entity name -> EntitySchema, in output order

    Returns:
        Module source: the electrodb import (only when a custom attribute
        type is used) followed by one ``export const`` per entity
    """
    definitions = "\n".join(
        f"export const {name} = {serialize(schema)} as const" for name, schema in schemas.items()
    )
    if uses_custom_attribute(schemas):
        imports = f'import {{ {CustomAttributeType.IMPORT_NAME} }} from "electrodb";\n\n'
        return imports + definitions
    return definitions


def package_manifest(package_name: str | None, package_version: str | None) -> dict[str, str]:
    return {
        "name": package_name or DEFAULT_PACKAGE_NAME,
        "version": package_version or DEFAULT_PACKAGE_VERSION,
        "description": "ElectroDB entities",
        "main": f"./{SOURCE_FILE}",
        "types": f"./{SOURCE_FILE}",
    }


class ElectroDBBackend(Backend):
    """
    Generate ElectroDB entity schemas from an annotated model graph.

    Maps model concepts to ElectroDB:
    - @entity models → exported entity schemas
    - Properties → attributes (type, required, label, default, validate)
    - @createdAt / @updatedAt → numeric epoch-millisecond attributes
    - @index access patterns → indexes
    """

    def generate(
        self,
        graph: ModelGraph,
        metadata: MetadataTable,
        output_dir: Path,
        package_name: str | None = None,
        package_version: str | None = None,
        **options: Any,
    ) -> list[Path]:
        """
        Compile and write the entity module and its package manifest.

        Args:
            graph: Model graph
            metadata: Annotation side table
            output_dir: Output directory for generated files
            package_name: Manifest name (default "entities")
            package_version: Manifest version (default "1.0.0")
            **options: Additional options

        Returns:
            Paths of index.ts and package.json

        Raises:
            EmitterError: If compilation fails (nothing is written)
            BackendError: If the files cannot be written
        """
        # Compile everything before touching the filesystem
        source = render_document(assemble_schemas(graph, metadata))
        manifest = json.dumps(package_manifest(package_name, package_version), indent=2)

        source_file = output_dir / SOURCE_FILE
        manifest_file = output_dir / MANIFEST_FILE
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            source_file.write_text(source + "\n", encoding="utf-8")
            manifest_file.write_text(manifest + "\n", encoding="utf-8")
        except OSError as e:
            raise BackendError(f"Failed to write ElectroDB entities to {output_dir}: {e}") from e

        logger.info("Wrote %s and %s", source_file, manifest_file)
        return [source_file, manifest_file]

    def get_capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            name="electrodb",
            description="Generate ElectroDB entity schemas from annotated models",
            output_files=[SOURCE_FILE, MANIFEST_FILE],
        )
