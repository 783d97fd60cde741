"""
electrodb-emitter - compile annotated data models into ElectroDB entity schemas.

Reads a typed model graph plus entity, label, timestamp and index
annotations, and writes a TypeScript module of ElectroDB entity definitions.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import EmitterError, ErrorContext
from .core.model_loader import load_model_document
from .schema import assemble_schemas, serialize
from .stacks.electrodb import render_document


def _get_version() -> str:
    try:
        return _metadata_version("electrodb-emitter")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "EmitterError",
    "ErrorContext",
    "load_model_document",
    "assemble_schemas",
    "serialize",
    "render_document",
]
