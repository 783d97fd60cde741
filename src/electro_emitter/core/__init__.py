"""Core emitter functionality: IR, annotations, model loading, configuration, errors."""

from . import ir
from .annotations import MetadataBuilder
from .config import EmitterConfig, load_emitter_config
from .errors import (
    BackendError,
    ConfigError,
    EmitterError,
    ErrorContext,
    InvalidAccessPatternError,
    InvalidTimestampTypeError,
    ModelLoadError,
    NotAnEntityError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from .model_loader import LoadedModel, load_model_document, parse_model_document

__all__ = [
    "ir",
    "EmitterError",
    "UnsupportedTypeError",
    "UnsupportedValueError",
    "InvalidTimestampTypeError",
    "NotAnEntityError",
    "InvalidAccessPatternError",
    "ModelLoadError",
    "ConfigError",
    "BackendError",
    "ErrorContext",
    "MetadataBuilder",
    "EmitterConfig",
    "load_emitter_config",
    "LoadedModel",
    "load_model_document",
    "parse_model_document",
]
