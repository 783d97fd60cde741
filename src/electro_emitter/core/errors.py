"""
Error types for schema compilation, model loading, and configuration.

Every compilation error aborts the whole pass. Nothing is downgraded to a
warning and no partial artifact is written.
"""

from dataclasses import dataclass


class EmitterError(Exception):
    """Base exception for all emitter errors."""

    kind = "EmitterError"

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class UnsupportedTypeError(EmitterError):
    """
    Raised when a model-graph type has no mapping rule.

    Examples:
    - bytes scalars
    - literal or intrinsic types outside a union
    - cyclic scalar derivation chains
    """

    kind = "UnsupportedType"


class UnsupportedValueError(EmitterError):
    """Raised when the serializer meets a value with no rendering rule."""

    kind = "UnsupportedValue"


class InvalidTimestampTypeError(EmitterError):
    """Raised when a createdAt/updatedAt property does not map to a number."""

    kind = "InvalidTimestampType"


class NotAnEntityError(EmitterError):
    """Raised when entity or index metadata is attached to a non-record node."""

    kind = "NotAnEntity"


class InvalidAccessPatternError(EmitterError):
    """
    Raised when an index composite references a property the entity does not own.

    Examples:
    - a composite naming a property of another model
    - a composite naming an inherited property
    - a typo in a composite name
    """

    kind = "InvalidAccessPatternReference"


class ModelLoadError(EmitterError):
    """
    Raised when a model document cannot be turned into a model graph.

    Examples:
    - unknown type reference
    - cycle in scalar ``extends`` links
    - malformed type expression
    """

    kind = "ModelLoad"


class ConfigError(EmitterError):
    """Raised when emitter.toml contains invalid settings."""

    kind = "Config"


class BackendError(EmitterError):
    """Raised when a backend is unknown or cannot write its artifacts."""

    kind = "Backend"


@dataclass
class ErrorContext:
    """
    Location of an error inside the model graph.

    Attributes:
        entity: Name of the model being compiled
        property: Name of the property being compiled
        type_name: Name of the type that triggered the error
    """

    entity: str | None = None
    property: str | None = None
    type_name: str | None = None

    def format(self) -> str:
        """
        Format the context as a dotted path.

        Returns:
            String like "Task.priority (type Priority)"
        """
        location = ".".join(part for part in (self.entity, self.property) if part)
        if self.type_name:
            suffix = f"type {self.type_name}"
            return f"{location} ({suffix})" if location else suffix
        return location


def with_context(
    error: EmitterError,
    entity: str | None = None,
    property: str | None = None,
) -> EmitterError:
    """
    Return a copy of ``error`` located at ``entity``/``property``.

    Keeps an existing type name and fills in only the parts that are missing,
    so the innermost location wins.
    """
    current = error.context or ErrorContext()
    context = ErrorContext(
        entity=current.entity or entity,
        property=current.property or property,
        type_name=current.type_name,
    )
    return type(error)(error.message, context)
