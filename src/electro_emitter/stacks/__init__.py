"""
Backend plugin system for the emitter.

Backends turn a model graph and its annotations into concrete artifacts
(source files, package manifests).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.errors import BackendError
from ..core.ir import MetadataTable, ModelGraph


@dataclass
class BackendCapabilities:
    """
    Describes what a backend can generate.

    Used for introspection and CLI help text.
    """

    name: str
    description: str
    output_files: list[str]  # e.g., ["index.ts", "package.json"]


class Backend(ABC):
    """
    Abstract base class for all emitter backends.

    Minimal interface: compile and write in one call.
    """

    @abstractmethod
    def generate(
        self,
        graph: ModelGraph,
        metadata: MetadataTable,
        output_dir: Path,
        **options: Any,
    ) -> list[Path]:
        """
        Generate artifacts from a model graph.

        Args:
            graph: Model graph
            metadata: Annotation side table
            output_dir: Directory to write generated files (created if needed)
            **options: Backend-specific options passed from CLI

        Returns:
            Paths of the written files

        Raises:
            EmitterError: If compilation or writing fails
        """

    def get_capabilities(self) -> BackendCapabilities:
        """
        Get backend capabilities for introspection.

        Override to provide backend metadata.
        """
        return BackendCapabilities(
            name=self.__class__.__name__,
            description="No description provided",
            output_files=[],
        )


class BackendRegistry:
    """Registry of backend classes, looked up by name."""

    def __init__(self) -> None:
        self._backends: dict[str, type[Backend]] = {}

    def register(self, name: str, backend_class: type[Backend]) -> None:
        """
        Register a backend class.

        Args:
            name: Backend name
            backend_class: Backend class (must extend Backend)

        Raises:
            BackendError: If name already registered or class invalid
        """
        if name in self._backends:
            raise BackendError(
                f"Backend '{name}' is already registered. Cannot register {backend_class.__name__}."
            )

        if not issubclass(backend_class, Backend):
            raise BackendError(f"Backend class {backend_class.__name__} must extend Backend")

        self._backends[name] = backend_class

    def get(self, name: str) -> Backend:
        """
        Get a backend instance by name.

        Raises:
            BackendError: If backend not found
        """
        if name not in self._backends:
            available = list(self._backends.keys())
            raise BackendError(f"Backend '{name}' not found. Available backends: {available}")

        return self._backends[name]()

    def list_backends(self) -> list[str]:
        return list(self._backends.keys())


DEFAULT_BACKEND = "electrodb"

# Global registry instance
_registry: BackendRegistry | None = None


def get_registry() -> BackendRegistry:
    """
    Get the global backend registry.

    Registers the built-in backends on first call.
    """
    global _registry
    if _registry is None:
        from .electrodb import ElectroDBBackend

        _registry = BackendRegistry()
        _registry.register(DEFAULT_BACKEND, ElectroDBBackend)
    return _registry


def get_backend(name: str) -> Backend:
    """
    Get a backend instance by name.

    Raises:
        BackendError: If backend not found
    """
    return get_registry().get(name)


def list_backends() -> list[str]:
    return get_registry().list_backends()


__all__ = [
    "Backend",
    "BackendCapabilities",
    "BackendRegistry",
    "BackendError",
    "DEFAULT_BACKEND",
    "get_registry",
    "get_backend",
    "list_backends",
]
