"""
Source fragments embedded in descriptor trees.

A source fragment is a value the serializer renders verbatim as an
expression instead of as data. Fragments that stand for functions are also
callable from Python so descriptor trees can be exercised without a
JavaScript runtime.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass


class SourceFragment(ABC):
    """A value that renders as a live expression in generated source."""

    @abstractmethod
    def to_source(self) -> str:
        """Return the expression source text."""


@dataclass(frozen=True)
class CurrentTime(SourceFragment):
    """Function returning the current epoch time in milliseconds."""

    def __call__(self, *args: object) -> int:
        return time.time_ns() // 1_000_000

    def to_source(self) -> str:
        return "() => Date.now()"


@dataclass(frozen=True)
class CustomAttributeType(SourceFragment):
    """
    Opaque attribute type for values the storage library cannot describe natively.

    ``type_expression`` is a TypeScript type such as ``boolean | number``.
    """

    type_expression: str

    IMPORT_NAME = "CustomAttributeType"

    def to_source(self) -> str:
        return f'{self.IMPORT_NAME}<{self.type_expression}>("any")'
