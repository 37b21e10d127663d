"""Generation-time errors.

All of these abort generation; nothing is written when one is raised.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for every error that stops code generation."""


class DocumentError(GenerationError):
    """The input document could not be read or decoded."""


class SchemaError(GenerationError):
    """The document decoded but breaks an invariant of the schema model."""


class UnresolvedReferenceError(SchemaError):
    """A $ref points at a definition that is not in the document."""

    def __init__(self, ref: str, where: str) -> None:
        self.ref = ref
        self.where = where
        shown = ref or "<empty>"
        super().__init__(f"unresolved reference {shown!r} in {where}")
