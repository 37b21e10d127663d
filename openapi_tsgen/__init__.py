"""Generate a typed TypeScript fetch client from a Swagger 2.0 JSON document."""

from __future__ import annotations

from .codegen import generate_source, render
from .config import GenerationOptions
from .context_builder import build_client_module
from .errors import DocumentError, GenerationError, SchemaError, UnresolvedReferenceError
from .loader import load_document
from .schema_parser import parse_document

__all__ = [
    "DocumentError",
    "GenerationError",
    "GenerationOptions",
    "SchemaError",
    "UnresolvedReferenceError",
    "build_client_module",
    "generate_source",
    "load_document",
    "parse_document",
    "render",
]
