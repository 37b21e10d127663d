"""Map schema type descriptors to TypeScript type expressions."""

from __future__ import annotations

from .naming import ref_to_type_name
from .schema_parser import ArrayOf, MapOf, Primitive, Reference, TypeDescriptor

_PRIMITIVE_TYPES: dict[str, str] = {
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "string": "string",
    "any": "any",
}


def resolve_type(descriptor: TypeDescriptor) -> str:
    """Return the TypeScript spelling for a descriptor.

    Primitive tags outside the known set are emitted verbatim.
    """
    if isinstance(descriptor, Primitive):
        return _PRIMITIVE_TYPES.get(descriptor.kind, descriptor.kind)
    if isinstance(descriptor, ArrayOf):
        return f"Array<{resolve_type(descriptor.element)}>"
    if isinstance(descriptor, MapOf):
        return f"Map<string, {resolve_type(descriptor.value)}>"
    if isinstance(descriptor, Reference):
        return ref_to_type_name(descriptor.ref)
    raise TypeError(f"not a type descriptor: {descriptor!r}")


def resolve_response_type(response: Reference | None) -> str:
    """Return type of a generated method; untyped results are ``any``."""
    if response is None:
        return "any"
    return ref_to_type_name(response.ref)
