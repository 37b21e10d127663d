"""Build the schema model from a decoded Swagger 2.0 document.

Handles:
- Definitions and their properties (sorted by key)
- Operations under each path (sorted by path, then method)
- Path, query and body parameters; other locations are kept as-is
- 200 response $ref
- Type descriptors parsed once into Primitive / ArrayOf / MapOf / Reference
- $ref validation against the document's definitions

Unknown JSON fields are ignored. The resulting model is immutable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from .errors import SchemaError, UnresolvedReferenceError
from .naming import ref_to_definition_key

logger = logging.getLogger(__name__)

HTTP_METHODS = ("delete", "get", "head", "options", "patch", "post", "put")

PRIMITIVE_KINDS = {"integer", "number", "boolean", "string"}

# Parameter locations that get request wiring in the generated method
WIRED_LOCATIONS = {"path", "query", "body"}


@dataclass(frozen=True)
class Primitive:
    kind: str


@dataclass(frozen=True)
class ArrayOf:
    element: TypeDescriptor


@dataclass(frozen=True)
class MapOf:
    value: TypeDescriptor


@dataclass(frozen=True)
class Reference:
    ref: str

    @property
    def key(self) -> str:
        """Definition key this reference points at."""
        return ref_to_definition_key(self.ref)


TypeDescriptor = Union[Primitive, ArrayOf, MapOf, Reference]

# Untyped nodes, arrays without items, objects without additionalProperties
ANY = Primitive("any")


@dataclass(frozen=True)
class Property:
    name: str
    type: TypeDescriptor
    description: str = ""


@dataclass(frozen=True)
class Definition:
    name: str
    description: str
    properties: tuple[Property, ...]


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool
    type: TypeDescriptor
    description: str = ""

    @property
    def is_wired(self) -> bool:
        return self.location in WIRED_LOCATIONS


@dataclass(frozen=True)
class Operation:
    path: str
    method: str
    operation_id: str
    summary: str
    parameters: tuple[Parameter, ...]
    response: Reference | None = None

    @property
    def label(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class SchemaDocument:
    definitions: tuple[Definition, ...]
    operations: tuple[Operation, ...]

    def get_definition(self, key: str) -> Definition | None:
        for definition in self.definitions:
            if definition.name == key:
                return definition
        return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any, where: str) -> dict[str, Any]:
    """Return value as a dict; absent means empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SchemaError(f"{where} must be an object, got {type(value).__name__}")
    return value


def parse_descriptor(
    raw: dict[str, Any],
    *,
    keep_unknown_tags: bool = False,
    nested: bool = False,
) -> TypeDescriptor:
    """Parse a property/parameter/schema node into a type descriptor.

    A node with neither a type tag nor a $ref is ``any``. An unknown type
    tag falls through to a reference, even when the node has no $ref (that
    empty reference fails validation later).
    With ``keep_unknown_tags`` an unknown tag without a $ref is kept verbatim
    as a primitive, which is how non-body parameters such as ``file`` are
    carried through. Nested arrays and maps below one level become ``any``.
    """
    type_tag = _text(raw.get("type"))

    if type_tag in PRIMITIVE_KINDS:
        return Primitive(type_tag)

    if type_tag == "array":
        if nested:
            return ANY
        items = raw.get("items")
        if not isinstance(items, dict) or not items:
            return ArrayOf(ANY)
        return ArrayOf(parse_descriptor(items, nested=True))

    if type_tag == "object":
        if nested:
            return ANY
        additional = raw.get("additionalProperties")
        if not isinstance(additional, dict) or not additional:
            return MapOf(ANY)
        return MapOf(parse_descriptor(additional, nested=True))

    ref = _text(raw.get("$ref"))
    if not type_tag and not ref:
        # untyped node such as {"description": "any json"}
        return ANY
    if keep_unknown_tags and not ref:
        return Primitive(type_tag)
    return Reference(ref)


def _parse_definition(key: str, raw: Any) -> Definition:
    raw = _mapping(raw, f"definition {key!r}")
    properties_raw = _mapping(raw.get("properties"), f"definition {key!r} properties")

    properties = []
    for name in sorted(properties_raw):
        prop = _mapping(properties_raw[name], f"definition {key!r} property {name!r}")
        properties.append(
            Property(
                name=name,
                type=parse_descriptor(prop),
                description=_text(prop.get("description")),
            )
        )

    return Definition(
        name=key,
        description=_text(raw.get("description")),
        properties=tuple(properties),
    )


def _parse_parameter(raw: Any, where: str) -> Parameter:
    raw = _mapping(raw, where)
    name = _text(raw.get("name"))
    if not name:
        raise SchemaError(f"{where} has no name")
    location = _text(raw.get("in"))

    if location == "body":
        schema = raw.get("schema")
        param_type = parse_descriptor(schema) if isinstance(schema, dict) and schema else ANY
    else:
        param_type = parse_descriptor(raw, keep_unknown_tags=True)

    return Parameter(
        name=name,
        location=location,
        required=bool(raw.get("required", False)),
        type=param_type,
        description=_text(raw.get("description")),
    )


def _parse_response(raw: dict[str, Any], where: str) -> Reference | None:
    responses = _mapping(raw.get("responses"), f"{where} responses")
    ok = responses.get("200")
    if not isinstance(ok, dict):
        return None
    schema = ok.get("schema")
    if not isinstance(schema, dict):
        return None
    ref = _text(schema.get("$ref"))
    return Reference(ref) if ref else None


def _parse_operation(path: str, method: str, raw: Any) -> Operation:
    where = f"{method.upper()} {path}"
    raw = _mapping(raw, where)

    parameters_raw = raw.get("parameters") or []
    if not isinstance(parameters_raw, list):
        raise SchemaError(f"{where} parameters must be an array")
    parameters = tuple(
        _parse_parameter(p, f"{where} parameter #{i}") for i, p in enumerate(parameters_raw)
    )

    for param in parameters:
        if not param.is_wired:
            logger.debug("%s: parameter %r in %r is not wired", where, param.name, param.location)

    return Operation(
        path=path,
        method=method,
        operation_id=_text(raw.get("operationId")),
        summary=_text(raw.get("summary")),
        parameters=parameters,
        response=_parse_response(raw, where),
    )


def _descriptor_refs(descriptor: TypeDescriptor) -> list[Reference]:
    if isinstance(descriptor, Reference):
        return [descriptor]
    if isinstance(descriptor, ArrayOf):
        return _descriptor_refs(descriptor.element)
    if isinstance(descriptor, MapOf):
        return _descriptor_refs(descriptor.value)
    return []


def _check_reference(keys: set[str], ref: Reference, where: str) -> None:
    if ref.key not in keys:
        raise UnresolvedReferenceError(ref.ref, where)


def validate_document(document: SchemaDocument) -> None:
    """Check the model invariants; raise SchemaError on the first violation."""
    keys = {d.name for d in document.definitions}

    for definition in document.definitions:
        for prop in definition.properties:
            for ref in _descriptor_refs(prop.type):
                _check_reference(keys, ref, f"definition {definition.name!r} property {prop.name!r}")

    seen_ids: dict[str, str] = {}
    for op in document.operations:
        if not op.operation_id:
            raise SchemaError(f"{op.label} has no operationId")
        if op.operation_id in seen_ids:
            raise SchemaError(
                f"operationId {op.operation_id!r} used by both {seen_ids[op.operation_id]} and {op.label}"
            )
        seen_ids[op.operation_id] = op.label

        body_params = [p for p in op.parameters if p.location == "body"]
        if len(body_params) > 1:
            raise SchemaError(f"{op.label} has {len(body_params)} body parameters, at most one is allowed")

        for param in op.parameters:
            for ref in _descriptor_refs(param.type):
                _check_reference(keys, ref, f"{op.label} parameter {param.name!r}")
            if param.location == "path":
                placeholder = "{" + param.name + "}"
                count = op.path.count(placeholder)
                if count != 1:
                    raise SchemaError(
                        f"{op.label} path parameter {param.name!r} appears {count} times in the URL, expected once"
                    )

        if op.response is not None:
            _check_reference(keys, op.response, f"{op.label} 200 response")


def parse_document(spec: dict[str, Any]) -> SchemaDocument:
    """Parse and validate a decoded document."""
    definitions_raw = _mapping(spec.get("definitions"), "definitions")
    paths_raw = _mapping(spec.get("paths"), "paths")

    definitions = tuple(_parse_definition(key, definitions_raw[key]) for key in sorted(definitions_raw))

    operations = []
    for path in sorted(paths_raw):
        path_item = _mapping(paths_raw[path], f"path {path!r}")
        for method in sorted(path_item):
            # path-level "parameters" and vendor extensions are not operations
            if method not in HTTP_METHODS:
                continue
            operations.append(_parse_operation(path, method, path_item[method]))

    document = SchemaDocument(definitions=definitions, operations=tuple(operations))
    validate_document(document)
    logger.debug(
        "parsed %d definitions and %d operations", len(document.definitions), len(document.operations)
    )
    return document
