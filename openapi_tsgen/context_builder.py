"""Build the intermediate client structure from the schema model.

Definitions become interface declarations and operations become method
declarations. Everything the template needs is decided here; the template
only prints it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .config import GenerationOptions
from .errors import SchemaError
from .naming import definition_type_name, to_camel_case
from .schema_parser import Definition, Operation, SchemaDocument
from .type_resolver import resolve_response_type, resolve_type

logger = logging.getLogger(__name__)

# Names the generated client object already uses
DISPATCHER_NAME = "doFetch"
OPTIONS_ARG = "options"
# Locals of every generated method body
RESERVED_ARGS = {OPTIONS_ARG, "urlPath", "queryParams"}
# Interface the template always declares
CONFIGURATION_INTERFACE = "ConfigurationParameters"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Reserved in strict-mode modules; cannot name a parameter
JS_RESERVED_WORDS = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "eval", "export", "extends", "false", "finally",
    "for", "function", "if", "implements", "import", "in", "instanceof", "interface", "let",
    "new", "null", "package", "private", "protected", "public", "return", "static", "super",
    "switch", "this", "throw", "true", "try", "typeof", "var", "void", "while", "with", "yield",
})


def _check_identifier(name: str, what: str, where: str, *, allow_reserved: bool = False) -> None:
    if not _IDENTIFIER.match(name):
        raise SchemaError(f"{where}: {what} {name!r} is not a valid identifier")
    if not allow_reserved and name in JS_RESERVED_WORDS:
        raise SchemaError(f"{where}: {what} {name!r} is a reserved word")


@dataclass(frozen=True)
class FieldDecl:
    name: str
    type: str
    description: str = ""


@dataclass(frozen=True)
class InterfaceDecl:
    name: str
    description: str
    fields: tuple[FieldDecl, ...]


@dataclass(frozen=True)
class ArgDecl:
    name: str
    type: str
    optional: bool


@dataclass(frozen=True)
class PathSubstitution:
    placeholder: str
    arg: str


@dataclass(frozen=True)
class QueryParam:
    key: str
    arg: str


@dataclass(frozen=True)
class MethodDecl:
    name: str
    summary: str
    http_method: str
    url: str
    args: tuple[ArgDecl, ...]
    required_args: tuple[str, ...]
    path_substitutions: tuple[PathSubstitution, ...]
    query_params: tuple[QueryParam, ...]
    body_arg: str | None
    return_type: str


@dataclass(frozen=True)
class ClientModule:
    client_name: str
    base_path: str
    timeout_ms: int
    interfaces: tuple[InterfaceDecl, ...]
    methods: tuple[MethodDecl, ...]


def build_interface(definition: Definition) -> InterfaceDecl:
    """Pass A: one interface per definition, every field optional.

    Field names may be reserved words (they are property keys), but must be
    identifiers and unique after camelCasing.
    """
    where = f"definition {definition.name!r}"
    name = definition_type_name(definition.name)
    # capitalized, so never a keyword
    _check_identifier(name, "interface name", where, allow_reserved=True)
    if name == CONFIGURATION_INTERFACE:
        raise SchemaError(f"{where}: interface name {name!r} is reserved")

    fields = []
    seen: dict[str, str] = {}
    for prop in definition.properties:
        field_name = to_camel_case(prop.name)
        _check_identifier(field_name, "field name", where, allow_reserved=True)
        if field_name in seen:
            raise SchemaError(
                f"{where}: properties {seen[field_name]!r} and {prop.name!r} both map to the field {field_name!r}"
            )
        seen[field_name] = prop.name
        fields.append(FieldDecl(name=field_name, type=resolve_type(prop.type), description=prop.description))

    return InterfaceDecl(
        name=name,
        description=definition.description,
        fields=tuple(fields),
    )


def _build_args(operation: Operation) -> tuple[ArgDecl, ...]:
    """Arguments in declaration order.

    A non-required parameter that precedes a required one cannot be marked
    ``?`` in TypeScript, so it is typed ``T | undefined`` instead.
    """
    params = operation.parameters
    args = []
    for i, param in enumerate(params):
        arg_type = resolve_type(param.type)
        optional = not param.required
        if optional and any(p.required for p in params[i + 1:]):
            arg_type = f"{arg_type} | undefined"
            optional = False
        args.append(ArgDecl(name=to_camel_case(param.name), type=arg_type, optional=optional))

    names = [a.name for a in args]
    for name in names:
        _check_identifier(name, "argument name", operation.label)
        if name in RESERVED_ARGS:
            raise SchemaError(f"{operation.label}: argument name {name!r} is reserved in the generated method")
        if names.count(name) > 1:
            raise SchemaError(f"{operation.label}: two parameters map to the argument name {name!r}")
    return tuple(args)


def build_method(operation: Operation) -> MethodDecl:
    """Pass B: one method per operation."""
    args = _build_args(operation)

    path_substitutions = []
    query_params = []
    body_arg = None
    for param in operation.parameters:
        arg = to_camel_case(param.name)
        if param.location == "path":
            path_substitutions.append(PathSubstitution(placeholder="{" + param.name + "}", arg=arg))
        elif param.location == "query":
            query_params.append(QueryParam(key=param.name, arg=arg))
        elif param.location == "body":
            body_arg = arg

    return MethodDecl(
        name=to_camel_case(operation.operation_id),
        summary=operation.summary,
        http_method=operation.method.upper(),
        url=operation.path,
        args=args,
        required_args=tuple(to_camel_case(p.name) for p in operation.parameters if p.required),
        path_substitutions=tuple(path_substitutions),
        query_params=tuple(query_params),
        body_arg=body_arg,
        return_type=resolve_response_type(operation.response),
    )


def _check_method_names(methods: list[MethodDecl], operations: tuple[Operation, ...]) -> None:
    seen: dict[str, str] = {}
    for method, operation in zip(methods, operations):
        _check_identifier(method.name, "method name", operation.label, allow_reserved=True)
        if method.name == DISPATCHER_NAME:
            raise SchemaError(f"{operation.label}: method name {DISPATCHER_NAME!r} is reserved for the dispatcher")
        if method.name in seen:
            raise SchemaError(
                f"{operation.label}: method name {method.name!r} already generated for {seen[method.name]}"
            )
        seen[method.name] = operation.label


def _check_interface_names(interfaces: tuple[InterfaceDecl, ...], document: SchemaDocument) -> None:
    seen: dict[str, str] = {}
    for iface, definition in zip(interfaces, document.definitions):
        if iface.name in seen:
            raise SchemaError(
                f"definitions {seen[iface.name]!r} and {definition.name!r} both map to the interface {iface.name!r}"
            )
        seen[iface.name] = definition.name


def build_client_module(document: SchemaDocument, options: GenerationOptions | None = None) -> ClientModule:
    """Build the full intermediate structure for one output unit."""
    options = options or GenerationOptions()

    interfaces = tuple(build_interface(d) for d in document.definitions)
    _check_interface_names(interfaces, document)
    methods = [build_method(op) for op in document.operations]
    _check_method_names(methods, document.operations)

    logger.debug("built %d interfaces and %d methods", len(interfaces), len(methods))
    return ClientModule(
        client_name=options.client_name,
        base_path=options.base_path,
        timeout_ms=options.timeout_ms,
        interfaces=interfaces,
        methods=tuple(methods),
    )
