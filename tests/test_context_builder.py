"""Tests for the context_builder module."""

import pytest

from openapi_tsgen.config import GenerationOptions
from openapi_tsgen.context_builder import (
    ArgDecl,
    FieldDecl,
    PathSubstitution,
    QueryParam,
    build_client_module,
    build_interface,
    build_method,
)
from openapi_tsgen.errors import GenerationError, SchemaError
from openapi_tsgen.schema_parser import parse_document


def _single_op_doc(parameters, operation_id="do_thing", path="/v1/x", method="get", responses=None) -> dict:
    op = {"operationId": operation_id, "parameters": parameters}
    if responses:
        op["responses"] = responses
    return {"definitions": {}, "paths": {path: {method: op}}}


class TestBuildInterface:
    """Pass A: definitions to interface declarations."""

    def test_scenario_account(self):
        spec = {
            "definitions": {
                "account": {"description": "d", "properties": {"user_id": {"type": "string", "description": "id"}}},
            }
        }
        iface = build_interface(parse_document(spec).definitions[0])
        assert iface.name == "Account"
        assert iface.description == "d"
        assert iface.fields == (FieldDecl(name="userId", type="string", description="id"),)

    def test_underscored_name_keeps_underscore(self, sample_document):
        iface = build_interface(sample_document.get_definition("leaderboard_record"))
        assert iface.name == "Leaderboard_record"
        assert [f.name for f in iface.fields] == ["owner", "rank", "score"]
        assert iface.fields[0].type == "Account"

    def test_field_types(self, sample_document):
        iface = build_interface(sample_document.get_definition("account"))
        types = {f.name: f.type for f in iface.fields}
        assert types == {
            "devices": "Array<Account_device>",
            "userId": "string",
            "verified": "boolean",
            "wallet": "Map<string, number>",
        }


class TestBuildMethod:
    """Pass B: operations to method declarations."""

    def test_scenario_get_user(self, sample_document):
        op = next(o for o in sample_document.operations if o.operation_id == "get_user")
        method = build_method(op)
        assert method.name == "getUser"
        assert method.http_method == "GET"
        assert method.url == "/v1/user/{id}"
        assert method.args == (ArgDecl(name="id", type="string", optional=False),)
        assert method.required_args == ("id",)
        assert method.path_substitutions == (PathSubstitution(placeholder="{id}", arg="id"),)
        assert method.query_params == ()
        assert method.body_arg is None
        assert method.return_type == "Account"

    def test_query_and_unwired_parameters(self, sample_document):
        op = next(o for o in sample_document.operations if o.operation_id == "list_leaderboard_records")
        method = build_method(op)
        assert [a.name for a in method.args] == ["leaderboardId", "ownerIds", "limit", "traceId"]
        assert method.args[1] == ArgDecl(name="ownerIds", type="Array<string>", optional=True)
        assert method.args[2] == ArgDecl(name="limit", type="number", optional=True)
        # header parameters stay in the signature without wiring
        assert method.args[3] == ArgDecl(name="traceId", type="string", optional=True)
        assert method.path_substitutions == (PathSubstitution(placeholder="{leaderboard_id}", arg="leaderboardId"),)
        assert method.query_params == (
            QueryParam(key="owner_ids", arg="ownerIds"),
            QueryParam(key="limit", arg="limit"),
        )
        assert method.body_arg is None
        assert method.return_type == "Leaderboard_record_list"

    def test_body_parameter(self, sample_document):
        op = next(o for o in sample_document.operations if o.operation_id == "update_account")
        method = build_method(op)
        assert method.body_arg == "body"
        assert method.args == (ArgDecl(name="body", type="Account", optional=False),)
        assert method.http_method == "PUT"

    def test_untyped_response(self, sample_document):
        op = next(o for o in sample_document.operations if o.operation_id == "delete_user")
        assert build_method(op).return_type == "any"

    def test_optional_before_required(self):
        params = [
            {"name": "cursor", "in": "query", "type": "string"},
            {"name": "id", "in": "path", "required": True, "type": "integer"},
        ]
        document = parse_document(_single_op_doc(params, path="/v1/{id}"))
        method = build_method(document.operations[0])
        assert method.args == (
            ArgDecl(name="cursor", type="string | undefined", optional=False),
            ArgDecl(name="id", type="number", optional=False),
        )
        assert method.required_args == ("id",)

    def test_integer_path_parameter_is_number(self):
        params = [{"name": "id", "in": "path", "required": True, "type": "integer"}]
        document = parse_document(_single_op_doc(params, path="/v1/{id}"))
        assert build_method(document.operations[0]).args[0].type == "number"

    def test_map_query_parameter(self):
        params = [{"name": "vars", "in": "query", "type": "object", "additionalProperties": {"type": "string"}}]
        document = parse_document(_single_op_doc(params))
        assert build_method(document.operations[0]).args[0].type == "Map<string, string>"

    def test_reserved_options_argument(self):
        params = [{"name": "options", "in": "query", "type": "string"}]
        document = parse_document(_single_op_doc(params))
        with pytest.raises(SchemaError, match="options"):
            build_method(document.operations[0])

    def test_colliding_argument_names(self):
        params = [
            {"name": "user_id", "in": "query", "type": "string"},
            {"name": "userId", "in": "query", "type": "string"},
        ]
        document = parse_document(_single_op_doc(params))
        with pytest.raises(SchemaError, match="userId"):
            build_method(document.operations[0])


class TestBuildClientModule:
    """Test the full intermediate structure."""

    def test_counts(self, sample_document):
        module = build_client_module(sample_document)
        assert len(module.interfaces) == 4
        assert [m.name for m in module.methods] == [
            "updateAccount",
            "listLeaderboardRecords",
            "deleteUser",
            "getUser",
        ]

    def test_default_options(self, sample_document):
        module = build_client_module(sample_document)
        assert module.client_name == "ApiClient"
        assert module.base_path == "http://127.0.0.1:80"
        assert module.timeout_ms == 5000

    def test_custom_options(self, sample_document):
        options = GenerationOptions(client_name="NakamaApi", base_path="https://api.example.com", timeout_ms=100)
        module = build_client_module(sample_document, options)
        assert module.client_name == "NakamaApi"
        assert module.base_path == "https://api.example.com"
        assert module.timeout_ms == 100

    def test_camel_case_method_collision(self):
        spec = {
            "paths": {
                "/v1/a": {"get": {"operationId": "get_user"}},
                "/v1/b": {"get": {"operationId": "getUser"}},
            }
        }
        with pytest.raises(SchemaError, match="getUser"):
            build_client_module(parse_document(spec))

    def test_dispatcher_name_reserved(self):
        spec = {"paths": {"/v1/a": {"get": {"operationId": "do_fetch"}}}}
        with pytest.raises(SchemaError, match="doFetch"):
            build_client_module(parse_document(spec))

    def test_same_input_same_structure(self, sample_spec):
        assert build_client_module(parse_document(sample_spec)) == build_client_module(parse_document(sample_spec))


class TestGenerationOptions:
    """Test option validation."""

    def test_invalid_client_name(self):
        with pytest.raises(GenerationError):
            GenerationOptions(client_name="not-valid")

    def test_non_positive_timeout(self):
        with pytest.raises(GenerationError):
            GenerationOptions(timeout_ms=0)


class TestGeneratedNames:
    """Names that would not parse or would clash in the TypeScript output."""

    def test_hyphenated_header_parameter(self):
        params = [{"name": "X-Request-Id", "in": "header", "type": "string"}]
        document = parse_document(_single_op_doc(params, operation_id="get_x"))
        with pytest.raises(SchemaError, match="GET /v1/x.*not a valid identifier"):
            build_method(document.operations[0])

    def test_hyphenated_query_parameter(self):
        params = [{"name": "page-size", "in": "query", "type": "integer"}]
        document = parse_document(_single_op_doc(params))
        with pytest.raises(SchemaError, match="page-size"):
            build_method(document.operations[0])

    def test_reserved_word_parameter(self):
        params = [{"name": "default", "in": "query", "type": "string"}]
        document = parse_document(_single_op_doc(params))
        with pytest.raises(SchemaError, match="'default' is a reserved word"):
            build_method(document.operations[0])

    def test_reserved_word_method_name_allowed(self):
        """Object method shorthand accepts reserved words."""
        document = parse_document(_single_op_doc([], operation_id="delete"))
        assert build_client_module(document).methods[0].name == "delete"

    def test_invalid_method_name(self):
        document = parse_document(_single_op_doc([], operation_id="get.thing"))
        with pytest.raises(SchemaError, match="method name"):
            build_client_module(document)

    def test_hyphenated_field(self):
        spec = {"definitions": {"a": {"properties": {"content-type": {"type": "string"}}}}}
        with pytest.raises(SchemaError, match="definition 'a'.*not a valid identifier"):
            build_interface(parse_document(spec).definitions[0])

    def test_reserved_word_field_allowed(self):
        """Interface members may be named like keywords."""
        spec = {"definitions": {"a": {"properties": {"default": {"type": "string"}}}}}
        iface = build_interface(parse_document(spec).definitions[0])
        assert iface.fields == (FieldDecl(name="default", type="string"),)

    def test_field_collision(self):
        spec = {"definitions": {"a": {"properties": {"user_id": {"type": "string"}, "userId": {"type": "integer"}}}}}
        with pytest.raises(SchemaError, match="both map to the field 'userId'"):
            build_interface(parse_document(spec).definitions[0])

    def test_interface_collision(self):
        spec = {
            "definitions": {
                "account": {"properties": {"x": {"type": "string"}}},
                "Account": {"properties": {"x": {"type": "integer"}}},
            }
        }
        with pytest.raises(SchemaError, match="both map to the interface 'Account'"):
            build_client_module(parse_document(spec))

    @pytest.mark.parametrize("key", ["api.Account", "1st_place"])
    def test_invalid_interface_name(self, key):
        spec = {"definitions": {key: {"properties": {}}}}
        with pytest.raises(SchemaError, match="interface name"):
            build_interface(parse_document(spec).definitions[0])

    def test_configuration_interface_name_reserved(self):
        spec = {"definitions": {"configurationParameters": {"properties": {}}}}
        with pytest.raises(SchemaError, match="'ConfigurationParameters' is reserved"):
            build_interface(parse_document(spec).definitions[0])
