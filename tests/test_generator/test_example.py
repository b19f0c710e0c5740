"""Tests for specscope.generator.example.

Covers:
- synthesize_example precedence: $ref, explicit example, array, object, fallback
- shallow property placeholders and date-time strings
- success response selection and request body examples
- default parameter values and their form-text rendering
- describe_schema_fields for objects, arrays and references
"""

from __future__ import annotations

from specscope.generator.example import (
    DATE_TIME_EXAMPLE,
    default_parameter_values,
    describe_schema_fields,
    request_body_example,
    response_example,
    success_response,
    synthesize_example,
)
from specscope.models import Operation, Parameter, Schema


def _schema(raw: dict) -> Schema:
    return Schema.model_validate(raw)


def _param(raw: dict) -> Parameter:
    return Parameter.model_validate({"in": "query", **raw})


MARKET_EXAMPLE = {
    "id": 0,
    "question": "string",
    "price": 0,
    "open": True,
    "closes_at": DATE_TIME_EXAMPLE,
    "outcomes": [],
    "creator": None,
}


# ------------------------------------------------------------------ #
# synthesize_example
# ------------------------------------------------------------------ #


class TestSynthesizeExample:
    """Test example synthesis from schemas."""

    def test_none_schema(self, markets_spec) -> None:
        assert synthesize_example(None, markets_spec) == {}

    def test_object_with_scalar_properties(self, markets_spec) -> None:
        schema = _schema({"type": "object", "properties": {"ok": {"type": "boolean"}}})
        assert synthesize_example(schema, markets_spec) == {"ok": True}

    def test_resolves_ref(self, markets_spec) -> None:
        schema = _schema({"$ref": "#/components/schemas/Market"})
        assert synthesize_example(schema, markets_spec) == MARKET_EXAMPLE

    def test_array_of_refs(self, markets_spec) -> None:
        schema = _schema({"type": "array", "items": {"$ref": "#/components/schemas/Market"}})
        assert synthesize_example(schema, markets_spec) == [MARKET_EXAMPLE]

    def test_array_without_items(self, markets_spec) -> None:
        assert synthesize_example(_schema({"type": "array"}), markets_spec) == [{}]

    def test_explicit_example_wins(self, markets_spec) -> None:
        schema = _schema({
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "example": {"a": "given"},
        })
        assert synthesize_example(schema, markets_spec) == {"a": "given"}

    def test_explicit_null_example_is_used(self, markets_spec) -> None:
        schema = _schema({"type": "object", "properties": {}, "example": None})
        assert synthesize_example(schema, markets_spec) is None

    def test_example_is_copied(self, markets_spec) -> None:
        schema = _schema({"type": "object", "example": {"nested": [1, 2]}})
        first = synthesize_example(schema, markets_spec)
        first["nested"].append(3)
        assert synthesize_example(schema, markets_spec) == {"nested": [1, 2]}

    def test_scalar_top_level_schema_is_empty_object(self, markets_spec) -> None:
        assert synthesize_example(_schema({"type": "string"}), markets_spec) == {}
        assert synthesize_example(_schema({"type": "integer"}), markets_spec) == {}

    def test_untyped_schema_is_empty_object(self, markets_spec) -> None:
        assert synthesize_example(_schema({}), markets_spec) == {}

    def test_object_without_properties_is_empty_object(self, markets_spec) -> None:
        assert synthesize_example(_schema({"type": "object"}), markets_spec) == {}

    def test_unresolvable_ref_is_empty_object(self, markets_spec) -> None:
        schema = _schema({"$ref": "#/components/schemas/Missing"})
        assert synthesize_example(schema, markets_spec) == {}

    def test_property_placeholders(self, markets_spec) -> None:
        schema = _schema({"type": "object", "properties": {
            "s": {"type": "string"},
            "when": {"type": "string", "format": "date-time"},
            "n": {"type": "number"},
            "i": {"type": "integer"},
            "b": {"type": "boolean"},
            "list": {"type": "array", "items": {"type": "string"}},
            "obj": {"type": "object", "properties": {"x": {"type": "string"}}},
            "ref": {"$ref": "#/components/schemas/User"},
            "given": {"type": "string", "example": "hello"},
            "untyped": {},
        }})
        assert synthesize_example(schema, markets_spec) == {
            "s": "string",
            "when": DATE_TIME_EXAMPLE,
            "n": 0,
            "i": 0,
            "b": True,
            "list": [],
            "obj": None,
            "ref": None,
            "given": "hello",
            "untyped": None,
        }

    def test_self_referencing_array_terminates(self, minimal_spec) -> None:
        spec = minimal_spec(components={"schemas": {
            "Tree": {"type": "array", "items": {"$ref": "#/components/schemas/Tree"}},
        }})
        result = synthesize_example(_schema({"$ref": "#/components/schemas/Tree"}), spec, max_depth=4)
        assert isinstance(result, list)

    def test_ref_cycle_terminates(self, minimal_spec) -> None:
        spec = minimal_spec(components={"schemas": {
            "Loop": {"$ref": "#/components/schemas/Loop"},
        }})
        assert synthesize_example(_schema({"$ref": "#/components/schemas/Loop"}), spec) == {}

    def test_openapi_31_type_list(self, markets_spec) -> None:
        schema = _schema({"type": ["null", "object"], "properties": {"n": {"type": ["integer", "null"]}}})
        assert synthesize_example(schema, markets_spec) == {"n": 0}


# ------------------------------------------------------------------ #
# Response and request body examples
# ------------------------------------------------------------------ #


class TestResponseExamples:
    """Test choosing the schema to synthesise from."""

    def test_prefers_200(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets/{id}"].get
        assert success_response(operation).description == "The market"

    def test_falls_back_to_201(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets"].post
        assert success_response(operation).description == "Created"

    def test_no_success_response(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets/{id}"].delete
        assert success_response(operation) is None
        assert response_example(operation, markets_spec) == {}

    def test_response_example_for_list(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets"].get
        assert response_example(operation, markets_spec) == [MARKET_EXAMPLE]

    def test_ping_scenario(self, markets_spec) -> None:
        operation = markets_spec.paths["/ping"].get
        assert response_example(operation, markets_spec) == {"ok": True}

    def test_non_json_response_is_empty_object(self, markets_spec) -> None:
        operation = markets_spec.paths["/reports"].get
        assert response_example(operation, markets_spec) == {}

    def test_request_body_from_schema(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets"].post
        assert request_body_example(operation, markets_spec) == {
            "question": "Will it rain tomorrow?",
            "closes_at": DATE_TIME_EXAMPLE,
        }

    def test_no_request_body(self, markets_spec) -> None:
        operation = markets_spec.paths["/markets"].get
        assert request_body_example(operation, markets_spec) is None

    def test_media_example_wins(self, markets_spec) -> None:
        operation = Operation.model_validate({
            "requestBody": {"content": {"application/json": {
                "schema": {"$ref": "#/components/schemas/MarketInput"},
                "example": {"question": "Literal?"},
            }}},
        })
        assert request_body_example(operation, markets_spec) == {"question": "Literal?"}


# ------------------------------------------------------------------ #
# default_parameter_values
# ------------------------------------------------------------------ #


class TestDefaultParameterValues:
    """Test pre-filled parameter inputs."""

    def test_parameter_example_first(self) -> None:
        params = [_param({"name": "id", "example": 42, "schema": {"type": "integer", "default": 1}})]
        assert default_parameter_values(params) == {"id": "42"}

    def test_schema_example_then_default(self) -> None:
        params = [
            _param({"name": "a", "schema": {"type": "string", "example": "ex", "default": "df"}}),
            _param({"name": "b", "schema": {"type": "string", "default": "df"}}),
        ]
        assert default_parameter_values(params) == {"a": "ex", "b": "df"}

    def test_missing_values_are_empty(self) -> None:
        params = [_param({"name": "q"}), _param({"name": "r", "schema": {"type": "string"}})]
        assert default_parameter_values(params) == {"q": "", "r": ""}

    def test_form_text_rendering(self) -> None:
        params = [
            _param({"name": "flag", "schema": {"type": "boolean", "default": False}}),
            _param({"name": "ids", "example": [1, 2]}),
        ]
        assert default_parameter_values(params) == {"flag": "false", "ids": "[1, 2]"}

    def test_empty_example_falls_through(self) -> None:
        params = [_param({"name": "q", "example": "", "schema": {"default": "x"}})]
        assert default_parameter_values(params) == {"q": "x"}


# ------------------------------------------------------------------ #
# describe_schema_fields
# ------------------------------------------------------------------ #


class TestDescribeSchemaFields:
    """Test response field documentation."""

    def test_object_fields(self, markets_spec) -> None:
        fields = describe_schema_fields(_schema({"$ref": "#/components/schemas/Market"}), markets_spec)
        by_name = {f.name: f for f in fields}
        assert [f.name for f in fields][:2] == ["id", "question"]
        assert by_name["id"].type == "integer"
        assert by_name["id"].required is True
        assert by_name["id"].description == "Market identifier"
        assert by_name["price"].required is False
        assert by_name["creator"].type == "object"

    def test_array_describes_items(self, markets_spec) -> None:
        schema = _schema({"type": "array", "items": {"$ref": "#/components/schemas/User"}})
        fields = describe_schema_fields(schema, markets_spec)
        assert [(f.name, f.type) for f in fields] == [("name", "string")]

    def test_scalar_has_no_fields(self, markets_spec) -> None:
        assert describe_schema_fields(_schema({"type": "string"}), markets_spec) == []

    def test_none_has_no_fields(self, markets_spec) -> None:
        assert describe_schema_fields(None, markets_spec) == []
