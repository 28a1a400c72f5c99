import pytest

from sports_proxy.core.exceptions import ToolValidationError
from sports_proxy.core.tools.schema import SchemaValidator


def test_assert_no_recursive_refs_no_recursion() -> None:
    schema = {
        "type": "object",
        "properties": {
            "teamId": {"type": "string"},
            "filter": {"type": "object", "properties": {"season": {"type": "integer"}}},
        },
    }
    # Should not raise
    SchemaValidator.assert_no_recursive_refs(schema)


def test_assert_no_recursive_refs_with_recursion() -> None:
    schema = {
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
        "properties": {"root": {"$ref": "#/$defs/Node"}},
    }
    with pytest.raises(ToolValidationError, match="Recursive structure detected"):
        SchemaValidator.assert_no_recursive_refs(schema)


def test_resolve_refs_inlines_definitions() -> None:
    schema = {
        "$defs": {"Season": {"type": "string", "description": "Season year"}},
        "type": "object",
        "properties": {"season": {"$ref": "#/$defs/Season"}},
    }

    resolved = SchemaValidator.resolve_refs(schema)

    assert resolved["properties"]["season"] == {"type": "string", "description": "Season year"}


def test_sanitize_schema_removes_metadata() -> None:
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "RosterArgs",
        "type": "object",
        "properties": {"teamId": {"type": "string", "title": "Team Id"}},
        "$defs": {},
    }

    assert SchemaValidator.sanitize_schema(schema) == {
        "type": "object",
        "properties": {"teamId": {"type": "string"}},
    }


def test_sanitize_schema_keeps_property_named_title() -> None:
    schema = {"type": "object", "properties": {"title": {"type": "string"}}}

    assert SchemaValidator.sanitize_schema(schema) == schema


def test_sanitize_schema_collapses_optional() -> None:
    schema = {
        "type": "object",
        "properties": {
            "season": {"anyOf": [{"type": "string"}, {"type": "null"}], "description": "Season year"},
        },
    }

    sanitized = SchemaValidator.sanitize_schema(schema)

    assert sanitized["properties"]["season"] == {"type": "string", "description": "Season year"}


def test_parameter_names() -> None:
    assert SchemaValidator.parameter_names({"properties": {"a": {}, "b": {}}}) == ["a", "b"]
    assert SchemaValidator.parameter_names({}) == []
    assert SchemaValidator.parameter_names("nope") == []
