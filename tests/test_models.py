import pytest
from pydantic import ValidationError

from sports_proxy.core.exceptions import ToolValidationError
from sports_proxy.core.tools.models import (
    ExecutionResult,
    ResolvedEntity,
    RunContext,
    ToolCall,
    ToolDefinition,
    parse_tool_definitions,
)


def test_parse_flat_definition() -> None:
    definition = ToolDefinition.parse(
        {"name": "get_team_roster", "description": "Roster", "inputSchema": {"type": "object", "properties": {}}}
    )

    assert definition.name == "get_team_roster"
    assert definition.description == "Roster"
    assert definition.parameters == {"type": "object", "properties": {}}


def test_parse_function_definition() -> None:
    definition = ToolDefinition.parse(
        {
            "type": "function",
            "function": {
                "name": "get_team_roster",
                "parameters": {"type": "object", "properties": {"teamId": {"type": "string"}}},
            },
        }
    )

    assert definition.parameter_names == ["teamId"]
    assert definition.description == ""


@pytest.mark.parametrize(
    "raw",
    [
        "get_team_roster",
        {"description": "no name"},
        {"name": "x", "parameters": ["not", "an", "object"]},
        {
            "name": "x",
            "parameters": {
                "$defs": {"N": {"properties": {"n": {"$ref": "#/$defs/N"}}}},
                "properties": {"n": {"$ref": "#/$defs/N"}},
            },
        },
    ],
)
def test_parse_rejects_unusable_declarations(raw: object) -> None:
    with pytest.raises(ToolValidationError):
        ToolDefinition.parse(raw)  # type: ignore[arg-type]


def test_duplicate_declarations_keep_the_first() -> None:
    definitions = parse_tool_definitions(
        [{"name": "a", "description": "first"}, {"name": "a", "description": "second"}, {"name": "b"}]
    )

    assert [(d.name, d.description) for d in definitions] == [("a", "first"), ("b", "")]


def test_tool_call_is_immutable() -> None:
    call = ToolCall(name="get_team_roster", arguments={"season": "2025"})

    enriched = call.with_arguments({**call.arguments, "teamId": "147"})

    assert call.arguments == {"season": "2025"}
    assert enriched.arguments == {"season": "2025", "teamId": "147"}
    with pytest.raises(ValidationError):
        call.name = "other"  # type: ignore[misc]


def test_resolved_entity_from_payload() -> None:
    entity = ResolvedEntity.from_payload("player", {"id": 592450, "fullName": "Aaron Judge", "team": "NYY"})

    assert entity is not None
    assert entity.id == "592450"
    assert entity.canonical_name == "Aaron Judge"
    assert entity.metadata == {"fullName": "Aaron Judge", "team": "NYY"}
    assert ResolvedEntity.from_payload("team", {"name": "No id"}) is None
    assert ResolvedEntity.from_payload("team", {"id": ""}) is None


def test_run_context_last_resolution_wins() -> None:
    context = RunContext()
    context.remember(ResolvedEntity(entity_type="team", id="147"))
    context.remember(ResolvedEntity(entity_type="team", id="121"))

    assert context.lookup("team").id == "121"
    assert context.lookup("player") is None


def test_execution_result_wire_shape() -> None:
    assert ExecutionResult.ok("get_standings", {"records": []}).to_dict() == {
        "tool": "get_standings",
        "success": True,
        "result": {"records": []},
    }
    assert ExecutionResult.failed("get_team_roster", "boom", enriched=True).to_dict() == {
        "tool": "get_team_roster",
        "success": False,
        "error": "boom",
        "enriched": True,
    }
