"""Tool-related data models."""

from .models import ToolDefinition, ToolCall, Scalar, parse_tool_definitions
from .results import ResolvedEntity, ExecutionResult, RunContext, ENTITY_TEAM, ENTITY_PLAYER

__all__ = [
    "ToolDefinition",
    "ToolCall",
    "Scalar",
    "parse_tool_definitions",
    "ResolvedEntity",
    "ExecutionResult",
    "RunContext",
    "ENTITY_TEAM",
    "ENTITY_PLAYER",
]
