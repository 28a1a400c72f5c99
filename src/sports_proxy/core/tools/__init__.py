from .models import (
    ToolDefinition,
    ToolCall,
    ResolvedEntity,
    ExecutionResult,
    RunContext,
    parse_tool_definitions,
)
from .registry import ToolSpec, ToolRegistry, ENTITY_ARGUMENT_KEYS, default_registry, default_tool_definitions
from .schema import SchemaValidator

__all__ = [
    "ToolDefinition",
    "ToolCall",
    "ResolvedEntity",
    "ExecutionResult",
    "RunContext",
    "parse_tool_definitions",
    "ToolSpec",
    "ToolRegistry",
    "ENTITY_ARGUMENT_KEYS",
    "default_registry",
    "default_tool_definitions",
    "SchemaValidator",
]
