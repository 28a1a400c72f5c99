"""Tool registry and the default tool table."""

from .base import ToolSpec, ToolRegistry, ENTITY_ARGUMENT_KEYS, default_registry, default_tool_definitions

__all__ = ["ToolSpec", "ToolRegistry", "ENTITY_ARGUMENT_KEYS", "default_registry", "default_tool_definitions"]
