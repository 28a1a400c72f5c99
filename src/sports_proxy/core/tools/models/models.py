"""Request-scoped tool models: declared definitions and extracted calls."""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ...exceptions import ToolValidationError
from ..schema import SchemaValidator

Scalar = Union[str, int, float, bool, None]


class ToolDefinition(BaseModel):
    """
    A tool declared by the caller for one request.

    Attributes:
        name: The unique name of the tool.
        description: What the tool does.
        parameters: JSON schema of the accepted arguments, with references inlined.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def parse(cls, raw: Union["ToolDefinition", Mapping[str, Any]]) -> "ToolDefinition":
        """Build a definition from either the flat or the OpenAI function shape.

        Accepted shapes::

            {"name": ..., "description": ..., "parameters" | "inputSchema": {...}}
            {"type": "function", "function": {"name": ..., "parameters": {...}}}

        Args:
            raw: The declared tool.

        Returns:
            The parsed definition.

        Raises:
            ToolValidationError: If no name is declared or the schema is recursive.
        """
        if isinstance(raw, ToolDefinition):
            return raw
        if not isinstance(raw, Mapping):
            raise ToolValidationError(f"Tool declaration must be an object, got {type(raw).__name__}.")

        body: Mapping[str, Any] = raw
        function = raw.get("function")
        if isinstance(function, Mapping):
            body = function

        name = body.get("name")
        if not isinstance(name, str) or not name:
            raise ToolValidationError("Tool declaration is missing a name.")

        schema = body.get("parameters") or body.get("inputSchema") or {}
        if not isinstance(schema, dict):
            raise ToolValidationError(f"Parameters of tool '{name}' must be a JSON object.")
        schema = SchemaValidator.sanitize_schema(SchemaValidator.resolve_refs(schema))

        return cls(name=name, description=body.get("description") or "", parameters=schema)

    @property
    def parameter_names(self) -> List[str]:
        """Argument names declared by the schema."""
        return SchemaValidator.parameter_names(self.parameters)


class ToolCall(BaseModel):
    """
    A call to one tool, as extracted from the input.

    Enrichment never mutates a call; it builds a new one with ``with_arguments``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Scalar] = Field(default_factory=dict)

    def with_arguments(self, arguments: Mapping[str, Scalar]) -> "ToolCall":
        """Return a copy of this call carrying ``arguments``."""
        return ToolCall(name=self.name, arguments=dict(arguments))

    def arguments_dict(self) -> Dict[str, Scalar]:
        """A fresh, mutable copy of the arguments."""
        return dict(self.arguments)


def parse_tool_definitions(raw_tools: Optional[List[Any]]) -> List[ToolDefinition]:
    """Parse every declared tool, keeping the first declaration of a duplicated name."""
    definitions: List[ToolDefinition] = []
    seen = set()
    for raw in raw_tools or []:
        definition = ToolDefinition.parse(raw)
        if definition.name in seen:
            continue
        seen.add(definition.name)
        definitions.append(definition)
    return definitions
