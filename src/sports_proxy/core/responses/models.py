"""Inbound request and outbound response models of the Responses-style API."""

import json
from typing import Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import RequestValidationError, ToolValidationError
from ..tools.models import ToolDefinition, parse_tool_definitions


class Memory(BaseModel):
    """A key/value fact stored on the user's device."""

    model_config = ConfigDict(extra="allow")

    key: Optional[str] = None
    value: Optional[Any] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.key) and bool(self.value)


class ResponseRequest(BaseModel):
    """
    Body of a response request.

    Attributes:
        input: Free text, a list of role/content messages, or any JSON object.
        tools: Tools the caller declares; only these may be called.
        previous_response_id: Opaque id of the response being continued.
        memories: Device-stored facts, ignored when continuing a response.
        stream: Whether the caller wants an event stream.
        model: Model name echoed in the response.
        instructions: Accepted and ignored.
    """

    model_config = ConfigDict(extra="ignore")

    input: Union[str, List[Any], dict]
    tools: List[ToolDefinition] = Field(default_factory=list)
    previous_response_id: Optional[str] = None
    memories: Optional[List[Memory]] = None
    stream: bool = False
    model: Optional[str] = None
    instructions: Optional[str] = None

    @field_validator("tools", mode="before")
    @classmethod
    def _parse_tools(cls, value: Any) -> List[ToolDefinition]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("tools must be a list")
        try:
            return parse_tool_definitions(value)
        except ToolValidationError as e:
            raise ValueError(str(e)) from e

    @field_validator("memories", mode="before")
    @classmethod
    def _drop_malformed_memories(cls, value: Any) -> Optional[List[Any]]:
        if not isinstance(value, list):
            return None
        return [memory for memory in value if isinstance(memory, Mapping)]

    @classmethod
    def parse(cls, body: Union[str, bytes, Mapping[str, Any], "ResponseRequest"]) -> "ResponseRequest":
        """Validate a request body given as JSON text or an already decoded object.

        Raises:
            RequestValidationError: If the body is not JSON, not an object, or
                misses required fields.
        """
        if isinstance(body, ResponseRequest):
            return body
        if isinstance(body, (str, bytes)):
            try:
                body = json.loads(body)
            except ValueError as e:
                raise RequestValidationError(f"Request body is not valid JSON: {e}") from e
        if not isinstance(body, Mapping):
            raise RequestValidationError("Request body must be a JSON object.")
        try:
            return cls.model_validate(dict(body))
        except ValidationError as e:
            raise RequestValidationError(f"Invalid request: {e}") from e


class OutputText(BaseModel):
    type: Literal["output_text"] = "output_text"
    text: str


class OutputMessage(BaseModel):
    id: str
    type: Literal["message"] = "message"
    role: Literal["assistant"] = "assistant"
    content: List[OutputText]


class Usage(BaseModel):
    """Approximate token counts; see ``estimate_tokens``."""

    input_tokens: int
    output_tokens: int
    total_tokens: int


class ResponseObject(BaseModel):
    """Aggregated, non-streamed response."""

    id: str
    object: Literal["response"] = "response"
    created_at: float
    model: str
    output: List[OutputMessage]
    usage: Usage

    @property
    def output_text(self) -> str:
        return "".join(part.text for message in self.output for part in message.content)
