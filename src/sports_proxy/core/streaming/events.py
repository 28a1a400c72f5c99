"""Named stream events and their text/event-stream encoding."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

EVENT_CREATED = "response.created"
EVENT_IN_PROGRESS = "response.in_progress"
EVENT_TOOL_CALL = "tool_call"
EVENT_TOOL_RESULT = "tool_result"
EVENT_TEXT_DELTA = "response.output_text.delta"
EVENT_COMPLETED = "response.completed"
EVENT_ERROR = "response.error"

TERMINAL_EVENTS = (EVENT_COMPLETED, EVENT_ERROR)


@dataclass(frozen=True)
class StreamEvent:
    """One event of a streamed response."""

    name: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.name in TERMINAL_EVENTS

    def encode(self) -> str:
        return encode_sse(self)


def encode_sse(event: StreamEvent) -> str:
    """Render an event as ``event: <name>\\ndata: <json>\\n\\n``."""
    payload = json.dumps(event.data, ensure_ascii=False, default=str)
    return f"event: {event.name}\ndata: {payload}\n\n"


def delta_fragments(text: str) -> List[str]:
    """One fragment per whitespace-delimited word, each followed by a space."""
    return [word + " " for word in text.split()]
