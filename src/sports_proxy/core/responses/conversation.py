"""Conversation assembly, reply texts and token estimation."""

import json
import math
import re
import time
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ..tools.models import ExecutionResult
from .models import Memory

SYSTEM_PREAMBLE = (
    "You are a helpful MLB sports data assistant. You have access to real-time MLB data through "
    "specialized tools. Always use the available tools when users ask about current stats, scores, "
    "or team information."
)

NO_TOOLS_EXECUTED = "No tools were executed."

_TOOL_LIST = (
    "get_team_info, get_player_stats, get_team_roster, get_schedule, get_standings, get_live_game"
)

GREETING_REPLY = (
    "Hello! I'm here and ready to help you with MLB sports data. I can provide team information, "
    "player stats, schedules, standings, and live game data. What would you like to know?"
)

HELP_REPLY = (
    "I can help you with MLB sports data using these tools:\n\n"
    "• get_team_info - Team details and information\n"
    "• get_player_stats - Player statistics\n"
    "• get_team_roster - Team roster information\n"
    "• get_schedule - Game schedules\n"
    "• get_standings - League standings\n"
    "• get_live_game - Live game data\n\n"
    "What specific information are you looking for?"
)

DEFAULT_REPLY = f"I can help you with MLB sports data. Available tools: {_TOOL_LIST}. What would you like to know?"

_GREETING = re.compile(r"\b(hello|hi)\b|are you there")


def new_response_id() -> str:
    return f"resp_{int(time.time() * 1000)}_{uuid.uuid4().hex[:13]}"


def new_message_id() -> str:
    return f"msg_{int(time.time() * 1000)}_{uuid.uuid4().hex[:13]}"


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def build_conversation_input(
    input_data: Any, memories: Optional[Sequence[Memory]], previous_response_id: Optional[str] = None
) -> Any:
    """Combine the request input with the caller's memories.

    When a previous response is continued the input is returned unchanged.
    Otherwise the result is a message list: when ``memories`` is given, a
    system preamble and one ``USER_MEMORY: key = value`` system message per
    complete memory, followed by the user message(s).
    """
    if previous_response_id:
        return input_data

    messages: List[Dict[str, Any]] = []
    if memories is not None:
        messages.append({"role": "system", "content": SYSTEM_PREAMBLE})
        for memory in memories:
            if memory.is_complete:
                messages.append({"role": "system", "content": f"USER_MEMORY: {memory.key} = {memory.value}"})

    if isinstance(input_data, str):
        messages.append({"role": "user", "content": input_data})
    elif isinstance(input_data, list):
        messages.extend(input_data)
    else:
        messages.append({"role": "user", "content": _dumps(input_data)})
    return messages


def last_user_text(conversation: Any) -> str:
    if isinstance(conversation, str):
        return conversation
    if not isinstance(conversation, list):
        return _dumps(conversation) if conversation is not None else ""

    for message in reversed(conversation):
        if isinstance(message, dict) and message.get("role") == "user":
            content = message.get("content")
            return content if isinstance(content, str) else _dumps(content)
    return ""


def contextual_reply(conversation: Any) -> str:
    """Informational text for a request that needed no tool."""
    text = last_user_text(conversation).lower()
    if _GREETING.search(text):
        return GREETING_REPLY
    if "help" in text:
        return HELP_REPLY
    return DEFAULT_REPLY


def estimate_tokens(text: Optional[str]) -> int:
    """Deterministic token approximation: ``ceil(len(text) / 4)``, 0 for empty text."""
    if not text:
        return 0
    return math.ceil(len(text) / 4)


def serialized_input(conversation: Any) -> str:
    """The conversation as counted for ``usage.input_tokens``."""
    return _dumps(conversation)


def render_results(results: Sequence[ExecutionResult]) -> str:
    """Aggregate text of a batch: one paragraph per result."""
    if not results:
        return NO_TOOLS_EXECUTED
    blocks = []
    for result in results:
        if result.success:
            blocks.append(f"{result.tool}: {json.dumps(result.data, indent=2, ensure_ascii=False, default=str)}")
        else:
            blocks.append(f"{result.tool} failed: {result.error}")
    return "\n\n".join(blocks).strip()


def render_single_result(result: ExecutionResult) -> str:
    if not result.success:
        return f"{result.tool} failed: {result.error}"
    return f"{result.tool} result: {json.dumps(result.data, indent=2, ensure_ascii=False, default=str)}"
