"""Responses-style request handling."""

from .conversation import (
    build_conversation_input,
    contextual_reply,
    estimate_tokens,
    render_results,
    render_single_result,
)
from .models import Memory, OutputMessage, OutputText, ResponseObject, ResponseRequest, Usage
from .service import SportsProxyService

__all__ = [
    "SportsProxyService",
    "ResponseRequest",
    "ResponseObject",
    "OutputMessage",
    "OutputText",
    "Usage",
    "Memory",
    "build_conversation_input",
    "contextual_reply",
    "estimate_tokens",
    "render_results",
    "render_single_result",
]
