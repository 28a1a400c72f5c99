"""Event streaming of responses."""

from .channel import MemoryChannel, QueueChannel, StreamChannel
from .events import (
    EVENT_COMPLETED,
    EVENT_CREATED,
    EVENT_ERROR,
    EVENT_IN_PROGRESS,
    EVENT_TEXT_DELTA,
    EVENT_TOOL_CALL,
    EVENT_TOOL_RESULT,
    StreamEvent,
    delta_fragments,
    encode_sse,
)
from .streamer import EventStreamer

__all__ = [
    "EventStreamer",
    "StreamEvent",
    "StreamChannel",
    "MemoryChannel",
    "QueueChannel",
    "encode_sse",
    "delta_fragments",
    "EVENT_CREATED",
    "EVENT_IN_PROGRESS",
    "EVENT_TOOL_CALL",
    "EVENT_TOOL_RESULT",
    "EVENT_TEXT_DELTA",
    "EVENT_COMPLETED",
    "EVENT_ERROR",
]
