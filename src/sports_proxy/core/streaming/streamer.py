"""Streams a response as named events while its tool calls execute."""

import asyncio
import json
import time
from typing import AsyncIterator, Callable, Optional, Sequence

from ..execution.pipeline import ResolutionEnrichmentPipeline
from ..logger import get_logger
from ..tools.models import ExecutionResult, ToolCall
from .channel import StreamChannel
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
)

logger = get_logger(__name__)

ResultRenderer = Callable[[ExecutionResult], str]


def _default_render(result: ExecutionResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, default=str)


class EventStreamer:
    """
    Emits ``created``, ``in_progress``, then per call ``tool_call``,
    ``tool_result`` and the rendered result as text deltas, then ``completed``.

    Calls run one at a time through the pipeline, so resolvers still run
    first and later calls still receive resolved ids. A failing tool is
    reported in its ``tool_result``; only a failure of the emission itself
    ends the stream with ``response.error``.
    """

    def __init__(
        self,
        pipeline: ResolutionEnrichmentPipeline,
        delta_delay: float = 0.05,
        render: Optional[ResultRenderer] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            pipeline: Executes and enriches the calls.
            delta_delay: Pause between two successive text deltas, in seconds.
            render: Turns one execution result into the streamed text.
            clock: Source of ``created_at``.
        """
        self.pipeline = pipeline
        self.delta_delay = delta_delay
        self.render = render or _default_render
        self._clock = clock

    async def events(
        self, response_id: str, tool_calls: Sequence[ToolCall], fallback_text: str
    ) -> AsyncIterator[StreamEvent]:
        """Yield the events of one response.

        Args:
            response_id: Identifier echoed in ``created`` and ``completed``.
            tool_calls: Extracted calls; executed in resolver-first order.
            fallback_text: Streamed instead of tool events when there are no calls.
        """
        yield StreamEvent(EVENT_CREATED, {"id": response_id, "object": "response", "created_at": self._clock()})
        yield StreamEvent(EVENT_IN_PROGRESS, {})

        first_delta = True

        async def deltas(text: str) -> AsyncIterator[StreamEvent]:
            nonlocal first_delta
            for fragment in delta_fragments(text):
                if not first_delta:
                    await asyncio.sleep(self.delta_delay)
                first_delta = False
                yield StreamEvent(EVENT_TEXT_DELTA, {"delta": fragment})

        if tool_calls:
            context = self.pipeline.new_context()
            for original in self.pipeline.ordered(tool_calls):
                call = self.pipeline.prepare(original, context)
                yield StreamEvent(EVENT_TOOL_CALL, {"name": call.name, "arguments": call.arguments_dict()})

                result = await self.pipeline.run(call, context, original=original)
                body = {"tool": result.tool}
                if result.success:
                    body["result"] = result.data
                else:
                    body["error"] = result.error
                yield StreamEvent(EVENT_TOOL_RESULT, body)

                async for event in deltas(self.render(result)):
                    yield event
        else:
            async for event in deltas(fallback_text):
                yield event

        yield StreamEvent(EVENT_COMPLETED, {"id": response_id, "status": "completed"})

    async def stream_to(
        self, channel: StreamChannel, response_id: str, tool_calls: Sequence[ToolCall], fallback_text: str
    ) -> None:
        """Write the events of one response to ``channel`` and close it.

        A failure while producing or sending events is reported with a single
        ``response.error`` event. The channel is closed exactly once.
        """
        logger.info("Streaming response %s with %d tool call(s)...", response_id, len(tool_calls))
        try:
            async for event in self.events(response_id, tool_calls, fallback_text):
                await channel.send(event)
        except Exception as e:
            logger.error("Stream %s aborted: %s", response_id, e, exc_info=True)
            await self._send_error(channel, response_id, e)
        else:
            logger.info("Stream %s completed.", response_id)
        finally:
            await channel.close()

    async def _send_error(self, channel: StreamChannel, response_id: str, error: Exception) -> None:
        try:
            await channel.send(StreamEvent(EVENT_ERROR, {"error": str(error) or type(error).__name__}))
        except Exception as e:
            logger.warning("Could not report the failure of stream %s: %s", response_id, e)
