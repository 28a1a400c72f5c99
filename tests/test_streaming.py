import asyncio
import json
from typing import List
from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeBackend
from sports_proxy.core.exceptions import RemoteApplicationError
from sports_proxy.core.execution import ResolutionEnrichmentPipeline
from sports_proxy.core.streaming import (
    EVENT_COMPLETED,
    EVENT_CREATED,
    EVENT_ERROR,
    EVENT_IN_PROGRESS,
    EVENT_TEXT_DELTA,
    EVENT_TOOL_CALL,
    EVENT_TOOL_RESULT,
    EventStreamer,
    MemoryChannel,
    QueueChannel,
    StreamEvent,
    delta_fragments,
    encode_sse,
)
from sports_proxy.core.tools.models import ExecutionResult, ToolCall


def _render(result: ExecutionResult) -> str:
    return f"{result.tool} done" if result.success else f"{result.tool} failed"


@pytest.fixture
def streamer(pipeline: ResolutionEnrichmentPipeline) -> EventStreamer:
    return EventStreamer(pipeline, delta_delay=0, render=_render, clock=lambda: 1700000000.0)


def _collapse_deltas(names: List[str]) -> List[str]:
    collapsed: List[str] = []
    for name in names:
        if name == EVENT_TEXT_DELTA and collapsed and collapsed[-1] == EVENT_TEXT_DELTA:
            continue
        collapsed.append(name)
    return collapsed


@pytest.mark.asyncio
async def test_stream_without_calls_emits_only_text(streamer: EventStreamer) -> None:
    channel = MemoryChannel()

    await streamer.stream_to(channel, "resp_1", [], "I can help you with MLB sports data.")

    assert channel.names[:2] == [EVENT_CREATED, EVENT_IN_PROGRESS]
    assert channel.names[-1] == EVENT_COMPLETED
    deltas = [event for event in channel.events if event.name == EVENT_TEXT_DELTA]
    assert len(deltas) == 8
    assert "".join(event.data["delta"] for event in deltas) == "I can help you with MLB sports data. "
    assert EVENT_TOOL_CALL not in channel.names
    assert EVENT_TOOL_RESULT not in channel.names
    assert channel.close_count == 1


@pytest.mark.asyncio
async def test_stream_with_calls_follows_resolver_first_order(streamer: EventStreamer) -> None:
    channel = MemoryChannel()
    calls = [
        ToolCall(name="get_team_roster", arguments={}),
        ToolCall(name="resolve_team", arguments={"name": "yankees"}),
    ]

    await streamer.stream_to(channel, "resp_2", calls, "unused")

    assert _collapse_deltas(channel.names) == [
        EVENT_CREATED,
        EVENT_IN_PROGRESS,
        EVENT_TOOL_CALL,
        EVENT_TOOL_RESULT,
        EVENT_TEXT_DELTA,
        EVENT_TOOL_CALL,
        EVENT_TOOL_RESULT,
        EVENT_TEXT_DELTA,
        EVENT_COMPLETED,
    ]
    tool_calls = [event.data for event in channel.events if event.name == EVENT_TOOL_CALL]
    assert tool_calls == [
        {"name": "resolve_team", "arguments": {"name": "yankees"}},
        {"name": "get_team_roster", "arguments": {"teamId": "147"}},
    ]
    assert channel.events[0].data == {"id": "resp_2", "object": "response", "created_at": 1700000000.0}
    assert channel.events[-1].data == {"id": "resp_2", "status": "completed"}
    assert channel.close_count == 1


@pytest.mark.asyncio
async def test_tool_failure_is_reported_in_its_result(streamer: EventStreamer, backend: FakeBackend) -> None:
    backend.responses["getStandings"] = RemoteApplicationError("mlb error (getStandings): no season")
    channel = MemoryChannel()

    await streamer.stream_to(channel, "resp_3", [ToolCall(name="get_standings", arguments={})], "unused")

    results = [event.data for event in channel.events if event.name == EVENT_TOOL_RESULT]
    assert results == [{"tool": "get_standings", "error": "mlb error (getStandings): no season"}]
    assert EVENT_ERROR not in channel.names
    assert channel.names[-1] == EVENT_COMPLETED


@pytest.mark.asyncio
async def test_emission_failure_ends_stream_with_error(pipeline: ResolutionEnrichmentPipeline) -> None:
    def broken_render(result: ExecutionResult) -> str:
        raise ValueError("cannot render")

    streamer = EventStreamer(pipeline, delta_delay=0, render=broken_render)
    channel = MemoryChannel()

    await streamer.stream_to(channel, "resp_4", [ToolCall(name="get_standings", arguments={})], "unused")

    assert channel.names == [EVENT_CREATED, EVENT_IN_PROGRESS, EVENT_TOOL_CALL, EVENT_TOOL_RESULT, EVENT_ERROR]
    assert channel.events[-1].data == {"error": "cannot render"}
    assert channel.close_count == 1


@pytest.mark.asyncio
async def test_channel_failure_is_reported_once_and_channel_closed(streamer: EventStreamer) -> None:
    class FlakyChannel(MemoryChannel):
        async def send(self, event: StreamEvent) -> None:
            if event.name == EVENT_IN_PROGRESS:
                raise ConnectionError("client went away")
            await super().send(event)

    channel = FlakyChannel()

    await streamer.stream_to(channel, "resp_5", [], "hello there")

    assert channel.names == [EVENT_CREATED, EVENT_ERROR]
    assert channel.close_count == 1


@pytest.mark.asyncio
async def test_deltas_are_paced(pipeline: ResolutionEnrichmentPipeline) -> None:
    streamer = EventStreamer(pipeline, delta_delay=0.25)
    channel = MemoryChannel()

    with patch("sports_proxy.core.streaming.streamer.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await streamer.stream_to(channel, "resp_6", [], "one two three")

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.25)


@pytest.mark.asyncio
async def test_events_can_be_consumed_directly(streamer: EventStreamer) -> None:
    names = [event.name async for event in streamer.events("resp_7", [], "hi")]

    assert names == [EVENT_CREATED, EVENT_IN_PROGRESS, EVENT_TEXT_DELTA, EVENT_COMPLETED]


@pytest.mark.asyncio
async def test_queue_channel_yields_sse_text(streamer: EventStreamer) -> None:
    channel = QueueChannel()

    producer = asyncio.create_task(streamer.stream_to(channel, "resp_8", [], "ready"))
    chunks = [chunk async for chunk in channel]
    await producer

    assert chunks[0].startswith("event: response.created\ndata: ")
    assert chunks[2] == 'event: response.output_text.delta\ndata: {"delta": "ready "}\n\n'
    assert chunks[-1] == 'event: response.completed\ndata: {"id": "resp_8", "status": "completed"}\n\n'
    assert channel.closed


def test_encode_sse() -> None:
    event = StreamEvent(EVENT_TOOL_CALL, {"name": "get_standings", "arguments": {}})

    encoded = encode_sse(event)

    assert encoded == 'event: tool_call\ndata: {"name": "get_standings", "arguments": {}}\n\n'
    assert json.loads(encoded.split("data: ", 1)[1]) == event.data


def test_delta_fragments_split_on_whitespace() -> None:
    assert delta_fragments("a  b\nc") == ["a ", "b ", "c "]
    assert delta_fragments("") == []
