"""Destinations a streamed response can be written to."""

import asyncio
from typing import AsyncIterator, List, Optional, Protocol

from ..logger import get_logger
from .events import StreamEvent

logger = get_logger(__name__)


class StreamChannel(Protocol):
    """Write side of a stream. ``close`` is called exactly once per stream."""

    async def send(self, event: StreamEvent) -> None: ...

    async def close(self) -> None: ...


class MemoryChannel:
    """Records every event it receives; used by tests and batch consumers."""

    def __init__(self) -> None:
        self.events: List[StreamEvent] = []
        self.close_count = 0

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    @property
    def names(self) -> List[str]:
        return [event.name for event in self.events]

    async def send(self, event: StreamEvent) -> None:
        if self.closed:
            raise RuntimeError("Cannot send on a closed channel.")
        self.events.append(event)

    async def close(self) -> None:
        self.close_count += 1


class QueueChannel:
    """
    Hands encoded events to a reader through an ``asyncio.Queue``.

    A hosting framework iterates the channel to obtain the
    ``text/event-stream`` body; iteration ends once the writer closes it.

    Example::

        channel = QueueChannel()
        asyncio.create_task(service.stream(request, channel))
        async for chunk in channel:
            await send_body(chunk)
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: StreamEvent) -> None:
        if self._closed:
            raise RuntimeError("Cannot send on a closed channel.")
        await self._queue.put(event.encode())

    async def close(self) -> None:
        if self._closed:
            logger.warning("Queue channel closed twice.")
            return
        self._closed = True
        await self._queue.put(None)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                return
            yield chunk
