"""The proxy facade: request in, aggregated response or event stream out."""

import json
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ...backends.file_tier import FileColdTier
from ...backends.http_backend import HttpCommandBackend
from ...backends.redis_tier import RedisHotTier
from ..cache import TieredCache
from ..config import ProxySettings
from ..exceptions import SportsProxyError
from ..execution import ResolutionEnrichmentPipeline, ToolExecutor
from ..extraction import IntentExtractor, SportDetector, flatten_input
from ..logger import get_logger
from ..streaming import EventStreamer, StreamChannel
from ..tools.models import ToolCall, ToolDefinition
from ..tools.registry import ToolRegistry
from .conversation import (
    build_conversation_input,
    contextual_reply,
    estimate_tokens,
    new_message_id,
    new_response_id,
    render_results,
    render_single_result,
    serialized_input,
)
from .models import OutputMessage, OutputText, ResponseObject, ResponseRequest, Usage

logger = get_logger(__name__)

RequestBody = Union[ResponseRequest, Mapping[str, Any], str, bytes]


class SportsProxyService:
    """
    Wires extraction, the resolve/enrich pipeline, cached execution and
    streaming behind one object.

    Only a malformed request body fails a request; tool failures are part
    of the response text.
    """

    def __init__(
        self,
        executor: ToolExecutor,
        extractor: Optional[IntentExtractor] = None,
        pipeline: Optional[ResolutionEnrichmentPipeline] = None,
        streamer: Optional[EventStreamer] = None,
        sport_detector: Optional[SportDetector] = None,
        default_model: str = "gpt-4.1",
        filter_tools_by_sport: bool = False,
        stream_delta_delay: float = 0.05,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.executor = executor
        self.registry: ToolRegistry = executor.registry
        self.cache: TieredCache = executor.cache
        self.extractor = extractor or IntentExtractor(registry=self.registry)
        self.pipeline = pipeline or ResolutionEnrichmentPipeline(executor)
        self.streamer = streamer or EventStreamer(
            self.pipeline, delta_delay=stream_delta_delay, render=render_single_result, clock=clock
        )
        self.sport_detector = sport_detector or executor.sport_detector
        self.default_model = default_model
        self.filter_tools_by_sport = filter_tools_by_sport
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Optional[ProxySettings] = None, registry: Optional[ToolRegistry] = None
    ) -> "SportsProxyService":
        """Build a service with HTTP backends and the configured cache tiers.

        Args:
            settings: Settings to use; read from the environment when omitted.
            registry: Tool table; the built-in tools when omitted.
        """
        settings = settings or ProxySettings.from_env()

        backends = {
            sport: HttpCommandBackend(url, name=sport, timeout=settings.tool_timeout)
            for sport, url in settings.backend_urls.items()
        }
        if not backends:
            logger.warning("No command backend configured; every tool call will fail.")

        hot = RedisHotTier.from_url(settings.redis_url) if settings.redis_url else None
        cold = FileColdTier(settings.cold_cache_dir) if settings.cold_cache_dir else None
        cache = TieredCache(
            hot=hot,
            cold=cold,
            hot_ttl=settings.hot_ttl,
            cold_ttl=settings.cold_ttl,
            namespace=settings.cache_namespace,
        )

        executor = ToolExecutor(backends, cache, registry=registry, tool_timeout=settings.tool_timeout)
        logger.info("Sports proxy configured with backends: %s", sorted(backends) or "none")
        return cls(
            executor,
            default_model=settings.default_model,
            filter_tools_by_sport=settings.filter_tools_by_sport,
            stream_delta_delay=settings.stream_delta_delay,
        )

    def extract(self, request: ResponseRequest) -> List[ToolCall]:
        """Tool calls the request needs, restricted to the tools it declares."""
        tools: List[ToolDefinition] = list(request.tools)
        if self.filter_tools_by_sport and tools:
            sport, confidence = self.sport_detector.detect(flatten_input(request.input))
            allowed = set(self.sport_detector.filter_tool_names(sport, confidence))
            tools = [tool for tool in tools if tool.name in allowed]
            logger.debug("Detected sport '%s' (%.1f); %d declared tool(s) kept.", sport, confidence, len(tools))
        return self.extractor.extract(request.input, tools)

    async def respond(self, body: RequestBody) -> ResponseObject:
        """Process a request and return the aggregated response.

        Raises:
            RequestValidationError: If the body is malformed.
        """
        request = ResponseRequest.parse(body)
        response_id = new_response_id()
        created_at = self._clock()
        conversation = build_conversation_input(request.input, request.memories, request.previous_response_id)

        tool_calls = self.extract(request)
        if tool_calls:
            results = await self.pipeline.process(tool_calls)
            text = render_results(results)
        else:
            text = contextual_reply(conversation)

        input_tokens = estimate_tokens(serialized_input(conversation))
        output_tokens = estimate_tokens(text)
        return ResponseObject(
            id=response_id,
            created_at=created_at,
            model=request.model or self.default_model,
            output=[OutputMessage(id=new_message_id(), content=[OutputText(text=text)])],
            usage=Usage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
        )

    async def stream(self, body: RequestBody, channel: StreamChannel) -> str:
        """Stream a request's events to ``channel`` and close it.

        Returns:
            The id of the streamed response.

        Raises:
            RequestValidationError: If the body is malformed; the channel is
                closed without any event.
        """
        try:
            request = ResponseRequest.parse(body)
            conversation = build_conversation_input(request.input, request.memories, request.previous_response_id)
            tool_calls = self.extract(request)
        except Exception:
            await channel.close()
            raise
        response_id = new_response_id()
        await self.streamer.stream_to(channel, response_id, tool_calls, contextual_reply(conversation))
        return response_id

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Direct execution of one tool, answered as an MCP ``tools/call`` result."""
        arguments = dict(arguments or {})
        try:
            result = await self.executor.execute(name, arguments)
        except SportsProxyError as e:
            logger.warning("Direct call of '%s' failed: %s", name, e)
            text = json.dumps({"error": str(e), "tool": name, "arguments": arguments}, indent=2, default=str)
            return {"content": [{"type": "text", "text": text}], "isError": True}
        return {"content": [{"type": "text", "text": json.dumps(result, indent=2, ensure_ascii=False, default=str)}]}

    def list_tools(self) -> Dict[str, List[Dict[str, Any]]]:
        """Every registered tool in the function-tool declaration shape."""
        return {"tools": [{"type": "function", "function": d.model_dump()} for d in self.registry.definitions()]}

    async def health_check(self) -> Dict[str, Any]:
        backends = await self.executor.health_check()
        healthy = bool(backends) and all(report.get("status") == "healthy" for report in backends.values())
        return {
            "status": "healthy" if healthy else "degraded",
            "backends": backends,
            "cache": self.cache.stats(),
        }

    async def aclose(self) -> None:
        """Release connections held by the cache tiers."""
        if isinstance(self.cache.hot, RedisHotTier):
            await self.cache.hot.close()
