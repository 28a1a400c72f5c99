"""Sports tool proxy - resolves team and player names, executes sports data tools and caches their results."""

from .core import (
    ToolRegistry,
    ToolCall,
    ToolDefinition,
    ExecutionResult,
    IntentExtractor,
    ToolExecutor,
    ResolutionEnrichmentPipeline,
    TieredCache,
    EventStreamer,
    MemoryChannel,
    QueueChannel,
    ProxySettings,
    SportsProxyError,
    RequestValidationError,
    setup_logging,
)
from .core.responses import SportsProxyService, ResponseRequest, ResponseObject
from .backends import HttpCommandBackend, RedisHotTier, FileColdTier

__all__ = [
    "SportsProxyService",
    "ResponseRequest",
    "ResponseObject",
    "ToolRegistry",
    "ToolCall",
    "ToolDefinition",
    "ExecutionResult",
    "IntentExtractor",
    "ToolExecutor",
    "ResolutionEnrichmentPipeline",
    "TieredCache",
    "EventStreamer",
    "MemoryChannel",
    "QueueChannel",
    "ProxySettings",
    "SportsProxyError",
    "RequestValidationError",
    "setup_logging",
    "HttpCommandBackend",
    "RedisHotTier",
    "FileColdTier",
]
