from .tools import ToolRegistry, ToolSpec, ToolCall, ToolDefinition, ExecutionResult, ResolvedEntity, default_registry
from .extraction import IntentExtractor, SportDetector
from .execution import ToolExecutor, ResolutionEnrichmentPipeline
from .cache import TieredCache, TTLPolicy, MemoryHotTier, MemoryColdTier
from .streaming import EventStreamer, MemoryChannel, QueueChannel
from .config import ProxySettings
from .exceptions import (
    SportsProxyError,
    ToolNotFoundError,
    ToolRegistrationError,
    ToolValidationError,
    RemoteServiceError,
    RemoteApplicationError,
    TierUnavailable,
    RequestValidationError,
)
from .logger import get_logger, setup_logging

__all__ = [
    "ToolRegistry",
    "ToolSpec",
    "ToolCall",
    "ToolDefinition",
    "ExecutionResult",
    "ResolvedEntity",
    "default_registry",
    "IntentExtractor",
    "SportDetector",
    "ToolExecutor",
    "ResolutionEnrichmentPipeline",
    "TieredCache",
    "TTLPolicy",
    "MemoryHotTier",
    "MemoryColdTier",
    "EventStreamer",
    "MemoryChannel",
    "QueueChannel",
    "ProxySettings",
    "SportsProxyError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "ToolValidationError",
    "RemoteServiceError",
    "RemoteApplicationError",
    "TierUnavailable",
    "RequestValidationError",
    "get_logger",
    "setup_logging",
]
