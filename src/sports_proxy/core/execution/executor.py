"""Cached execution of a single tool against the remote command backend."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from ..cache import TieredCache, TTLPolicy
from ..exceptions import RemoteServiceError
from ..extraction.matcher import SportDetector
from ..logger import get_logger
from ..tools.registry import ToolRegistry, default_registry

if TYPE_CHECKING:
    from ...backends.base import CommandBackend

logger = get_logger(__name__)

SOURCE_REMOTE = "remote"


class ToolExecutor:
    """
    Translates a tool call into a backend command.

    Lookup order: registry (unknown names fail), cache (a hit returns
    immediately), backend. A successful backend answer is normalized and
    written to the cache exactly once; failures write nothing.
    """

    def __init__(
        self,
        backends: Mapping[str, "CommandBackend"],
        cache: TieredCache,
        registry: Optional[ToolRegistry] = None,
        ttl_policy: Optional[TTLPolicy] = None,
        sport_detector: Optional[SportDetector] = None,
        default_sport: str = SportDetector.DEFAULT_SPORT,
        tool_timeout: float = 30.0,
    ) -> None:
        """
        Args:
            backends: Command backends keyed by sport.
            cache: Shared tiered cache.
            registry: Tool table; defaults to the built-in tools.
            ttl_policy: Effective TTL computation; defaults to one over ``registry``.
            sport_detector: Routes calls to a sport from their arguments.
            default_sport: Backend used when the detected sport has none.
            tool_timeout: Seconds to wait for one backend call.
        """
        self.backends = dict(backends)
        self.cache = cache
        self.registry = registry or default_registry()
        self.ttl_policy = ttl_policy or TTLPolicy(self.registry)
        self.sport_detector = sport_detector or SportDetector()
        self.default_sport = default_sport
        self.tool_timeout = tool_timeout

    async def execute(self, tool_name: str, args: Mapping[str, Any]) -> Any:
        """Execute a tool and return its normalized payload.

        Raises:
            ToolNotFoundError: If the tool has no backend mapping.
            RemoteServiceError: On transport failures, non-2xx answers, timeouts or malformed payloads.
            RemoteApplicationError: If the backend reports an application error.
        """
        payload, _ = await self.execute_with_source(tool_name, args)
        return payload

    async def execute_with_source(self, tool_name: str, args: Mapping[str, Any]) -> Tuple[Any, str]:
        """Like ``execute`` but also reports where the payload came from (``hot``, ``cold`` or ``remote``)."""
        spec = self.registry.get(tool_name)

        cached = await self.cache.get(tool_name, args)
        if cached is not None:
            logger.debug("Serving '%s' from %s cache (age %.1fs).", tool_name, cached.tier, cached.age)
            return cached.payload, cached.tier

        backend = self._backend_for(args)
        params = spec.build_params(args)
        logger.info("Executing tool '%s' as '%s' on backend '%s'...", tool_name, spec.command, backend.name)

        try:
            raw = await asyncio.wait_for(backend.call(spec.command, params), timeout=self.tool_timeout)
        except asyncio.TimeoutError as exc:
            msg = f"Tool '{tool_name}' timed out after {self.tool_timeout} seconds."
            raise RemoteServiceError(msg) from exc

        try:
            payload = spec.normalize(raw)
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise RemoteServiceError(f"Malformed payload from '{backend.name}' for '{tool_name}': {exc!r}") from exc

        ttl = self.ttl_policy.effective_ttl(tool_name)
        await self.cache.set(tool_name, args, payload, ttl)
        logger.info("Tool '%s' executed successfully (ttl %ss).", tool_name, ttl)
        return payload, SOURCE_REMOTE

    async def health_check(self) -> Dict[str, Dict[str, Any]]:
        """Report the health of every configured backend."""
        results: Dict[str, Dict[str, Any]] = {}
        for sport, backend in self.backends.items():
            try:
                results[sport] = await backend.health()
            except Exception as e:
                logger.warning("Health check of backend '%s' failed: %s", sport, e)
                results[sport] = {"status": "error", "error": str(e)}
        return results

    def _backend_for(self, args: Mapping[str, Any]) -> "CommandBackend":
        sport = self.sport_detector.detect_from_arguments(args)
        backend = self.backends.get(sport) or self.backends.get(self.default_sport)
        if backend is None:
            raise RemoteServiceError(f"No backend available for sport '{sport}' or default '{self.default_sport}'.")
        return backend
