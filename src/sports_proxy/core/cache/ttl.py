"""Per-tool cache TTLs, shortened while games are usually being played."""

from datetime import datetime
from typing import Callable, Optional, Sequence, Tuple

from ..tools.registry import ToolRegistry, default_registry

# Inclusive local-hour ranges; afternoon and evening game slots.
LIVE_WINDOWS: Tuple[Tuple[int, int], ...] = ((13, 16), (19, 22))
LIVE_TTL_CLAMP = 10
DEFAULT_TTL = 60


class TTLPolicy:
    """Computes the effective TTL of a tool from its name and the current time only."""

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        now: Callable[[], datetime] = datetime.now,
        live_windows: Sequence[Tuple[int, int]] = LIVE_WINDOWS,
        live_clamp: int = LIVE_TTL_CLAMP,
    ) -> None:
        self._registry = registry or default_registry()
        self._now = now
        self._live_windows = tuple(live_windows)
        self._live_clamp = live_clamp

    def base_ttl(self, tool: str) -> int:
        return self._registry.base_ttl(tool, DEFAULT_TTL)

    def is_live_window(self, moment: Optional[datetime] = None) -> bool:
        hour = (moment or self._now()).hour
        return any(start <= hour <= end for start, end in self._live_windows)

    def effective_ttl(self, tool: str, moment: Optional[datetime] = None) -> int:
        """Base TTL of ``tool``, clamped during live windows for live-sensitive tools."""
        ttl = self.base_ttl(tool)
        if self._registry.is_live_sensitive(tool) and self.is_live_window(moment):
            return min(ttl, self._live_clamp)
        return ttl
