"""Two-tier result cache with promotion of cold hits into the hot tier."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..logger import get_logger
from .tiers import TIER_COLD, TIER_HOT, CacheEntry, Clock, ColdTier, HotTier

logger = get_logger(__name__)

KEY_SEPARATOR = "|"


@dataclass(frozen=True)
class CacheHit:
    """Payload served from a tier, with its age in seconds."""

    payload: Any
    tier: str
    age: float


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def cache_key(tool: str, args: Optional[Mapping[str, Any]], namespace: str = "sports") -> str:
    """Derive the cache key of a call; argument order never changes the result.

    Example::

        cache_key("get_team_roster", {"teamId": "147", "season": "2025"})
        # 'sports:get_team_roster:season:2025|teamId:147'
    """
    pairs = KEY_SEPARATOR.join(f"{key}:{_format_value(args[key])}" for key in sorted(args or {}))
    return f"{namespace}:{tool}:{pairs}"


class TieredCache:
    """
    Hot/cold cache shared by every pipeline run of the process.

    A tier passed as ``None`` is treated as always empty and never written.
    Tier failures are logged and absorbed; ``get`` and ``set`` never raise.
    """

    def __init__(
        self,
        hot: Optional[HotTier] = None,
        cold: Optional[ColdTier] = None,
        hot_ttl: int = 10,
        cold_ttl: int = 300,
        namespace: str = "sports",
        clock: Clock = time.time,
    ) -> None:
        """
        Args:
            hot: Hot tier backend, or None to run without it.
            cold: Cold tier backend, or None to run without it.
            hot_ttl: Seconds a hot entry stays valid.
            cold_ttl: Seconds a cold entry stays valid.
            namespace: Prefix of every key.
            clock: Source of the current time in seconds.
        """
        self.hot = hot
        self.cold = cold
        self.hot_ttl = hot_ttl
        self.cold_ttl = cold_ttl
        self.namespace = namespace
        self._clock = clock

        if hot is None:
            logger.warning("Hot cache tier is not configured; running without it.")
        if cold is None:
            logger.warning("Cold cache tier is not configured; running without it.")

    def key(self, tool: str, args: Optional[Mapping[str, Any]]) -> str:
        return cache_key(tool, args, self.namespace)

    async def get(self, tool: str, args: Optional[Mapping[str, Any]]) -> Optional[CacheHit]:
        """Look a call up, hot tier first.

        A fresh cold entry is promoted: the hot tier receives its payload with
        the current time, the cold entry is left untouched.

        Returns:
            The hit, or None when both tiers miss or hold expired entries.
        """
        key = self.key(tool, args)
        now = self._clock()

        hot_entry = await self._read_hot(key)
        if hot_entry is not None and hot_entry.is_fresh(now, self.hot_ttl):
            logger.debug("Cache hit (hot) for '%s'.", key)
            return CacheHit(payload=hot_entry.payload, tier=TIER_HOT, age=hot_entry.age(now))

        cold_entry = await self._read_cold(key)
        if cold_entry is not None and cold_entry.is_fresh(now, self.cold_ttl):
            logger.debug("Cache hit (cold) for '%s', promoting to hot tier.", key)
            await self._write_hot(key, cold_entry.payload, now, self.hot_ttl)
            return CacheHit(payload=cold_entry.payload, tier=TIER_COLD, age=cold_entry.age(now))

        logger.debug("Cache miss for '%s'.", key)
        return None

    async def set(self, tool: str, args: Optional[Mapping[str, Any]], payload: Any, ttl: Optional[int] = None) -> bool:
        """Write a payload to both tiers, restarting both TTL clocks.

        Args:
            tool: Tool name.
            args: Arguments the payload was produced for.
            payload: JSON-serializable result.
            ttl: Effective TTL of the tool; used as the hot tier's write-time
                expiration, never longer than ``hot_ttl``.

        Returns:
            True when every configured tier accepted the write.
        """
        key = self.key(tool, args)
        now = self._clock()
        hot_expiry = self.hot_ttl if ttl is None else max(1, min(int(ttl), self.hot_ttl))

        hot_ok = await self._write_hot(key, payload, now, hot_expiry)
        cold_ok = await self._write_cold(key, tool, args, payload, now)
        return hot_ok and cold_ok

    def stats(self) -> Dict[str, Any]:
        return {
            "hotCacheAvailable": self.hot is not None,
            "coldCacheAvailable": self.cold is not None,
            "hotTTL": self.hot_ttl,
            "coldTTL": self.cold_ttl,
            "timestamp": self._clock(),
        }

    async def _read_hot(self, key: str) -> Optional[CacheEntry]:
        if self.hot is None:
            return None
        try:
            record = await self.hot.get(key)
        except Exception as e:
            logger.warning("Hot tier read failed for '%s': %s", key, e)
            return None
        return CacheEntry.from_record(key, record, TIER_HOT) if record is not None else None

    async def _read_cold(self, key: str) -> Optional[CacheEntry]:
        if self.cold is None:
            return None
        try:
            blob = await self.cold.get(key)
            if blob is None:
                return None
            record = json.loads(blob)
        except Exception as e:
            logger.warning("Cold tier read failed for '%s': %s", key, e)
            return None
        return CacheEntry.from_record(key, record, TIER_COLD)

    async def _write_hot(self, key: str, payload: Any, now: float, expiry: int) -> bool:
        if self.hot is None:
            return True
        entry = CacheEntry(key=key, payload=payload, timestamp=now, tier=TIER_HOT)
        try:
            await self.hot.put(key, entry.to_record(), expiry)
        except Exception as e:
            logger.warning("Hot tier write failed for '%s': %s", key, e)
            return False
        return True

    async def _write_cold(
        self, key: str, tool: str, args: Optional[Mapping[str, Any]], payload: Any, now: float
    ) -> bool:
        if self.cold is None:
            return True
        record = {"payload": payload, "timestamp": now, "tool": tool, "args": dict(args or {})}
        try:
            await self.cold.put(key, json.dumps(record, default=str), {"timestamp": str(now), "tool": tool})
        except Exception as e:
            logger.warning("Cold tier write failed for '%s': %s", key, e)
            return False
        return True
