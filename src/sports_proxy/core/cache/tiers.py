"""Cache tier contracts and their in-process implementations."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from ..exceptions import TierUnavailable
from ..logger import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]

TIER_HOT = "hot"
TIER_COLD = "cold"


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the time it was written, in seconds since the epoch."""

    key: str
    payload: Any
    timestamp: float
    tier: str

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.age(now) < ttl

    def to_record(self) -> Dict[str, Any]:
        return {"payload": self.payload, "timestamp": self.timestamp}

    @classmethod
    def from_record(cls, key: str, record: Any, tier: str) -> Optional["CacheEntry"]:
        """Rebuild an entry from a stored record, or None when the record is malformed."""
        if not isinstance(record, dict) or "timestamp" not in record or "payload" not in record:
            return None
        try:
            timestamp = float(record["timestamp"])
        except (TypeError, ValueError):
            return None
        return cls(key=key, payload=record["payload"], timestamp=timestamp, tier=tier)


class HotTier(Protocol):
    """Fast, short-lived tier. Expiration is expressed at write time."""

    async def get(self, key: str) -> Optional[Any]:
        """Stored JSON value, or None."""
        ...

    async def put(self, key: str, value: Any, ttl: int) -> None:
        """Store ``value`` for at most ``ttl`` seconds."""
        ...


class ColdTier(Protocol):
    """Slow, long-lived blob tier without native expiration."""

    async def get(self, key: str) -> Optional[str]:
        """Stored blob, or None."""
        ...

    async def put(self, key: str, blob: str, metadata: Dict[str, str]) -> None:
        """Store ``blob`` along with string ``metadata``."""
        ...


class MemoryHotTier:
    """Dictionary-backed hot tier honouring the write-time TTL against ``clock``."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._store: Dict[str, Tuple[str, float]] = {}
        self.available = True

    async def get(self, key: str) -> Optional[Any]:
        if not self.available:
            raise TierUnavailable("Memory hot tier is offline.")
        item = self._store.get(key)
        if item is None:
            return None
        raw, expires_at = item
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return None
        return json.loads(raw)

    async def put(self, key: str, value: Any, ttl: int) -> None:
        if not self.available:
            raise TierUnavailable("Memory hot tier is offline.")
        self._store[key] = (json.dumps(value, default=str), self._clock() + ttl)

    def __len__(self) -> int:
        return len(self._store)


class MemoryColdTier:
    """Dictionary-backed blob tier."""

    def __init__(self) -> None:
        self._store: Dict[str, Tuple[str, Dict[str, str]]] = {}
        self.available = True

    async def get(self, key: str) -> Optional[str]:
        if not self.available:
            raise TierUnavailable("Memory cold tier is offline.")
        item = self._store.get(key)
        return item[0] if item else None

    async def put(self, key: str, blob: str, metadata: Dict[str, str]) -> None:
        if not self.available:
            raise TierUnavailable("Memory cold tier is offline.")
        self._store[key] = (blob, dict(metadata))

    def metadata(self, key: str) -> Optional[Dict[str, str]]:
        item = self._store.get(key)
        return dict(item[1]) if item else None

    def __len__(self) -> int:
        return len(self._store)
