"""Redis-backed hot cache tier."""

import json
from typing import Any, Optional

import redis.asyncio as redis

from ..core.exceptions import TierUnavailable
from ..core.logger import get_logger

logger = get_logger(__name__)


class RedisHotTier:
    """Stores JSON values with ``SETEX`` so Redis expires them natively."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisHotTier":
        client = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=5, socket_timeout=5)
        return cls(client)

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self._client.get(key)
        except redis.RedisError as e:
            raise TierUnavailable(f"Redis get failed for key {key}: {e}") from e
        if value is None:
            return None
        return json.loads(value)

    async def put(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._client.setex(key, ttl, json.dumps(value, default=str))
        except redis.RedisError as e:
            raise TierUnavailable(f"Redis set failed for key {key}: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except redis.RedisError as e:
            logger.error("Redis ping failed: %s", e)
            return False

    async def close(self) -> None:
        await self._client.aclose()
