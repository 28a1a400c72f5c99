import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from sports_proxy.backends import FileColdTier, RedisHotTier
from sports_proxy.core.cache import TieredCache
from sports_proxy.core.exceptions import TierUnavailable


@pytest.mark.asyncio
async def test_file_tier_round_trip(tmp_path) -> None:
    tier = FileColdTier(tmp_path / "cold")
    key = "sports:get_team_roster:teamId:147"

    assert await tier.get(key) is None

    await tier.put(key, '{"payload": 1}', {"timestamp": "1.0", "tool": "get_team_roster"})

    assert await tier.get(key) == '{"payload": 1}'
    assert tier.metadata(key) == {"key": key, "timestamp": "1.0", "tool": "get_team_roster"}


@pytest.mark.asyncio
async def test_file_tier_behind_tiered_cache(tmp_path) -> None:
    cache = TieredCache(hot=None, cold=FileColdTier(tmp_path), clock=lambda: 50.0)

    await cache.set("get_standings", {"season": "2025"}, {"records": []})
    hit = await cache.get("get_standings", {"season": "2025"})

    assert hit is not None
    assert hit.tier == "cold"
    assert hit.payload == {"records": []}


@pytest.mark.asyncio
async def test_file_tier_write_failure(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    tier = FileColdTier(tmp_path)
    # The shard directory cannot be created where a file already exists.
    tier._path = lambda key: blocker / "x.json"  # type: ignore[method-assign]

    with pytest.raises(TierUnavailable):
        await tier.put("k", "{}", {})


@pytest.mark.asyncio
async def test_redis_tier_uses_setex() -> None:
    client = AsyncMock()
    client.get = AsyncMock(return_value=json.dumps({"payload": 1, "timestamp": 2.0}))
    tier = RedisHotTier(client)

    await tier.put("k", {"payload": 1, "timestamp": 2.0}, 10)
    value = await tier.get("k")

    client.setex.assert_awaited_once_with("k", 10, json.dumps({"payload": 1, "timestamp": 2.0}))
    assert value == {"payload": 1, "timestamp": 2.0}


@pytest.mark.asyncio
async def test_redis_tier_miss() -> None:
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)

    assert await RedisHotTier(client).get("k") is None


@pytest.mark.asyncio
async def test_redis_errors_become_tier_unavailable() -> None:
    client = AsyncMock()
    client.get = AsyncMock(side_effect=redis.ConnectionError("refused"))
    client.setex = AsyncMock(side_effect=redis.ConnectionError("refused"))
    tier = RedisHotTier(client)

    with pytest.raises(TierUnavailable):
        await tier.get("k")
    with pytest.raises(TierUnavailable):
        await tier.put("k", {}, 10)


@pytest.mark.asyncio
async def test_redis_outage_degrades_cache() -> None:
    client = AsyncMock()
    client.get = AsyncMock(side_effect=redis.ConnectionError("refused"))
    client.setex = AsyncMock(side_effect=redis.ConnectionError("refused"))
    cache = TieredCache(hot=RedisHotTier(client), cold=None)

    assert await cache.set("get_standings", {}, {"records": []}) is False
    assert await cache.get("get_standings", {}) is None


@pytest.mark.asyncio
async def test_redis_ping_and_close() -> None:
    client = AsyncMock()
    client.ping = AsyncMock(side_effect=redis.ConnectionError("refused"))
    tier = RedisHotTier(client)

    assert await tier.ping() is False
    await tier.close()
    client.aclose.assert_awaited_once()
