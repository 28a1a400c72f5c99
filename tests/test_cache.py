import json
from datetime import datetime

import pytest

from conftest import FakeClock
from sports_proxy.core.cache import MemoryColdTier, MemoryHotTier, TieredCache, TTLPolicy, cache_key
from sports_proxy.core.tools.registry import default_registry


def test_cache_key_ignores_argument_order() -> None:
    first = cache_key("get_team_roster", {"teamId": "147", "season": "2025"})
    second = cache_key("get_team_roster", {"season": "2025", "teamId": "147"})
    assert first == second == "sports:get_team_roster:season:2025|teamId:147"


def test_cache_key_formats_scalars() -> None:
    key = cache_key("get_schedule", {"live": True, "date": None, "n": 3}, namespace="ns")
    assert key == "ns:get_schedule:date:null|live:true|n:3"


def test_cache_key_without_arguments() -> None:
    assert cache_key("get_standings", {}) == "sports:get_standings:"
    assert cache_key("get_standings", None) == "sports:get_standings:"


@pytest.mark.asyncio
async def test_hot_hit_right_after_set(cache: TieredCache, clock: FakeClock) -> None:
    await cache.set("get_standings", {"season": "2025"}, {"records": [1]})
    clock.advance(3)

    hit = await cache.get("get_standings", {"season": "2025"})

    assert hit is not None
    assert hit.tier == "hot"
    assert hit.payload == {"records": [1]}
    assert hit.age == 3


@pytest.mark.asyncio
async def test_hot_entry_gone_after_hot_ttl(clock: FakeClock) -> None:
    cache = TieredCache(hot=MemoryHotTier(clock=clock), cold=None, hot_ttl=10, clock=clock)
    await cache.set("get_standings", {}, {"records": []})

    clock.advance(11)

    assert await cache.get("get_standings", {}) is None


@pytest.mark.asyncio
async def test_cold_hit_is_promoted_to_hot(cache: TieredCache, clock: FakeClock, hot_tier: MemoryHotTier) -> None:
    await cache.set("get_team_roster", {"teamId": "147"}, {"roster": ["a"]})
    clock.advance(20)

    first = await cache.get("get_team_roster", {"teamId": "147"})
    assert first is not None
    assert first.tier == "cold"
    assert first.age == 20

    second = await cache.get("get_team_roster", {"teamId": "147"})
    assert second is not None
    assert second.tier == "hot"
    assert second.age == 0
    assert second.payload == {"roster": ["a"]}
    assert len(hot_tier) == 1


@pytest.mark.asyncio
async def test_cold_entry_expires_after_cold_ttl(cache: TieredCache, clock: FakeClock) -> None:
    await cache.set("get_team_roster", {"teamId": "147"}, {"roster": []})
    clock.advance(300)

    assert await cache.get("get_team_roster", {"teamId": "147"}) is None


@pytest.mark.asyncio
async def test_short_ttl_limits_hot_tier_only(cache: TieredCache, clock: FakeClock) -> None:
    await cache.set("get_live_game", {"gameId": "1"}, {"status": "live"}, ttl=5)
    clock.advance(6)

    hit = await cache.get("get_live_game", {"gameId": "1"})

    assert hit is not None
    assert hit.tier == "cold"


@pytest.mark.asyncio
async def test_cold_record_carries_metadata(cache: TieredCache, cold_tier: MemoryColdTier, clock: FakeClock) -> None:
    await cache.set("get_team_info", {"teamId": "147"}, {"teams": []})
    key = cache.key("get_team_info", {"teamId": "147"})

    record = json.loads(await cold_tier.get(key))
    assert record["tool"] == "get_team_info"
    assert record["args"] == {"teamId": "147"}
    assert record["timestamp"] == clock.now
    assert cold_tier.metadata(key) == {"timestamp": str(clock.now), "tool": "get_team_info"}


@pytest.mark.asyncio
async def test_without_tiers_every_lookup_misses() -> None:
    cache = TieredCache(hot=None, cold=None)

    assert await cache.set("get_standings", {}, {"records": []}) is True
    assert await cache.get("get_standings", {}) is None
    assert cache.stats()["hotCacheAvailable"] is False
    assert cache.stats()["coldCacheAvailable"] is False


@pytest.mark.asyncio
async def test_hot_tier_failure_falls_back_to_cold(
    cache: TieredCache, hot_tier: MemoryHotTier, clock: FakeClock
) -> None:
    hot_tier.available = False

    assert await cache.set("get_standings", {}, {"records": [2]}) is False

    hit = await cache.get("get_standings", {})
    assert hit is not None
    assert hit.tier == "cold"
    assert hit.payload == {"records": [2]}


@pytest.mark.asyncio
async def test_cold_tier_failure_keeps_hot_tier_working(cache: TieredCache, cold_tier: MemoryColdTier) -> None:
    cold_tier.available = False

    assert await cache.set("get_standings", {}, {"records": [3]}) is False

    hit = await cache.get("get_standings", {})
    assert hit is not None
    assert hit.tier == "hot"


@pytest.mark.asyncio
async def test_malformed_cold_record_is_a_miss(clock: FakeClock) -> None:
    cold = MemoryColdTier()
    cache = TieredCache(hot=None, cold=cold, clock=clock)
    await cold.put(cache.key("get_standings", {}), "not json", {})

    assert await cache.get("get_standings", {}) is None


def _policy(hour: int) -> TTLPolicy:
    return TTLPolicy(default_registry(), now=lambda: datetime(2025, 7, 4, hour, 30))


def test_ttl_policy_base_ttls_outside_live_windows() -> None:
    policy = _policy(9)
    assert policy.effective_ttl("get_team_roster") == 3600
    assert policy.effective_ttl("get_team_info") == 300
    assert policy.effective_ttl("get_player_stats") == 60
    assert policy.effective_ttl("get_schedule") == 30
    assert policy.effective_ttl("get_live_game") == 5
    assert policy.effective_ttl("unknown_tool") == 60


@pytest.mark.parametrize("hour", [13, 16, 19, 22])
def test_ttl_policy_clamps_live_sensitive_tools_in_live_windows(hour: int) -> None:
    policy = _policy(hour)
    assert policy.is_live_window()
    assert policy.effective_ttl("get_player_stats") == 10
    assert policy.effective_ttl("get_live_game") == 5
    assert policy.effective_ttl("get_team_roster") == 3600


@pytest.mark.parametrize("hour", [0, 12, 17, 18, 23])
def test_ttl_policy_outside_live_windows(hour: int) -> None:
    assert not _policy(hour).is_live_window()
    assert _policy(hour).effective_ttl("get_player_stats") == 60
