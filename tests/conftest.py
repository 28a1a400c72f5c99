from datetime import datetime
from typing import Any, Dict, List, Mapping, Tuple

import pytest

from sports_proxy.core.cache import MemoryColdTier, MemoryHotTier, TieredCache, TTLPolicy
from sports_proxy.core.execution import ResolutionEnrichmentPipeline, ToolExecutor
from sports_proxy.core.tools.registry import ToolRegistry, default_registry


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """Command backend answering from a table of canned results."""

    def __init__(self, responses: Dict[str, Any], name: str = "mlb") -> None:
        self.name = name
        self.responses = responses
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def call(self, command: str, params: Mapping[str, Any]) -> Any:
        self.calls.append((command, dict(params)))
        response = self.responses[command]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    async def health(self) -> Dict[str, Any]:
        return {"status": "healthy"}

    def commands(self) -> List[str]:
        return [command for command, _ in self.calls]


YANKEES = {"id": 147, "name": "New York Yankees", "abbreviation": "NYY"}
JUDGE = {"id": 592450, "fullName": "Aaron Judge"}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hot_tier(clock: FakeClock) -> MemoryHotTier:
    return MemoryHotTier(clock=clock)


@pytest.fixture
def cold_tier() -> MemoryColdTier:
    return MemoryColdTier()


@pytest.fixture
def cache(hot_tier: MemoryHotTier, cold_tier: MemoryColdTier, clock: FakeClock) -> TieredCache:
    return TieredCache(hot=hot_tier, cold=cold_tier, hot_ttl=10, cold_ttl=300, clock=clock)


@pytest.fixture
def registry() -> ToolRegistry:
    return default_registry()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        {
            "resolveTeam": YANKEES,
            "resolvePlayer": JUDGE,
            "getRoster": {"roster": []},
            "getTeamInfo": {"teams": []},
            "getPlayerStats": {"stats": [{"group": {"displayName": "hitting"}, "splits": []}]},
            "getSchedule": {"dates": []},
            "getStandings": {"records": []},
        }
    )


@pytest.fixture
def executor(backend: FakeBackend, cache: TieredCache, registry: ToolRegistry) -> ToolExecutor:
    # Outside live windows so TTLs are the base TTLs.
    policy = TTLPolicy(registry, now=lambda: datetime(2025, 6, 1, 9, 0))
    return ToolExecutor({"mlb": backend}, cache, registry=registry, ttl_policy=policy)


@pytest.fixture
def pipeline(executor: ToolExecutor) -> ResolutionEnrichmentPipeline:
    return ResolutionEnrichmentPipeline(executor)
