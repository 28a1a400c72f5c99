"""Hot/cold result caching."""

from .tiered_cache import TieredCache, CacheHit, cache_key
from .tiers import CacheEntry, HotTier, ColdTier, MemoryHotTier, MemoryColdTier, TIER_HOT, TIER_COLD
from .ttl import TTLPolicy

__all__ = [
    "TieredCache",
    "CacheHit",
    "cache_key",
    "CacheEntry",
    "HotTier",
    "ColdTier",
    "MemoryHotTier",
    "MemoryColdTier",
    "TIER_HOT",
    "TIER_COLD",
    "TTLPolicy",
]
