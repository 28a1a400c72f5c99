"""Adapters for the remote command service and the cache tier stores."""

from .base import CommandBackend, unwrap_envelope
from .http_backend import HttpCommandBackend
from .file_tier import FileColdTier
from .redis_tier import RedisHotTier

__all__ = ["CommandBackend", "unwrap_envelope", "HttpCommandBackend", "FileColdTier", "RedisHotTier"]
