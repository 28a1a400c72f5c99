"""Runtime settings for the proxy, loadable from the environment or a ``.env`` file."""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .logger import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ProxySettings(BaseModel):
    """
    Settings consumed by ``SportsProxyService.from_settings``.

    Attributes:
        hot_ttl: Validity window of hot tier entries, in seconds.
        cold_ttl: Validity window of cold tier entries, in seconds.
        cache_namespace: Prefix of every derived cache key.
        mlb_backend_url: Command endpoint serving MLB tools.
        hockey_backend_url: Command endpoint serving NHL tools.
        redis_url: Hot tier connection URL. ``None`` runs without a hot tier.
        cold_cache_dir: Directory of the cold tier. ``None`` runs without a cold tier.
        tool_timeout: Per-call backend timeout in seconds.
        stream_delta_delay: Pause between two streamed text deltas, in seconds.
        default_model: Model name echoed in responses when the request names none.
        filter_tools_by_sport: Restrict declared tools to the detected sport's menu.
    """

    hot_ttl: int = Field(default=10, gt=0)
    cold_ttl: int = Field(default=300, gt=0)
    cache_namespace: str = "sports"
    mlb_backend_url: Optional[str] = None
    hockey_backend_url: Optional[str] = None
    redis_url: Optional[str] = None
    cold_cache_dir: Optional[str] = None
    tool_timeout: float = Field(default=30.0, gt=0)
    stream_delta_delay: float = Field(default=0.05, ge=0)
    default_model: str = "gpt-4.1"
    filter_tools_by_sport: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ProxySettings":
        """Build settings from environment variables.

        Args:
            env_file: Optional path of a ``.env`` file. When omitted, python-dotenv
                searches for one starting at the working directory.

        Returns:
            The populated settings.
        """
        load_dotenv(env_file)

        values: Dict[str, object] = {}
        mapping = {
            "CACHE_TTL_HOT": "hot_ttl",
            "CACHE_TTL_COLD": "cold_ttl",
            "CACHE_NAMESPACE": "cache_namespace",
            "MLB_MCP_URL": "mlb_backend_url",
            "HOCKEY_MCP_URL": "hockey_backend_url",
            "REDIS_URL": "redis_url",
            "COLD_CACHE_DIR": "cold_cache_dir",
            "TOOL_TIMEOUT": "tool_timeout",
            "STREAM_DELTA_DELAY": "stream_delta_delay",
            "DEFAULT_MODEL": "default_model",
        }
        for env_name, field_name in mapping.items():
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw

        filter_flag = os.getenv("FILTER_TOOLS_BY_SPORT")
        if filter_flag is not None:
            values["filter_tools_by_sport"] = filter_flag.strip().lower() in _TRUE_VALUES

        settings = cls.model_validate(values)
        logger.debug("Loaded settings from environment: %s", settings.model_dump(exclude={"redis_url"}))
        return settings

    @property
    def backend_urls(self) -> Dict[str, str]:
        """Configured backend endpoints keyed by sport."""
        urls = {"mlb": self.mlb_backend_url, "hockey": self.hockey_backend_url}
        return {sport: url for sport, url in urls.items() if url}
