import os
from typing import Iterator
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from sports_proxy.core.config import ProxySettings

_ENV_NAMES = [
    "CACHE_TTL_HOT",
    "CACHE_TTL_COLD",
    "CACHE_NAMESPACE",
    "MLB_MCP_URL",
    "HOCKEY_MCP_URL",
    "REDIS_URL",
    "COLD_CACHE_DIR",
    "TOOL_TIMEOUT",
    "STREAM_DELTA_DELAY",
    "DEFAULT_MODEL",
    "FILTER_TOOLS_BY_SPORT",
]


@pytest.fixture
def clean_env() -> Iterator[None]:
    # Values loaded by python-dotenv land in os.environ; restore it afterwards.
    with patch.dict(os.environ):
        for name in _ENV_NAMES:
            os.environ.pop(name, None)
        yield


def test_defaults(clean_env: None, tmp_path) -> None:
    settings = ProxySettings.from_env(str(tmp_path / "missing.env"))

    assert settings.hot_ttl == 10
    assert settings.cold_ttl == 300
    assert settings.cache_namespace == "sports"
    assert settings.backend_urls == {}
    assert settings.redis_url is None
    assert settings.filter_tools_by_sport is False


def test_values_from_environment(clean_env: None, tmp_path) -> None:
    os.environ["CACHE_TTL_HOT"] = "5"
    os.environ["MLB_MCP_URL"] = "https://mlb.example/mcp"
    os.environ["TOOL_TIMEOUT"] = "2.5"
    os.environ["FILTER_TOOLS_BY_SPORT"] = "Yes"

    settings = ProxySettings.from_env(str(tmp_path / "missing.env"))

    assert settings.hot_ttl == 5
    assert settings.tool_timeout == 2.5
    assert settings.filter_tools_by_sport is True
    assert settings.backend_urls == {"mlb": "https://mlb.example/mcp"}


def test_values_from_env_file(clean_env: None, tmp_path) -> None:
    env_file = tmp_path / "proxy.env"
    env_file.write_text("HOCKEY_MCP_URL=https://nhl.example/mcp\nCACHE_TTL_COLD=900\n")

    settings = ProxySettings.from_env(str(env_file))

    assert settings.cold_ttl == 900
    assert settings.backend_urls == {"hockey": "https://nhl.example/mcp"}


def test_invalid_numbers_are_rejected(clean_env: None, tmp_path) -> None:
    os.environ["CACHE_TTL_HOT"] = "soon"

    with pytest.raises(ValidationError):
        ProxySettings.from_env(str(tmp_path / "missing.env"))

    with pytest.raises(ValidationError):
        ProxySettings(hot_ttl=0)
