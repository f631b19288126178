"""Shared fixtures."""
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest

from portfolio_proxy.services.config_service import AppConfig, resolve_secrets
from portfolio_proxy.services.http_client_service import HttpClientService

FAKE_ENV = {
    "OPENWEATHER_API_KEY": "weather-key",
    "FINNHUB_API_KEY": "finnhub-key",
    "SPORTSDATA_MLB_API_KEY": "mlb-key",
    "SPORTSDATA_NFL_API_KEY": "nfl-key",
    "SPORTSDATA_NHL_API_KEY": "nhl-key",
    "SPORTSDATA_NBA_API_KEY": "nba-key",
    "OPENAI_API_KEY": "openai-key",
    "OPENAI_ASSISTANT_ID": "asst_123",
}


class FakeClock:
    """Monotonic clock advanced only by the paired fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_env() -> Dict[str, str]:
    return dict(FAKE_ENV)


@pytest.fixture
def app_config(fake_env: Dict[str, str]) -> AppConfig:
    """Configuration with fake secrets and fast polling."""
    config = AppConfig.model_validate(
        {"polling": {"initial_interval": 0.01, "max_interval": 0.02, "max_wait": 2.0}}
    )
    return resolve_secrets(config, fake_env)


@pytest.fixture
def http_client() -> AsyncMock:
    return AsyncMock(spec=HttpClientService)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
