"""Services package."""
from .assistant_service import AssistantService
from .config_service import ConfigService
from .discord_service import DiscordService
from .http_client_service import HttpClientService
from .sports_service import SportsService
from .stock_service import StockService
from .weather_service import WeatherService

__all__ = [
    "AssistantService",
    "ConfigService",
    "DiscordService",
    "HttpClientService",
    "SportsService",
    "StockService",
    "WeatherService",
]
