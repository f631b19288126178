"""Controllers package."""
from .chatbot_controller import ChatbotController
from .config_controller import ConfigController
from .discord_controller import DiscordController
from .sports_controller import SportsController
from .stock_controller import StockController
from .weather_controller import WeatherController

__all__ = [
    "ChatbotController",
    "ConfigController",
    "DiscordController",
    "SportsController",
    "StockController",
    "WeatherController",
]
