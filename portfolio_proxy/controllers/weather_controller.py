"""Weather controller."""
import logging
from typing import Optional

from portfolio_proxy.controllers.error_mapping import to_http_exception
from portfolio_proxy.errors import InputValidationError, ServiceError
from portfolio_proxy.models import WeatherData

logger = logging.getLogger(__name__)


def _coordinate(value: Optional[str], name: str, limit: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputValidationError(f"{name} must be a number")
    if not -limit <= number <= limit:
        raise InputValidationError(f"{name} must be between -{limit:g} and {limit:g}")
    return number


class WeatherController:
    """Controller for weather lookups."""

    def __init__(self, weather_service):
        self.weather_service = weather_service

    async def get_weather(self, location: Optional[str]) -> WeatherData:
        """Handle a weather lookup by city name."""
        try:
            if not location or not location.strip():
                raise InputValidationError("Location is required")
            return await self.weather_service.get_weather(location.strip())
        except ServiceError as e:
            raise to_http_exception(e, logger, f"Weather for '{location}'") from e

    async def get_weather_by_coordinates(self, lat: Optional[str], lon: Optional[str]) -> WeatherData:
        """Handle a weather lookup by coordinates."""
        try:
            if not lat or not lon:
                raise InputValidationError("Latitude and longitude are required")
            return await self.weather_service.get_weather_by_coordinates(
                _coordinate(lat, "Latitude", 90), _coordinate(lon, "Longitude", 180)
            )
        except ServiceError as e:
            raise to_http_exception(e, logger, f"Weather at ({lat}, {lon})") from e
