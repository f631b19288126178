"""Weather service backed by the OpenWeather current-conditions API."""

from portfolio_proxy.errors import InputValidationError, UpstreamError
from portfolio_proxy.models import WeatherData
from portfolio_proxy.services.config_service import WeatherSettings
from portfolio_proxy.services.http_client_service import HttpClientService
from portfolio_proxy.transformers import transform_weather
from portfolio_proxy.utils.colored_logger import get_provider_logger

provider_logger = get_provider_logger(__name__, 'weather')


class WeatherService:
    """Service for current weather lookups."""

    def __init__(self, http_client: HttpClientService, settings: WeatherSettings):
        """Initialize weather service.

        Args:
            http_client: Shared HTTP client adapter
            settings: OpenWeather settings (base URL, API key, units)
        """
        self.http_client = http_client
        self.settings = settings

    async def get_weather(self, location: str) -> WeatherData:
        """Get current weather for a city name.

        Args:
            location: City name, optionally with country code ("Paris,FR")

        Returns:
            WeatherData

        Raises:
            InputValidationError: If the provider does not know the location
            UpstreamError: On any other provider failure
            InvalidUpstreamData: If the payload is incomplete
        """
        return await self._fetch({"q": location})

    async def get_weather_by_coordinates(self, lat: float, lon: float) -> WeatherData:
        """Get current weather for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            WeatherData
        """
        return await self._fetch({"lat": lat, "lon": lon})

    async def _fetch(self, query: dict) -> WeatherData:
        params = {**query, "appid": self.settings.api_key, "units": self.settings.units}
        try:
            raw = await self.http_client.get_json(
                f"{self.settings.base_url}/weather",
                params=params,
                error_message="Failed to fetch weather data",
            )
        except UpstreamError as e:
            raise self._remap_error(e) from e

        weather = transform_weather(raw)
        provider_logger.info(f"🌤️  Weather for {weather.location}: {weather.temperature}°, {weather.description}")
        return weather

    @staticmethod
    def _remap_error(error: UpstreamError) -> Exception:
        if error.upstream_status == 404:
            return InputValidationError("Location not found")
        if error.upstream_status == 401:
            return UpstreamError("Invalid API key", upstream_status=401, body=error.body)
        return error
