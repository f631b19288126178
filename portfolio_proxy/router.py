"""API router with all endpoints."""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query

from portfolio_proxy.models import (
    ChatMessageRequest,
    ChatMessageResponse,
    GameRecord,
    HealthResponse,
    StockHistory,
    StockQuote,
    WeatherData,
)

logger = logging.getLogger(__name__)


def create_router(
    chatbot_controller,
    weather_controller,
    stock_controller,
    sports_controller,
    discord_controller,
    config_controller,
) -> APIRouter:
    """Create API router with all endpoints.

    Query parameters are declared optional and validated by the controllers,
    so a missing value yields the same error body as any other bad input.

    Returns:
        Configured APIRouter mounted under /api
    """
    router = APIRouter(prefix="/api")

    @router.post("/chatbot/message", response_model=ChatMessageResponse)
    async def chatbot_message(request: ChatMessageRequest):
        """Send one message to the assistant and wait for its reply."""
        return await chatbot_controller.send_message(request)

    @router.get("/weather", response_model=WeatherData, response_model_by_alias=True)
    async def weather(location: Optional[str] = None):
        """Current weather for a city."""
        return await weather_controller.get_weather(location)

    @router.get("/weather/coordinates", response_model=WeatherData, response_model_by_alias=True)
    async def weather_by_coordinates(lat: Optional[str] = None, lon: Optional[str] = None):
        """Current weather for a latitude/longitude pair."""
        return await weather_controller.get_weather_by_coordinates(lat, lon)

    @router.get("/stock/quote", response_model=StockQuote, response_model_by_alias=True)
    async def stock_quote(symbol: Optional[str] = None):
        """Latest quote for a ticker symbol."""
        return await stock_controller.get_quote(symbol)

    @router.get("/stock/historical", response_model=StockHistory, response_model_by_alias=True)
    async def stock_historical(
        symbol: Optional[str] = None,
        resolution: Optional[str] = None,
        start: Optional[str] = Query(None, alias="from"),
        end: Optional[str] = Query(None, alias="to"),
    ):
        """Closing prices windowed into day, week and month."""
        return await stock_controller.get_historical_data(symbol, resolution, start, end)

    @router.get("/sports/{sport}", response_model=List[GameRecord])
    async def sports_games(sport: str):
        """Today's games for mlb, nfl, nhl or nba."""
        return await sports_controller.get_games(sport)

    @router.get("/discord/{server_id}")
    async def discord_widget(server_id: str) -> Dict[str, Any]:
        """Public widget of a Discord server."""
        return await discord_controller.get_server_widget(server_id)

    @router.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return config_controller.get_health()

    @router.get("/config")
    async def get_config():
        """Get current configuration (without sensitive data)."""
        return config_controller.get_config()

    return router
