"""Models package."""
from .schemas import (
    AssistantMessage,
    ChatMessageRequest,
    ChatMessageResponse,
    ErrorResponse,
    GameRecord,
    HealthResponse,
    MessageList,
    PricePoint,
    Run,
    RunStatus,
    SPORT_TYPES,
    StockHistory,
    StockQuote,
    Thread,
    WeatherData,
)

__all__ = [
    "AssistantMessage",
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ErrorResponse",
    "GameRecord",
    "HealthResponse",
    "MessageList",
    "PricePoint",
    "Run",
    "RunStatus",
    "SPORT_TYPES",
    "StockHistory",
    "StockQuote",
    "Thread",
    "WeatherData",
]
