"""Pydantic models and schemas for the application."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SPORT_TYPES = ("mlb", "nfl", "nhl", "nba")


class ApiModel(BaseModel):
    """Response model serialized with camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


# Chatbot

class ChatMessageRequest(BaseModel):
    """Inbound chat message."""
    message: str = Field(..., min_length=1, description="User's message")


class ChatMessageResponse(BaseModel):
    """Assistant reply."""
    response: str = Field(..., description="Assistant text reply")


class RunStatus(str, Enum):
    """Lifecycle status of an assistant run."""
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"

    @property
    def is_pending(self) -> bool:
        return self in (RunStatus.QUEUED, RunStatus.IN_PROGRESS, RunStatus.CANCELLING)


class Thread(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str


class RunError(BaseModel):
    model_config = ConfigDict(extra="ignore")
    code: Optional[str] = None
    message: Optional[str] = None


class Run(BaseModel):
    """Assistant run as returned by the runs endpoints."""
    model_config = ConfigDict(extra="ignore")
    id: str
    status: RunStatus
    last_error: Optional[RunError] = None


class TextValue(BaseModel):
    model_config = ConfigDict(extra="ignore")
    value: str = ""


class MessageContent(BaseModel):
    model_config = ConfigDict(extra="ignore")
    type: str = "text"
    text: Optional[TextValue] = None


class AssistantMessage(BaseModel):
    """Message in a thread, authored by the user or the assistant."""
    model_config = ConfigDict(extra="ignore")
    role: str
    content: List[MessageContent] = Field(default_factory=list)


class MessageList(BaseModel):
    model_config = ConfigDict(extra="ignore")
    data: List[AssistantMessage] = Field(default_factory=list)


# Weather

class WeatherData(ApiModel):
    """Current weather for a location."""
    temperature: float
    condition: str
    location: str = Field(..., description='"City, Country"')
    feels_like: float = Field(..., alias="feelsLike")
    humidity: float
    description: str
    wind_speed: float = Field(..., alias="windSpeed")
    timezone: int = Field(0, description="Shift in seconds from UTC")
    icon: str = ""


# Stock

class StockQuote(ApiModel):
    """Latest quote for a symbol."""
    symbol: str
    price: float
    change: float
    change_percent: float = Field(..., alias="changePercent")
    last_updated: str = Field(..., alias="lastUpdated", description="ISO-8601 UTC")
    timestamp: int = Field(..., description="Milliseconds since epoch")


class PricePoint(ApiModel):
    date: str
    price: float


class StockHistory(ApiModel):
    """Closing prices windowed by number of points."""
    day: List[PricePoint] = Field(default_factory=list)
    week: List[PricePoint] = Field(default_factory=list)
    month: List[PricePoint] = Field(default_factory=list)
    symbol: str
    timestamp: int


# Sports

class GameRecord(BaseModel):
    """Normalized game, field names as exposed by the API."""
    model_config = ConfigDict(frozen=True)

    GameID: Optional[int] = None
    DateTime: str = ""
    Status: str
    AwayTeam: str
    HomeTeam: str
    AwayTeamScore: int = 0
    HomeTeamScore: int = 0
    Channel: str = ""
    StadiumDetails: str = ""


# Misc

class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""
    statusCode: int
    message: str
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    providers: List[str]
