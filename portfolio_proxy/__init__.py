"""Main application package."""
import logging
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_proxy.controllers import (
    ChatbotController,
    ConfigController,
    DiscordController,
    SportsController,
    StockController,
    WeatherController,
)
from portfolio_proxy.models import ErrorResponse
from portfolio_proxy.router import create_router
from portfolio_proxy.services import (
    AssistantService,
    ConfigService,
    DiscordService,
    HttpClientService,
    SportsService,
    StockService,
    WeatherService,
)
from portfolio_proxy.utils.colored_logger import setup_colored_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def error_body(status_code: int, message: str) -> dict:
    """Build the error payload shared by every failed response."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    return ErrorResponse(statusCode=status_code, message=message, error=reason).model_dump()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "; ".join(problems) or "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected (400): {message}")
    return JSONResponse(status_code=400, content=error_body(400, message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed with unhandled {type(exc).__name__}")
    return JSONResponse(status_code=500, content=error_body(500, "Internal server error"))


def create_app(
    config_path: Optional[str] = None,
    config_service: Optional[ConfigService] = None,
    http_client: Optional[HttpClientService] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config_path: Optional path to config file
        config_service: Preloaded configuration (tests pass one built from an AppConfig)
        http_client: Shared HTTP adapter; created from the ``http`` settings when omitted

    Returns:
        Configured FastAPI application

    Raises:
        ConfigurationError: If configuration or a required secret is missing
    """
    config_service = config_service or ConfigService(config_path)
    config = config_service.config

    # Configure colored logging
    setup_colored_logging(level=config.logging.level)

    # Initialize services
    logger.info("Initializing services...")

    http_client = http_client or HttpClientService(
        timeout=config.http.timeout, user_agent=config.http.user_agent
    )
    providers = config.providers

    assistant_service = AssistantService(
        http_client, providers.chatbot, retry=config.retry, polling=config.polling
    )
    weather_service = WeatherService(http_client, providers.weather)
    stock_service = StockService(http_client, providers.stock)
    sports_service = SportsService(http_client, providers.sports)
    discord_service = DiscordService(http_client, providers.discord)

    # Initialize controllers
    logger.info("Initializing controllers...")

    chatbot_controller = ChatbotController(assistant_service=assistant_service)
    weather_controller = WeatherController(weather_service=weather_service)
    stock_controller = StockController(stock_service=stock_service)
    sports_controller = SportsController(sports_service=sports_service)
    discord_controller = DiscordController(discord_service=discord_service)
    config_controller = ConfigController(config_service=config_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if providers.chatbot.validate_on_startup:
            await assistant_service.validate_assistant()
        yield
        await http_client.aclose()
        logger.info("HTTP client closed")

    # Create FastAPI app
    app = FastAPI(
        title="Portfolio Proxy API",
        description="Uniform REST facade over weather, stock, sports, Discord and assistant providers",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors.allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Create and include router
    router = create_router(
        chatbot_controller,
        weather_controller,
        stock_controller,
        sports_controller,
        discord_controller,
        config_controller,
    )
    app.include_router(router)

    logger.info("Application initialized successfully")
    logger.info(f"Assistant: {providers.chatbot.assistant_id}, poll ceiling {config.polling.max_wait}s")

    return app
