"""Configuration service: loads config.yml and environment secrets once at startup."""
import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from portfolio_proxy.errors import ConfigurationError
from portfolio_proxy.models.schemas import SPORT_TYPES

logger = logging.getLogger(__name__)


class FrozenModel(BaseModel):
    """Immutable configuration value."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class LoggingSettings(FrozenModel):
    level: str = "INFO"


class CorsSettings(FrozenModel):
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class HttpSettings(FrozenModel):
    timeout: float = Field(30.0, gt=0, description="Per-call timeout in seconds")
    user_agent: str = "Portfolio-Proxy/1.0"


class RetrySettings(FrozenModel):
    max_attempts: int = Field(3, ge=1)
    base_delay: float = Field(1.0, ge=0, description="Delay multiplied by the attempt index")


class PollingSettings(FrozenModel):
    initial_interval: float = Field(0.5, gt=0)
    backoff_factor: float = Field(1.5, ge=1.0)
    backoff_step: float = Field(5.0, gt=0, description="Elapsed seconds per interval growth step")
    max_interval: float = Field(4.0, gt=0)
    max_wait: float = Field(45.0, gt=0, description="Ceiling on total polling time in seconds")


class WeatherSettings(FrozenModel):
    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key_env: str = "OPENWEATHER_API_KEY"
    units: str = "imperial"
    api_key: str = Field("", repr=False)


class StockSettings(FrozenModel):
    base_url: str = "https://finnhub.io/api/v1"
    api_key_env: str = "FINNHUB_API_KEY"
    default_resolution: str = "60"
    default_range_days: int = Field(30, ge=1)
    api_key: str = Field("", repr=False)


class SportsSettings(FrozenModel):
    base_url: str = "https://api.sportsdata.io/v3"
    api_key_envs: Dict[str, str] = Field(
        default_factory=lambda: {sport: f"SPORTSDATA_{sport.upper()}_API_KEY" for sport in SPORT_TYPES}
    )
    api_keys: Dict[str, str] = Field(default_factory=dict, repr=False)


class DiscordSettings(FrozenModel):
    base_url: str = "https://discord.com/api"


class ChatbotSettings(FrozenModel):
    base_url: str = "https://api.openai.com/v1"
    api_key_env: str = "OPENAI_API_KEY"
    assistant_id_env: str = "OPENAI_ASSISTANT_ID"
    model: Optional[str] = None
    instructions: Optional[str] = None
    validate_on_startup: bool = False
    api_key: str = Field("", repr=False)
    assistant_id: str = ""


class ProvidersSettings(FrozenModel):
    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    stock: StockSettings = Field(default_factory=StockSettings)
    sports: SportsSettings = Field(default_factory=SportsSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    chatbot: ChatbotSettings = Field(default_factory=ChatbotSettings)


class AppConfig(FrozenModel):
    """Complete application configuration, secrets included."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    providers: ProvidersSettings = Field(default_factory=ProvidersSettings)


def _require_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} is not defined in environment variables")
    return value


def resolve_secrets(config: AppConfig, environ: Mapping[str, str]) -> AppConfig:
    """Return a copy of the config with API keys read from the environment.

    Args:
        config: Parsed configuration without secrets
        environ: Environment mapping (usually os.environ)

    Returns:
        New AppConfig carrying every provider secret

    Raises:
        ConfigurationError: If any required variable is missing
    """
    providers = config.providers

    weather = providers.weather.model_copy(
        update={"api_key": _require_env(environ, providers.weather.api_key_env)}
    )
    stock = providers.stock.model_copy(
        update={"api_key": _require_env(environ, providers.stock.api_key_env)}
    )

    missing_sports = [sport for sport in SPORT_TYPES if sport not in providers.sports.api_key_envs]
    if missing_sports:
        raise ConfigurationError(f"No API key variable configured for sports: {', '.join(missing_sports)}")
    sports = providers.sports.model_copy(
        update={
            "api_keys": {
                sport: _require_env(environ, env_name)
                for sport, env_name in providers.sports.api_key_envs.items()
            }
        }
    )

    chatbot = providers.chatbot.model_copy(
        update={
            "api_key": _require_env(environ, providers.chatbot.api_key_env),
            "assistant_id": _require_env(environ, providers.chatbot.assistant_id_env),
        }
    )

    return config.model_copy(
        update={
            "providers": providers.model_copy(
                update={"weather": weather, "stock": stock, "sports": sports, "chatbot": chatbot}
            )
        }
    )


class ConfigService:
    """Service owning the immutable application configuration."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        config: Optional[AppConfig] = None,
    ):
        """Initialize configuration service.

        Args:
            config_path: Path to config file. If None, will search default locations.
            environ: Environment mapping for secrets. Defaults to os.environ.
            config: Ready AppConfig; skips file and environment loading (used by tests)
        """
        self._config_path = config_path
        self._environ = os.environ if environ is None else environ
        self._config: Optional[AppConfig] = config
        if self._config is None:
            self.load_config()

    def _find_config_file(self) -> Optional[Path]:
        if self._config_path:
            config_path = Path(self._config_path)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            return config_path

        for candidate in (Path("config.yml"), Path("config/config.yml")):
            if candidate.exists():
                return candidate
        return None

    def load_config(self) -> AppConfig:
        """Load configuration from YAML and secrets from the environment.

        A missing config.yml falls back to built-in defaults; missing secrets
        are fatal.

        Returns:
            Loaded AppConfig

        Raises:
            ConfigurationError: If the file is invalid or a secret is missing
        """
        config_path = self._find_config_file()
        data: Dict = {}
        if config_path is not None:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            logger.info(f"Configuration loaded from {config_path}")
        else:
            logger.warning("config.yml not found, using built-in defaults")

        try:
            parsed = AppConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        self._config = resolve_secrets(parsed, self._environ)
        return self._config

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded")
        return self._config

    def get_safe_config(self) -> Dict:
        """Get configuration without secrets.

        Returns:
            Safe configuration dictionary
        """
        return self.config.model_dump(
            exclude={
                "providers": {
                    "weather": {"api_key"},
                    "stock": {"api_key"},
                    "sports": {"api_keys"},
                    "chatbot": {"api_key", "instructions"},
                }
            }
        )
