"""Sports scores backed by SportsData.io."""
from datetime import date
from typing import List, Optional

from portfolio_proxy.errors import InvalidSportType, UpstreamError, UpstreamNotFound
from portfolio_proxy.models import SPORT_TYPES, GameRecord
from portfolio_proxy.services.config_service import SportsSettings
from portfolio_proxy.services.http_client_service import HttpClientService
from portfolio_proxy.transformers import transform_games
from portfolio_proxy.utils.colored_logger import get_provider_logger

provider_logger = get_provider_logger(__name__, 'sports')

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

# NFL publishes scores under a different endpoint name
SCOREBOARD_ENDPOINTS = {
    "mlb": "GamesByDate",
    "nfl": "ScoresByDate",
    "nhl": "GamesByDate",
    "nba": "GamesByDate",
}


def format_game_date(day: date) -> str:
    """Format a date the way SportsData.io expects it, e.g. 2025-MAR-16."""
    return f"{day.year}-{MONTHS[day.month - 1]}-{day.day:02d}"


class SportsService:
    """Service for daily scoreboards."""

    def __init__(self, http_client: HttpClientService, settings: SportsSettings):
        """Initialize sports service.

        Args:
            http_client: Shared HTTP client adapter
            settings: SportsData.io settings (base URL, one API key per sport)
        """
        self.http_client = http_client
        self.settings = settings

    async def get_games(self, sport: str, on: Optional[date] = None) -> List[GameRecord]:
        """Get the normalized scoreboard of one sport for a day.

        Args:
            sport: One of mlb, nfl, nhl, nba
            on: Day to fetch; defaults to today

        Returns:
            Normalized games

        Raises:
            InvalidSportType: If the sport code is unknown
            UpstreamNotFound: If the provider has no scoreboard for the day
            UpstreamError: On any other provider failure
        """
        if sport not in SPORT_TYPES:
            raise InvalidSportType()

        game_date = format_game_date(on or date.today())
        try:
            raw = await self.http_client.get_json(
                f"{self.settings.base_url}/{sport}/scores/json/{SCOREBOARD_ENDPOINTS[sport]}/{game_date}",
                params={"key": self.settings.api_keys.get(sport, "")},
                error_message=f"Failed to fetch {sport.upper()} games",
            )
        except UpstreamError as e:
            if e.upstream_status == 404:
                raise UpstreamNotFound(f"No {sport.upper()} games found for {game_date}") from e
            raise

        games = transform_games(sport, raw)
        provider_logger.info(f"🏟️  {sport.upper()} {game_date}: {len(games)} games")
        return games
