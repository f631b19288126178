"""Sports controller."""
import logging
from typing import List

from portfolio_proxy.controllers.error_mapping import to_http_exception
from portfolio_proxy.errors import ServiceError
from portfolio_proxy.models import GameRecord

logger = logging.getLogger(__name__)


class SportsController:
    """Controller for scoreboards."""

    def __init__(self, sports_service):
        self.sports_service = sports_service

    async def get_games(self, sport: str) -> List[GameRecord]:
        """Handle a scoreboard request for today's games of one sport."""
        try:
            return await self.sports_service.get_games(sport.lower())
        except ServiceError as e:
            raise to_http_exception(e, logger, f"{sport} games") from e
