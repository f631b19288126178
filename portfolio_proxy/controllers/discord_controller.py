"""Discord controller."""
import logging
from typing import Any, Dict

from portfolio_proxy.controllers.error_mapping import to_http_exception
from portfolio_proxy.errors import ServiceError

logger = logging.getLogger(__name__)


class DiscordController:
    """Controller for Discord server widgets."""

    def __init__(self, discord_service):
        self.discord_service = discord_service

    async def get_server_widget(self, server_id: str) -> Dict[str, Any]:
        """Handle a widget request; the id is passed to Discord as given."""
        try:
            return await self.discord_service.get_server_widget(server_id)
        except ServiceError as e:
            raise to_http_exception(e, logger, f"Discord widget {server_id}") from e
