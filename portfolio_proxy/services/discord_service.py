"""Discord guild widget lookup."""
from typing import Any, Dict

from portfolio_proxy.errors import UpstreamError, UpstreamNotFound
from portfolio_proxy.services.config_service import DiscordSettings
from portfolio_proxy.services.http_client_service import HttpClientService
from portfolio_proxy.transformers import transform_widget
from portfolio_proxy.utils.colored_logger import get_provider_logger

provider_logger = get_provider_logger(__name__, 'discord')

WIDGET_DISABLED_MESSAGE = (
    "Discord widget is not enabled for this server. Please enable it in server settings."
)


class DiscordService:
    """Service for public guild widgets."""

    def __init__(self, http_client: HttpClientService, settings: DiscordSettings):
        self.http_client = http_client
        self.settings = settings

    async def get_server_widget(self, server_id: str) -> Dict[str, Any]:
        """Fetch the widget of a guild.

        A 404 from Discord means the widget is disabled in the server settings.

        Raises:
            UpstreamNotFound: If the widget is not enabled
            UpstreamError: On any other provider failure
        """
        try:
            raw = await self.http_client.get_json(
                f"{self.settings.base_url}/guilds/{server_id}/widget.json",
                error_message="Failed to fetch Discord data",
            )
        except UpstreamError as e:
            if e.upstream_status == 404:
                raise UpstreamNotFound(WIDGET_DISABLED_MESSAGE) from e
            raise

        widget = transform_widget(raw)
        provider_logger.info(f"💬 Discord widget {server_id}: {widget.get('presence_count', 0)} online")
        return widget
