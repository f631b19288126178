"""Tests for Discord widget lookups."""
import pytest

from portfolio_proxy.errors import InvalidUpstreamData, UpstreamError, UpstreamNotFound
from portfolio_proxy.services.discord_service import WIDGET_DISABLED_MESSAGE, DiscordService
from portfolio_proxy.transformers import transform_widget

WIDGET = {
    "id": "123456789012345678",
    "name": "Portfolio",
    "instant_invite": None,
    "channels": [],
    "members": [{"id": "0", "username": "someone", "status": "online"}],
    "presence_count": 1,
}


@pytest.fixture
def discord_service(http_client, app_config) -> DiscordService:
    return DiscordService(http_client, app_config.providers.discord)


def test_transform_widget_passes_object_through() -> None:
    assert transform_widget(WIDGET) == WIDGET


def test_transform_widget_rejects_non_object() -> None:
    with pytest.raises(InvalidUpstreamData):
        transform_widget([WIDGET])


@pytest.mark.asyncio
async def test_get_server_widget(discord_service, http_client) -> None:
    http_client.get_json.return_value = WIDGET

    widget = await discord_service.get_server_widget("123456789012345678")

    assert widget["presence_count"] == 1
    assert http_client.get_json.await_args.args[0] == (
        "https://discord.com/api/guilds/123456789012345678/widget.json"
    )


@pytest.mark.asyncio
async def test_disabled_widget_is_not_found(discord_service, http_client) -> None:
    http_client.get_json.side_effect = UpstreamError("Unknown Guild", upstream_status=404)

    with pytest.raises(UpstreamNotFound) as excinfo:
        await discord_service.get_server_widget("1")

    assert excinfo.value.message == WIDGET_DISABLED_MESSAGE


@pytest.mark.asyncio
async def test_other_failures_pass_through(discord_service, http_client) -> None:
    http_client.get_json.side_effect = UpstreamError("rate limited", upstream_status=429)

    with pytest.raises(UpstreamError) as excinfo:
        await discord_service.get_server_widget("1")

    assert excinfo.value.status_code == 502
