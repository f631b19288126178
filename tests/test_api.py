"""End-to-end tests for the HTTP API with mocked providers."""
from typing import Callable, Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from portfolio_proxy import create_app
from portfolio_proxy.services.config_service import AppConfig, ConfigService
from portfolio_proxy.services.http_client_service import HttpClientService

from .test_sports import NBA_GAME
from .test_weather import OPENWEATHER_PAYLOAD

Handler = Callable[[httpx.Request], httpx.Response]


def assistant_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if request.method == "POST" and path.endswith("/threads"):
        return httpx.Response(200, json={"id": "thread_1"})
    if request.method == "POST" and path.endswith("/messages"):
        return httpx.Response(200, json={"id": "msg_1"})
    if request.method == "POST" and path.endswith("/runs"):
        return httpx.Response(200, json={"id": "run_1", "status": "queued"})
    if path.endswith("/runs/run_1"):
        return httpx.Response(200, json={"id": "run_1", "status": "completed"})
    if path.endswith("/messages"):
        return httpx.Response(
            200,
            json={"data": [{"role": "assistant", "content": [{"type": "text", "text": {"value": "Hi【1:0†a】!"}}]}]},
        )
    return httpx.Response(404, json={"error": {"message": "unknown route"}})


def default_handler(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    path = request.url.path
    if host == "api.openweathermap.org":
        if request.url.params.get("q") == "Atlantis":
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        return httpx.Response(200, json=OPENWEATHER_PAYLOAD)
    if host == "finnhub.io":
        if path.endswith("/quote"):
            return httpx.Response(200, json={"c": 150.5, "d": 2.5, "dp": 1.67})
        return httpx.Response(200, json={"s": "ok", "c": [2.0, 1.0, 3.0], "t": [1700003600, 1700000000, 1700007200]})
    if host == "api.sportsdata.io":
        return httpx.Response(200, json=[NBA_GAME])
    if host == "discord.com":
        if "/guilds/404/" in path:
            return httpx.Response(404, json={"message": "Unknown Guild", "code": 10004})
        return httpx.Response(200, json={"id": path.split("/")[-2], "name": "Guild", "presence_count": 3})
    if host == "api.openai.com":
        return assistant_handler(request)
    return httpx.Response(500, json={"message": "unexpected host"})


def build_client(
    app_config: AppConfig, handler: Handler = default_handler, raise_server_exceptions: bool = True
) -> TestClient:
    http_client = HttpClientService(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    app = create_app(config_service=ConfigService(config=app_config), http_client=http_client)
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


@pytest.fixture
def client(app_config) -> TestClient:
    with build_client(app_config) as test_client:
        yield test_client


def assert_error(response: httpx.Response, status: int, message: str) -> None:
    assert response.status_code == status
    body = response.json()
    assert body["statusCode"] == status
    assert body["message"] == message
    assert isinstance(body["error"], str) and body["error"]


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "providers": ["chatbot", "weather", "stock", "sports", "discord"],
    }


def test_config_hides_secrets(client: TestClient) -> None:
    response = client.get("/api/config")

    assert response.status_code == 200
    assert "weather-key" not in response.text
    assert "openai-key" not in response.text


def test_weather(client: TestClient) -> None:
    response = client.get("/api/weather", params={"location": "London"})

    assert response.status_code == 200
    body = response.json()
    assert body["location"] == "London, GB"
    assert body["feelsLike"] == 60.1
    assert body["windSpeed"] == 9.2


def test_weather_requires_location(client: TestClient) -> None:
    assert_error(client.get("/api/weather"), 400, "Location is required")


def test_weather_unknown_location(client: TestClient) -> None:
    assert_error(client.get("/api/weather", params={"location": "Atlantis"}), 400, "Location not found")


def test_weather_by_coordinates(client: TestClient) -> None:
    response = client.get("/api/weather/coordinates", params={"lat": "51.5", "lon": "-0.12"})
    assert response.status_code == 200


def test_weather_by_coordinates_validates_numbers(client: TestClient) -> None:
    response = client.get("/api/weather/coordinates", params={"lat": "north", "lon": "0"})
    assert_error(response, 400, "Latitude must be a number")


def test_stock_quote(client: TestClient) -> None:
    response = client.get("/api/stock/quote", params={"symbol": "aapl"})

    assert response.status_code == 200
    body = response.json()
    assert (body["symbol"], body["price"], body["change"], body["changePercent"]) == ("AAPL", 150.5, 2.5, 1.67)
    assert body["lastUpdated"].endswith("Z")
    assert isinstance(body["timestamp"], int)


def test_stock_quote_requires_symbol(client: TestClient) -> None:
    assert_error(client.get("/api/stock/quote"), 400, "Symbol is required")


def test_stock_historical(client: TestClient) -> None:
    response = client.get(
        "/api/stock/historical",
        params={"symbol": "AAPL", "resolution": "60", "from": "1690000000", "to": "1700010000"},
    )

    assert response.status_code == 200
    month = response.json()["month"]
    assert [point["price"] for point in month] == [1.0, 2.0, 3.0]


def test_stock_historical_rejects_bad_range(client: TestClient) -> None:
    response = client.get("/api/stock/historical", params={"symbol": "AAPL", "from": "soon"})
    assert response.status_code == 400


def test_sports(client: TestClient) -> None:
    response = client.get("/api/sports/nba")

    assert response.status_code == 200
    [game] = response.json()
    assert game["Status"] == "Q4 - 7:08"
    assert game["HomeTeam"] == "BOS"


def test_sports_invalid_type(client: TestClient) -> None:
    assert_error(client.get("/api/sports/cricket"), 400, "Invalid sport type")


def test_discord_widget(client: TestClient) -> None:
    response = client.get("/api/discord/1234")

    assert response.status_code == 200
    assert response.json()["presence_count"] == 3


def test_discord_widget_disabled(client: TestClient) -> None:
    response = client.get("/api/discord/404")

    assert_error(
        response,
        404,
        "Discord widget is not enabled for this server. Please enable it in server settings.",
    )


def test_chatbot_message(client: TestClient) -> None:
    response = client.post("/api/chatbot/message", json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json() == {"response": "Hi!"}


def test_chatbot_rejects_missing_message(client: TestClient) -> None:
    response = client.post("/api/chatbot/message", json={})

    assert response.status_code == 400
    assert response.json()["statusCode"] == 400


def test_chatbot_rejects_blank_message(client: TestClient) -> None:
    assert_error(client.post("/api/chatbot/message", json={"message": "   "}), 400, "Message is required")


def test_chatbot_run_failure_is_bad_gateway(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/runs/run_1"):
            return httpx.Response(200, json={"id": "run_1", "status": "failed"})
        return assistant_handler(request)

    with build_client(app_config, handler) as test_client:
        response = test_client.post("/api/chatbot/message", json={"message": "Hello"})

    assert_error(response, 502, "Run failed with status: failed")


def test_chatbot_polling_timeout(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/runs/run_1"):
            return httpx.Response(200, json={"id": "run_1", "status": "in_progress"})
        return assistant_handler(request)

    config = app_config.model_copy(
        update={"polling": app_config.polling.model_copy(update={"max_wait": 0.05})}
    )
    with build_client(config, handler) as test_client:
        response = test_client.post("/api/chatbot/message", json={"message": "Hello"})

    assert_error(response, 504, "Request timed out or failed")


def test_upstream_server_error_is_bad_gateway(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "maintenance"})

    with build_client(app_config, handler) as test_client:
        response = test_client.get("/api/stock/quote", params={"symbol": "AAPL"})

    assert_error(response, 502, "maintenance")


def test_invalid_upstream_payload_is_server_error(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"name": "London"})

    with build_client(app_config, handler) as test_client:
        response = test_client.get("/api/weather", params={"location": "London"})

    assert_error(response, 500, "Invalid weather data received from API")


def test_startup_validation_of_assistant(app_config) -> None:
    calls: Dict[str, int] = {"assistant": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/assistants/asst_123"):
            calls["assistant"] += 1
            return httpx.Response(200, json={"id": "asst_123", "name": "Helper", "model": "gpt-4o"})
        return default_handler(request)

    chatbot = app_config.providers.chatbot.model_copy(update={"validate_on_startup": True})
    config = app_config.model_copy(
        update={"providers": app_config.providers.model_copy(update={"chatbot": chatbot})}
    )
    with build_client(config, handler) as test_client:
        assert test_client.get("/api/health").status_code == 200

    assert calls["assistant"] == 1


def test_discord_widget_passes_id_through(client: TestClient) -> None:
    response = client.get("/api/discord/my-guild")

    assert response.status_code == 200
    assert response.json()["id"] == "my-guild"


def test_sports_provider_not_found(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "not found"})

    with build_client(app_config, handler) as test_client:
        response = test_client.get("/api/sports/nba")

    assert response.status_code == 404
    assert response.json()["statusCode"] == 404


def test_sports_odd_nested_shapes_still_render(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"teams": {"home": "NYY", "away": "BOS"}}])

    with build_client(app_config, handler) as test_client:
        response = test_client.get("/api/sports/mlb")

    assert response.status_code == 200
    assert response.json()[0]["Status"] == "Scheduled"


def test_out_of_range_history_timestamp_is_server_error(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"s": "ok", "c": [1.0], "t": [10**20]})

    with build_client(app_config, handler) as test_client:
        response = test_client.get("/api/stock/historical", params={"symbol": "AAPL"})

    assert_error(response, 500, "Invalid historical stock data received from API")


def test_unexpected_exception_renders_json_error(app_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("transport bug")

    with build_client(app_config, handler, raise_server_exceptions=False) as test_client:
        response = test_client.get("/api/stock/quote", params={"symbol": "AAPL"})

    assert response.headers["content-type"].startswith("application/json")
    assert_error(response, 500, "Internal server error")
