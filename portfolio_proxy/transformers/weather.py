"""OpenWeather current-conditions transformer."""
from typing import Any, Dict

from portfolio_proxy.errors import InvalidUpstreamData
from portfolio_proxy.models import WeatherData


def _number(value: Any) -> float:
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def transform_weather(raw: Any) -> WeatherData:
    """Map an OpenWeather ``/weather`` payload to WeatherData.

    Args:
        raw: Decoded provider payload

    Returns:
        WeatherData with location formatted as "City, Country"

    Raises:
        InvalidUpstreamData: If main, weather[0], name, sys.country or wind.speed is missing
    """
    if not isinstance(raw, dict):
        raise InvalidUpstreamData("Invalid weather data received from API")

    main = raw.get("main")
    conditions = raw.get("weather")
    sys_info = raw.get("sys")
    wind = raw.get("wind")
    if (
        not isinstance(main, dict)
        or not isinstance(conditions, list)
        or not conditions
        or not isinstance(conditions[0], dict)
        or "name" not in raw
        or not isinstance(sys_info, dict)
        or "country" not in sys_info
        or not isinstance(wind, dict)
        or "speed" not in wind
    ):
        raise InvalidUpstreamData("Invalid weather data received from API")

    current: Dict[str, Any] = conditions[0]
    timezone = raw.get("timezone")

    return WeatherData(
        temperature=_number(main.get("temp")),
        condition=str(current.get("main") or "").lower(),
        location=f"{raw.get('name') or ''}, {sys_info.get('country') or ''}",
        feels_like=_number(main.get("feels_like")),
        humidity=_number(main.get("humidity")),
        description=str(current.get("description") or ""),
        wind_speed=_number(wind.get("speed")),
        timezone=int(timezone) if isinstance(timezone, (int, float)) else 0,
        icon=str(current.get("icon") or ""),
    )
