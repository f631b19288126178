"""Finnhub quote and candle transformers."""
from datetime import datetime, timezone
from typing import Any, List

from portfolio_proxy.errors import InvalidUpstreamData
from portfolio_proxy.models import PricePoint, StockHistory, StockQuote

# Window sizes are point counts and assume hourly candles.
DAY_POINTS = 24
WEEK_POINTS = 7 * 24


def _number(value: Any) -> float:
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def _epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def format_iso_utc(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a trailing Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _point_date(timestamp: float) -> str:
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidUpstreamData("Invalid historical stock data received from API") from e
    return format_iso_utc(moment)


def transform_quote(symbol: str, raw: Any, now: datetime) -> StockQuote:
    """Map a Finnhub ``/quote`` payload to StockQuote.

    Args:
        symbol: Requested ticker symbol
        raw: Decoded provider payload (``c``, ``d``, ``dp``)
        now: Time the quote was fetched

    Returns:
        StockQuote stamped with ``now``
    """
    if not isinstance(raw, dict):
        raise InvalidUpstreamData("Invalid stock data received from API")

    return StockQuote(
        symbol=symbol,
        price=_number(raw.get("c")),
        change=_number(raw.get("d")),
        change_percent=_number(raw.get("dp")),
        last_updated=format_iso_utc(now),
        timestamp=_epoch_millis(now),
    )


def transform_history(symbol: str, raw: Any, now: datetime) -> StockHistory:
    """Map a Finnhub ``/stock/candle`` payload to day/week/month windows.

    Closing prices ``c`` and unix timestamps ``t`` are paired by index and
    ordered by time. ``day`` holds the last 24 points, ``week`` the last 168
    and ``month`` all of them, regardless of the requested resolution.

    Args:
        symbol: Requested ticker symbol
        raw: Decoded provider payload
        now: Time the history was fetched

    Returns:
        StockHistory

    Raises:
        InvalidUpstreamData: If the price or timestamp arrays are missing
    """
    if not isinstance(raw, dict):
        raise InvalidUpstreamData("Invalid historical stock data received from API")

    if raw.get("s") == "no_data":
        points: List[PricePoint] = []
    else:
        prices = raw.get("c")
        timestamps = raw.get("t")
        if not isinstance(prices, list) or not isinstance(timestamps, list) or not all(isinstance(ts, (int, float)) and not isinstance(ts, bool) for ts in timestamps):
            raise InvalidUpstreamData("Invalid historical stock data received from API")

        pairs = sorted(zip(timestamps, prices), key=lambda pair: pair[0])
        points = [
            PricePoint(
                date=_point_date(ts),
                price=_number(price),
            )
            for ts, price in pairs
        ]

    return StockHistory(
        day=points[-DAY_POINTS:],
        week=points[-WEEK_POINTS:],
        month=points,
        symbol=symbol,
        timestamp=_epoch_millis(now),
    )
