"""Stock service backed by the Finnhub API."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from portfolio_proxy.errors import UpstreamError, UpstreamNotFound
from portfolio_proxy.models import StockHistory, StockQuote
from portfolio_proxy.services.config_service import StockSettings
from portfolio_proxy.services.http_client_service import HttpClientService
from portfolio_proxy.transformers import transform_history, transform_quote
from portfolio_proxy.utils.colored_logger import get_provider_logger

provider_logger = get_provider_logger(__name__, 'stock')


class StockService:
    """Service for stock quotes and price history."""

    def __init__(self, http_client: HttpClientService, settings: StockSettings):
        """Initialize stock service.

        Args:
            http_client: Shared HTTP client adapter
            settings: Finnhub settings (base URL, API key, history defaults)
        """
        self.http_client = http_client
        self.settings = settings

    async def get_quote(self, symbol: str) -> StockQuote:
        """Get the latest quote for a symbol.

        Args:
            symbol: Ticker symbol, e.g. AAPL

        Returns:
            StockQuote
        """
        raw = await self._get(
            "/quote",
            {"symbol": symbol},
            "Failed to fetch stock data",
            "Stock not found",
        )
        quote = transform_quote(symbol, raw, datetime.now(timezone.utc))
        provider_logger.info(f"📈 {symbol}: {quote.price} ({quote.change_percent:+}%)")
        return quote

    async def get_historical_data(
        self,
        symbol: str,
        resolution: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> StockHistory:
        """Get closing prices between two unix timestamps.

        Args:
            symbol: Ticker symbol
            resolution: Candle resolution (1, 5, 15, 30, 60, D, W, M); defaults to config
            start: Range start in unix seconds; defaults to ``default_range_days`` ago
            end: Range end in unix seconds; defaults to now

        Returns:
            StockHistory with day/week/month windows
        """
        now = datetime.now(timezone.utc)
        end = end if end is not None else int(now.timestamp())
        start = start if start is not None else int(
            (now - timedelta(days=self.settings.default_range_days)).timestamp()
        )

        raw = await self._get(
            "/stock/candle",
            {
                "symbol": symbol,
                "resolution": resolution or self.settings.default_resolution,
                "from": start,
                "to": end,
            },
            "Failed to fetch historical stock data",
            "Historical data not found",
        )
        history = transform_history(symbol, raw, now)
        provider_logger.info(f"📊 {symbol}: {len(history.month)} historical points")
        return history

    async def _get(self, path: str, query: dict, error_message: str, not_found_message: str):
        try:
            return await self.http_client.get_json(
                f"{self.settings.base_url}{path}",
                params={**query, "token": self.settings.api_key},
                error_message=error_message,
            )
        except UpstreamError as e:
            if e.upstream_status == 404:
                raise UpstreamNotFound(not_found_message) from e
            raise
