"""Stock controller for quotes and price history."""
import logging
from typing import Optional

from portfolio_proxy.controllers.error_mapping import to_http_exception
from portfolio_proxy.errors import InputValidationError, ServiceError
from portfolio_proxy.models import StockHistory, StockQuote

logger = logging.getLogger(__name__)

RESOLUTIONS = {"1", "5", "15", "30", "60", "D", "W", "M"}


def _symbol(symbol: Optional[str]) -> str:
    if not symbol or not symbol.strip():
        raise InputValidationError("Symbol is required")
    return symbol.strip().upper()


def _unix_time(value: Optional[str], name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise InputValidationError(f"'{name}' must be a unix timestamp in seconds")


class StockController:
    """Controller for stock operations."""

    def __init__(self, stock_service):
        """Initialize stock controller.

        Args:
            stock_service: Stock market data service
        """
        self.stock_service = stock_service

    async def get_quote(self, symbol: Optional[str]) -> StockQuote:
        """Handle a quote request."""
        try:
            return await self.stock_service.get_quote(_symbol(symbol))
        except ServiceError as e:
            raise to_http_exception(e, logger, f"Stock quote for '{symbol}'") from e

    async def get_historical_data(
        self,
        symbol: Optional[str],
        resolution: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> StockHistory:
        """Handle a price history request.

        Args:
            symbol: Ticker symbol (required)
            resolution: Candle resolution, one of 1, 5, 15, 30, 60, D, W, M
            start: Range start, unix seconds
            end: Range end, unix seconds

        Returns:
            StockHistory
        """
        try:
            ticker = _symbol(symbol)
            if resolution and resolution not in RESOLUTIONS:
                raise InputValidationError(
                    f"Resolution must be one of: {', '.join(sorted(RESOLUTIONS))}"
                )
            range_start = _unix_time(start, "from")
            range_end = _unix_time(end, "to")
            if range_start is not None and range_end is not None and range_start > range_end:
                raise InputValidationError("'from' must not be after 'to'")

            return await self.stock_service.get_historical_data(
                ticker, resolution or None, range_start, range_end
            )
        except ServiceError as e:
            raise to_http_exception(e, logger, f"Stock history for '{symbol}'") from e
