"""Quote source using yfinance."""

import asyncio
import logging

import yfinance as yf

from briefing_bot.sources.base import Quote, QuoteSource

logger = logging.getLogger(__name__)


class YFinanceQuoteSource(QuoteSource):
    """Fetches last price and change versus previous close from yfinance."""

    async def fetch(self, symbol: str) -> Quote | None:
        """Fetch a quote.

        Returns:
            Quote, or None if yfinance fails or lacks price data.
        """
        return await asyncio.to_thread(self._fetch_sync, symbol)

    def _fetch_sync(self, symbol: str) -> Quote | None:
        try:
            info = yf.Ticker(symbol).info
        except Exception as e:
            logger.warning(f"Quote fetch error for {symbol}: {e}")
            return None

        price = info.get("regularMarketPrice") or info.get("currentPrice")
        previous_close = info.get("regularMarketPreviousClose") or info.get("previousClose")
        if price is None or not previous_close:
            return None

        price = float(price)
        previous_close = float(previous_close)
        change = price - previous_close
        return Quote(
            price=price,
            change=change,
            change_percent=change / previous_close * 100,
        )
