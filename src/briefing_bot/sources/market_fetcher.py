# src/briefing_bot/sources/market_fetcher.py

"""Builds market snapshots from index and sector quotes."""

import asyncio
import logging
from datetime import datetime

from briefing_bot.models.market import MarketSnapshot, QuoteSnapshot
from briefing_bot.sources.base import QuoteSource

logger = logging.getLogger(__name__)


class MarketDataFetcher:
    """Fetches major indices and sector ETFs into a MarketSnapshot."""

    def __init__(
        self,
        quote_source: QuoteSource,
        indices: dict[str, str],
        sector_etfs: dict[str, str],
        hot_sector_count: int = 3,
    ):
        """Initialize the fetcher.

        Args:
            quote_source: Source of raw quotes.
            indices: Display name to symbol, in display order.
            sector_etfs: Sector name to ETF symbol.
            hot_sector_count: How many hot/cold sectors to derive.
        """
        self._quotes = quote_source
        self._indices = indices
        self._sector_etfs = sector_etfs
        self._hot_count = hot_sector_count

    async def fetch_snapshot(self) -> MarketSnapshot:
        """Fetch all quotes concurrently and build the snapshot.

        Symbols that fail are skipped, so the snapshot may be partial or empty.
        """
        indices, sectors = await asyncio.gather(
            self._fetch_group(self._indices),
            self._fetch_group(self._sector_etfs),
        )
        snapshot = MarketSnapshot.build(
            indices=indices,
            sectors=sectors,
            fetched_at=datetime.now(),
            hot_count=self._hot_count,
        )
        logger.info(
            f"Market snapshot: {len(snapshot.indices)}/{len(self._indices)} indices, "
            f"{len(snapshot.sectors)}/{len(self._sector_etfs)} sectors"
        )
        return snapshot

    async def _fetch_group(self, symbols: dict[str, str]) -> list[QuoteSnapshot]:
        names = list(symbols)
        results = await asyncio.gather(
            *(self._quotes.fetch(symbols[name]) for name in names),
            return_exceptions=True,
        )

        snapshots = []
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.warning(f"Quote for {name} failed: {result}")
                continue
            if result is None:
                continue
            snapshots.append(
                QuoteSnapshot(
                    name=name,
                    symbol=symbols[name],
                    price=result.price,
                    change=result.change,
                    change_percent=result.change_percent,
                )
            )
        return snapshots
