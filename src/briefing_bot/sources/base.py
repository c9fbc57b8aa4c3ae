"""Interfaces for external data sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from briefing_bot.models.item import Item


@dataclass(frozen=True)
class Quote:
    """Raw quote values for one symbol."""

    price: float
    change: float
    change_percent: float


class VideoSource(ABC):
    """Enumerates published items of a source channel."""

    @abstractmethod
    async def list_items(
        self, source_id: str, window_start: datetime, window_end: datetime
    ) -> list[Item]:
        """List items published inside the window, newest first.

        Raises:
            SourceUnavailableError: If the source cannot be queried.
        """


class TranscriptSource(ABC):
    """Fetches caption text for an item."""

    @abstractmethod
    async def fetch(self, item_id: str) -> str | None:
        """Return transcript text, or None when no captions exist."""


class QuoteSource(ABC):
    """Fetches the latest quote of a symbol."""

    @abstractmethod
    async def fetch(self, symbol: str) -> Quote | None:
        """Return the quote, or None when unavailable."""
