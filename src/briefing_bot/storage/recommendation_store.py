# src/briefing_bot/storage/recommendation_store.py
"""Recommendation store persisting records to daily JSON files."""
import asyncio
import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import aiofiles
from pydantic import BaseModel

from briefing_bot.models.analysis import Action
from briefing_bot.models.recommendation import Recommendation

logger = logging.getLogger(__name__)


class StorageSettings(BaseModel):
    """Configuration for recommendation persistence.

    Attributes:
        data_dir: Directory holding one JSON file per briefing date.
    """

    data_dir: str = "data/recommendations"


class RecommendationStore:
    """Stores recommendations in daily JSON files.

    Files are named {data_dir}/{YYYY-MM-DD}.json after the briefing date.
    Record IDs follow the format YYYY-MM-DD-TICKER-NNN.
    """

    def __init__(self, settings: StorageSettings | None = None, timezone: str = "Asia/Seoul") -> None:
        """Initialize the store.

        Args:
            settings: Storage settings.
            timezone: Zone that defines "today" for recent().
        """
        self._settings = settings or StorageSettings()
        self._tz = ZoneInfo(timezone)
        self._data_dir = Path(self._settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._write_lock = asyncio.Lock()

    def _get_file_path(self, briefing_date: date) -> Path:
        return self._data_dir / f"{briefing_date.isoformat()}.json"

    async def _read_entries(self, briefing_date: date) -> list[dict]:
        file_path = self._get_file_path(briefing_date)
        if not file_path.exists():
            return []

        async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
            content = await f.read()
            return json.loads(content) if content.strip() else []

    async def _write_entries(self, briefing_date: date, entries: list[dict]) -> None:
        file_path = self._get_file_path(briefing_date)
        async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(entries, indent=2, ensure_ascii=False, default=str))

    def _generate_id(self, briefing_date: date, ticker: str, existing_count: int) -> str:
        return f"{briefing_date.isoformat()}-{ticker}-{existing_count + 1:03d}"

    async def create(self, recommendation: Recommendation) -> str:
        """Persist a recommendation.

        Args:
            recommendation: Record to store; its id is assigned here.

        Returns:
            The generated id.
        """
        async with self._write_lock:
            entries = await self._read_entries(recommendation.briefing_date)
            rec_id = self._generate_id(
                recommendation.briefing_date, recommendation.ticker, len(entries)
            )
            stored = recommendation.model_copy(update={"id": rec_id})
            entries.append(stored.model_dump(mode="json"))
            await self._write_entries(recommendation.briefing_date, entries)

        logger.debug(f"Stored recommendation {rec_id}")
        return rec_id

    async def query(
        self,
        start: date,
        end: date,
        action: Action | None = None,
        newest_first: bool = True,
    ) -> list[Recommendation]:
        """Return recommendations with briefing dates in [start, end].

        Args:
            start: First briefing date, inclusive.
            end: Last briefing date, inclusive.
            action: Only return this action when given.
            newest_first: Order by briefing date descending when True.

        Returns:
            Matching recommendations.
        """
        results: list[Recommendation] = []
        current = start
        while current <= end:
            for data in await self._read_entries(current):
                rec = Recommendation.model_validate(data)
                if action is None or rec.action == action:
                    results.append(rec)
            current += timedelta(days=1)

        results.sort(key=lambda r: (r.briefing_date, r.created_at), reverse=newest_first)
        return results

    async def recent(
        self, days: int = 7, limit: int | None = None, today: date | None = None
    ) -> list[Recommendation]:
        """Return recommendations of the last `days` days, newest first."""
        today = today or datetime.now(self._tz).date()
        results = await self.query(today - timedelta(days=days), today)
        return results[:limit] if limit else results

    async def update_current_price(self, rec_id: str, price: float) -> bool:
        """Set the current price of a stored recommendation.

        Args:
            rec_id: Recommendation id (YYYY-MM-DD-TICKER-NNN).
            price: Latest price.

        Returns:
            True if the record was found and updated.
        """
        briefing_date = date.fromisoformat(rec_id[:10])
        async with self._write_lock:
            entries = await self._read_entries(briefing_date)
            for entry in entries:
                if entry.get("id") == rec_id:
                    entry["current_price"] = price
                    await self._write_entries(briefing_date, entries)
                    return True
        logger.warning(f"Recommendation {rec_id} not found for price update")
        return False
