"""In-memory TTL cache bridging pipeline runs and user detail requests."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field

from briefing_bot.cache.records import (
    DetailRecord,
    ItemRecord,
    TranscriptRecord,
    detail_key,
    item_key,
    transcript_key,
)
from briefing_bot.errors import CacheMissError
from briefing_bot.models.analysis import DetailedAnalysis
from briefing_bot.models.item import Item

logger = logging.getLogger(__name__)


class CacheSettings(BaseModel):
    """TTLs for each record kind, in hours."""

    item_ttl_hours: float = Field(default=24.0, gt=0)
    transcript_ttl_hours: float = Field(default=24.0, gt=0)
    detail_ttl_hours: float = Field(default=24.0, gt=0)


class ItemCache:
    """Thread-safe key/value store with per-entry expiry.

    Expired entries are indistinguishable from absent ones and are dropped
    lazily on read or by purge_expired(). There is no size bound.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            settings: TTL settings.
            clock: Monotonic clock in seconds, injectable for tests.
        """
        self._settings = settings or CacheSettings()
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Any, ttl: timedelta | float) -> None:
        """Store a value.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time to live, as a timedelta or in seconds.
        """
        with self._lock:
            self._put_locked(key, value, ttl)

    def get(self, key: str) -> Any | None:
        """Return the value for key, or None when absent or expired."""
        with self._lock:
            return self._get_locked(key)

    def _put_locked(self, key: str, value: Any, ttl: timedelta | float) -> None:
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        self._entries[key] = (self._clock() + seconds, value)

    def _get_locked(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def purge_expired(self) -> int:
        """Drop all expired entries.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def put_item(self, item: Item, has_transcript: bool) -> None:
        self.put(
            item_key(item.id),
            ItemRecord(item=item, has_transcript=has_transcript),
            timedelta(hours=self._settings.item_ttl_hours),
        )

    def get_item(self, item_id: str) -> ItemRecord | None:
        return self.get(item_key(item_id))

    def put_transcript(self, item_id: str, text: str) -> None:
        self.put(
            transcript_key(item_id),
            TranscriptRecord(text=text),
            timedelta(hours=self._settings.transcript_ttl_hours),
        )

    def get_transcript(self, item_id: str) -> str | None:
        record = self.get(transcript_key(item_id))
        return record.text if record else None

    def put_detail(self, item_id: str, analysis: DetailedAnalysis) -> None:
        """Memoize a detailed analysis.

        Raises:
            CacheMissError: If the item record is absent or expired.
        """
        with self._lock:
            if self._get_locked(item_key(item_id)) is None:
                raise CacheMissError(f"No item record for {item_id}")
            self._put_locked(
                detail_key(item_id),
                DetailRecord(analysis=analysis),
                timedelta(hours=self._settings.detail_ttl_hours),
            )

    def get_detail(self, item_id: str) -> DetailedAnalysis | None:
        record = self.get(detail_key(item_id))
        return record.analysis if record else None
