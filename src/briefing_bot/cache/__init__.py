"""Ephemeral TTL cache."""

from briefing_bot.cache.item_cache import CacheSettings, ItemCache
from briefing_bot.cache.records import (
    DetailRecord,
    ItemRecord,
    TranscriptRecord,
    detail_key,
    item_key,
    transcript_key,
)

__all__ = [
    "CacheSettings",
    "DetailRecord",
    "ItemCache",
    "ItemRecord",
    "TranscriptRecord",
    "detail_key",
    "item_key",
    "transcript_key",
]
