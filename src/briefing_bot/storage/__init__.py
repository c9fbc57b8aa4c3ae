"""Recommendation persistence."""

from briefing_bot.storage.recommendation_store import RecommendationStore, StorageSettings

__all__ = ["RecommendationStore", "StorageSettings"]
