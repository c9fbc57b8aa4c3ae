"""Domain models."""

from briefing_bot.models.analysis import (
    Action,
    BriefAnalysis,
    Confidence,
    DetailedAnalysis,
    PickResult,
    SixW,
    TradeRecommendation,
    WeeklyReview,
)
from briefing_bot.models.item import Item
from briefing_bot.models.market import Direction, MarketSnapshot, QuoteSnapshot
from briefing_bot.models.plan import DeliveryPlan, ProcessedItem, RunKind, RunWindow
from briefing_bot.models.recommendation import (
    Recommendation,
    RecommendationStatus,
    recommendations_from_analysis,
)

__all__ = [
    "Action",
    "BriefAnalysis",
    "Confidence",
    "DeliveryPlan",
    "DetailedAnalysis",
    "Direction",
    "Item",
    "MarketSnapshot",
    "PickResult",
    "ProcessedItem",
    "QuoteSnapshot",
    "Recommendation",
    "RecommendationStatus",
    "RunKind",
    "RunWindow",
    "SixW",
    "TradeRecommendation",
    "WeeklyReview",
    "recommendations_from_analysis",
]
