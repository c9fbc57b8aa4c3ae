"""LLM analysis engine."""

from briefing_bot.analysis.engine import FALLBACK_INSIGHT, AnalysisEngine
from briefing_bot.analysis.rate_limiter import RateLimiter
from briefing_bot.analysis.settings import AnalysisSettings

__all__ = [
    "FALLBACK_INSIGHT",
    "AnalysisEngine",
    "AnalysisSettings",
    "RateLimiter",
]
