"""Claude-backed analysis engine."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from typing import TypeVar

from anthropic import Anthropic, RateLimitError
from pydantic import BaseModel, ValidationError

from briefing_bot.analysis.parsing import extract_json_object
from briefing_bot.analysis.prompts import (
    SYSTEM_PROMPT,
    build_brief_prompt,
    build_content,
    build_detail_prompt,
    build_insight_prompt,
    build_weekly_review_prompt,
)
from briefing_bot.analysis.rate_limiter import RateLimiter
from briefing_bot.analysis.settings import AnalysisSettings
from briefing_bot.errors import AnalysisMalformedError, RateLimitedError
from briefing_bot.models.analysis import BriefAnalysis, DetailedAnalysis, WeeklyReview
from briefing_bot.models.item import Item
from briefing_bot.models.market import MarketSnapshot
from briefing_bot.models.recommendation import Recommendation

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "오늘의 핵심: AI 섹터 동향을 주시하세요"

ModelT = TypeVar("ModelT", bound=BaseModel)


def is_rate_limit_error(error: Exception) -> bool:
    """Check whether an error is a backend rate-limit (HTTP 429) signal."""
    return isinstance(error, RateLimitError) or "429" in str(error)


def _clean_sentence(text: str | None) -> str:
    if not text:
        return ""
    for line in text.strip().splitlines():
        line = line.strip().strip("\"'“”").strip()
        if line:
            return line
    return ""


def _price(value: float | None) -> str:
    return f"${value}" if value is not None else "N/A"


class AnalysisEngine:
    """Produces structured analysis of news items with Claude.

    All calls share one RateLimiter owned by this instance, so the minimum
    spacing holds for the pipeline and the callback handler alike. Rate-limit
    errors are retried with exponential backoff; every other backend error
    propagates to the caller.
    """

    def __init__(
        self,
        api_key: str,
        settings: AnalysisSettings | None = None,
        limiter: RateLimiter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the engine.

        Args:
            api_key: Anthropic API key.
            settings: Engine settings, defaults when omitted.
            limiter: Rate limiter, built from settings when omitted.
            sleep: Sleep used for backoff, injectable for tests.
        """
        self._settings = settings or AnalysisSettings()
        self._client = Anthropic(api_key=api_key)
        self._limiter = limiter or RateLimiter(self._settings.min_call_interval_seconds)
        self._sleep = sleep

    @property
    def settings(self) -> AnalysisSettings:
        return self._settings

    async def summarize(
        self,
        item: Item,
        transcript: str | None,
        market: MarketSnapshot | None,
    ) -> BriefAnalysis:
        """Produce the brief analysis of one item.

        Args:
            item: Item to analyze.
            transcript: Transcript text; the description is used when absent.
            market: Market context, may be None.

        Returns:
            Parsed analysis, or BriefAnalysis.unavailable() on a malformed response.

        Raises:
            RateLimitedError: Backend kept rate limiting after all retries.
        """
        content = build_content(item, transcript, self._settings.max_transcript_chars)
        response = await asyncio.to_thread(
            self._generate, build_brief_prompt(item, content, market)
        )
        return self._parse(response, BriefAnalysis, BriefAnalysis.unavailable, "brief")

    async def detail(
        self,
        item: Item,
        transcript: str | None,
        market: MarketSnapshot | None,
    ) -> DetailedAnalysis:
        """Produce the detailed 6W analysis of one item.

        Same contract as summarize(), with DetailedAnalysis.unavailable() as
        the fallback.
        """
        content = build_content(item, transcript, self._settings.max_transcript_chars)
        response = await asyncio.to_thread(
            self._generate, build_detail_prompt(item, content, market)
        )
        return self._parse(response, DetailedAnalysis, DetailedAnalysis.unavailable, "detailed")

    async def one_line_insight(
        self,
        analyses: Sequence[tuple[Item, BriefAnalysis]],
        market: MarketSnapshot | None,
    ) -> str:
        """Synthesize the day's single most actionable takeaway.

        Never raises; returns FALLBACK_INSIGHT on any failure.
        """
        summaries = [
            f"- {item.title}: {' '.join(brief.summary_lines)}" for item, brief in analyses
        ]
        try:
            response = await asyncio.to_thread(
                self._generate, build_insight_prompt(summaries, market)
            )
        except Exception as e:
            logger.error(f"One-line insight failed: {e}")
            return FALLBACK_INSIGHT

        return _clean_sentence(response) or FALLBACK_INSIGHT

    async def weekly_review(self, recommendations: Sequence[Recommendation]) -> WeeklyReview:
        """Review a week of recommendations.

        Never raises; returns WeeklyReview.failure() on any failure.
        """
        lines = [
            f"- {r.briefing_date.isoformat()}: {r.ticker} ({r.action.value}) - "
            f"추천가: {_price(r.recommended_price)}, 현재가: {_price(r.current_price)}"
            for r in recommendations
        ]
        try:
            response = await asyncio.to_thread(
                self._generate, build_weekly_review_prompt(lines)
            )
            return WeeklyReview.model_validate(extract_json_object(response))
        except Exception as e:
            logger.error(f"Weekly review failed: {e}")
            return WeeklyReview.failure()

    def _parse(
        self,
        response: str,
        model_cls: type[ModelT],
        default: Callable[[], ModelT],
        label: str,
    ) -> ModelT:
        try:
            return model_cls.model_validate(extract_json_object(response))
        except (AnalysisMalformedError, ValidationError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse {label} analysis: {e}")
            return default()

    def _generate(self, prompt: str) -> str:
        """Call Claude, honoring the rate limiter and retrying on 429.

        Raises:
            RateLimitedError: If still rate limited after max_retries retries.
            Exception: Any other backend error, unretried.
        """
        attempt = 0
        while True:
            try:
                with self._limiter.slot():
                    response = self._client.messages.create(
                        model=self._settings.model,
                        max_tokens=self._settings.max_tokens,
                        system=SYSTEM_PROMPT,
                        messages=[{"role": "user", "content": prompt}],
                    )
            except Exception as e:
                if not is_rate_limit_error(e):
                    raise
                if attempt >= self._settings.max_retries:
                    raise RateLimitedError(
                        f"Still rate limited after {attempt} retries: {e}"
                    ) from e
                attempt += 1
                wait = self._settings.retry_base_delay_seconds * (2**attempt)
                logger.warning(
                    f"Rate limited, waiting {wait:.1f}s before retry "
                    f"{attempt}/{self._settings.max_retries}"
                )
                self._sleep(wait)
                continue

            if not response.content:
                return ""
            return response.content[0].text or ""
