"""Weekly performance review of recorded BUY recommendations."""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from briefing_bot.analysis.engine import AnalysisEngine
from briefing_bot.delivery.base import DeliveryChannel
from briefing_bot.delivery.formatter import BriefingFormatter
from briefing_bot.models.analysis import Action
from briefing_bot.models.recommendation import Recommendation
from briefing_bot.pipeline.settings import WeeklyReviewSettings
from briefing_bot.sources.base import QuoteSource
from briefing_bot.storage.recommendation_store import RecommendationStore

logger = logging.getLogger(__name__)


class WeeklyReviewJob:
    """Reviews the last week of BUY recommendations and sends the result."""

    def __init__(
        self,
        store: RecommendationStore,
        engine: AnalysisEngine,
        delivery: DeliveryChannel,
        formatter: BriefingFormatter | None = None,
        quote_source: QuoteSource | None = None,
        settings: WeeklyReviewSettings | None = None,
        timezone: str = "Asia/Seoul",
    ):
        """Initialize the job.

        Args:
            store: Recommendation store to query.
            engine: Engine producing the review.
            delivery: Channel the review is sent to.
            formatter: Formatter for the review message.
            quote_source: Used for price refresh when enabled.
            settings: Review settings.
            timezone: Zone that defines "today".
        """
        self._store = store
        self._engine = engine
        self._delivery = delivery
        self._formatter = formatter or BriefingFormatter()
        self._quotes = quote_source
        self._settings = settings or WeeklyReviewSettings()
        self._tz = ZoneInfo(timezone)

    async def run(self, today: date | None = None) -> bool:
        """Build and send the weekly review.

        Errors are logged and never raised.

        Returns:
            True if a message was sent.
        """
        logger.info("Starting weekly review job")
        try:
            today = today or datetime.now(self._tz).date()
            recommendations = await self._store.query(
                today - timedelta(days=self._settings.lookback_days),
                today,
                action=Action.BUY,
                newest_first=True,
            )

            if not recommendations:
                return await self._delivery.send_message(self._formatter.format_weekly_empty())

            if self._settings.refresh_prices and self._quotes is not None:
                recommendations = await self._refresh_prices(recommendations)

            review = await self._engine.weekly_review(recommendations)
            sent = await self._delivery.send_message(
                self._formatter.format_weekly_review(recommendations, review)
            )
            logger.info("Weekly review completed")
            return sent
        except Exception as e:
            logger.error(f"Weekly review failed: {e}")
            return False

    async def _refresh_prices(
        self, recommendations: list[Recommendation]
    ) -> list[Recommendation]:
        refreshed = []
        for rec in recommendations:
            quote = await self._quotes.fetch(rec.ticker)
            if quote is None:
                refreshed.append(rec)
                continue
            if rec.id:
                await self._store.update_current_price(rec.id, quote.price)
            refreshed.append(rec.model_copy(update={"current_price": quote.price}))
        return refreshed
