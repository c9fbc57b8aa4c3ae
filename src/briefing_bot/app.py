"""Component wiring for the briefing bot."""

import asyncio
import logging
from datetime import date

from briefing_bot.analysis.engine import AnalysisEngine
from briefing_bot.cache.item_cache import ItemCache
from briefing_bot.callbacks.callback_handler import CallbackHandler
from briefing_bot.callbacks.command_router import CommandRouter
from briefing_bot.config.settings import Settings
from briefing_bot.delivery.formatter import BriefingFormatter
from briefing_bot.delivery.models import CallbackEvent, CommandEvent
from briefing_bot.delivery.telegram_channel import TelegramChannel
from briefing_bot.models.plan import RunKind
from briefing_bot.pipeline.briefing_pipeline import BriefingPipeline
from briefing_bot.pipeline.models import JobKind, RunResult
from briefing_bot.pipeline.scheduler import BriefingScheduler, run_with_retry
from briefing_bot.pipeline.weekly_review import WeeklyReviewJob
from briefing_bot.sources.market_fetcher import MarketDataFetcher
from briefing_bot.sources.quote_source import YFinanceQuoteSource
from briefing_bot.sources.transcript_source import YouTubeTranscriptSource
from briefing_bot.sources.youtube_source import YouTubeVideoSource
from briefing_bot.storage.recommendation_store import RecommendationStore

logger = logging.getLogger(__name__)


class BriefingApp:
    """Builds every component from settings and runs them together.

    One ItemCache and one AnalysisEngine are shared by the pipeline and the
    callback handler, so the cache bridges scheduled runs and button taps
    and the engine's rate limiter covers both.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.formatter = BriefingFormatter()

        quotes = YFinanceQuoteSource()
        self.quote_source = quotes
        self.market_fetcher = MarketDataFetcher(
            quote_source=quotes,
            indices=settings.sources.indices,
            sector_etfs=settings.sources.sector_etfs,
            hot_sector_count=settings.sources.hot_sector_count,
        )
        self.cache = ItemCache(settings.cache)
        self.engine = AnalysisEngine(api_key=settings.anthropic.api_key, settings=settings.analysis)
        self.store = RecommendationStore(settings.storage, timezone=settings.pipeline.timezone)
        self.channel = TelegramChannel(settings.delivery_settings(), self.formatter)

        self.pipeline = BriefingPipeline(
            market_fetcher=self.market_fetcher,
            video_source=YouTubeVideoSource(
                api_key=settings.youtube.api_key,
                max_results=settings.sources.max_results_per_channel,
            ),
            channels=settings.sources.channels,
            transcript_source=YouTubeTranscriptSource(
                languages=settings.sources.transcript_languages
            ),
            engine=self.engine,
            cache=self.cache,
            store=self.store,
            delivery=self.channel,
            settings=settings.pipeline,
        )
        self.weekly_review = WeeklyReviewJob(
            store=self.store,
            engine=self.engine,
            delivery=self.channel,
            formatter=self.formatter,
            quote_source=quotes,
            settings=settings.weekly_review,
            timezone=settings.pipeline.timezone,
        )
        self.scheduler = BriefingScheduler(
            pipeline=self.pipeline,
            weekly_review=self.weekly_review,
            delivery=self.channel,
            settings=settings.scheduler,
            formatter=self.formatter,
        )
        self.callback_handler = CallbackHandler(
            cache=self.cache,
            engine=self.engine,
            market_fetcher=self.market_fetcher,
            channel=self.channel,
            formatter=self.formatter,
        )
        self.command_router = CommandRouter(
            channel=self.channel,
            on_briefing=lambda: self.scheduler.run_job(JobKind.FULL),
        )
        self._tasks: set[asyncio.Task] = set()

    async def start(self) -> None:
        await self.channel.start()

    async def stop(self) -> None:
        await self.channel.stop()

    async def run_briefing(self, briefing_date: date | None = None) -> RunResult | None:
        """Run a full briefing now, with retries and a failure notice."""
        return await run_with_retry(
            lambda: self.pipeline.run_full(briefing_date),
            attempts=self.settings.scheduler.max_attempts,
            base_delay=self.settings.scheduler.retry_base_delay_seconds,
            on_failure=lambda e: self.channel.send_message(
                self.formatter.format_failure(RunKind.FULL, e)
            ),
            name="full briefing",
        )

    async def run_update(self) -> RunResult | None:
        """Run an update briefing now, with retries and a failure notice."""
        return await self.scheduler.run_job(JobKind.UPDATE)

    async def run_weekly_review(self) -> bool:
        return await self.weekly_review.run()

    async def dispatch(self, event: CallbackEvent | CommandEvent) -> None:
        """Route one inbound event; errors are logged, never raised."""
        try:
            if isinstance(event, CallbackEvent):
                await self.callback_handler.handle(event)
            else:
                await self.command_router.handle(event)
        except Exception as e:
            logger.error(f"Failed to handle inbound event {event}: {e}")

    async def serve(self) -> None:
        """Poll Telegram, run the scheduler and handle events until cancelled."""
        application = self.channel.build_application()
        async with application:
            await application.start()
            await application.updater.start_polling()
            await self.scheduler.start()
            logger.info("Bot is polling for callbacks and commands")
            try:
                async for event in self.channel.events():
                    task = asyncio.create_task(self.dispatch(event))
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
            finally:
                await self.scheduler.stop()
                await application.updater.stop()
                await application.stop()
