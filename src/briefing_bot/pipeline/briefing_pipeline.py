"""One briefing run: market, items, transcripts, analysis, delivery."""

import asyncio
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from briefing_bot.analysis.engine import AnalysisEngine
from briefing_bot.cache.item_cache import ItemCache
from briefing_bot.delivery.base import DeliveryChannel
from briefing_bot.errors import BatchFatalError
from briefing_bot.models.analysis import BriefAnalysis
from briefing_bot.models.item import Item
from briefing_bot.models.market import MarketSnapshot
from briefing_bot.models.plan import DeliveryPlan, ProcessedItem, RunKind, RunWindow
from briefing_bot.models.recommendation import recommendations_from_analysis
from briefing_bot.pipeline.models import RunResult
from briefing_bot.pipeline.settings import PipelineSettings
from briefing_bot.pipeline.windows import full_run_window, parse_hhmm, update_run_window
from briefing_bot.sources.base import TranscriptSource, VideoSource
from briefing_bot.sources.market_fetcher import MarketDataFetcher
from briefing_bot.sources.settings import ChannelConfig
from briefing_bot.storage.recommendation_store import RecommendationStore

logger = logging.getLogger(__name__)


class BriefingPipeline:
    """Runs full and update briefings.

    Every item is processed on its own: a failed transcript fetch, analysis
    or store write is logged and replaced by its default, never aborting the
    batch. Only an empty market snapshot or the failure of every video source
    aborts a run with BatchFatalError.
    """

    def __init__(
        self,
        market_fetcher: MarketDataFetcher,
        video_source: VideoSource,
        channels: list[ChannelConfig],
        transcript_source: TranscriptSource,
        engine: AnalysisEngine,
        cache: ItemCache,
        store: RecommendationStore,
        delivery: DeliveryChannel,
        settings: PipelineSettings | None = None,
    ):
        self._market = market_fetcher
        self._videos = video_source
        self._channels = channels
        self._transcripts = transcript_source
        self._engine = engine
        self._cache = cache
        self._store = store
        self._delivery = delivery
        self._settings = settings or PipelineSettings()
        self._tz = ZoneInfo(self._settings.timezone)

    @property
    def timezone(self) -> ZoneInfo:
        return self._tz

    async def run_full(self, briefing_date: date | None = None) -> RunResult:
        """Run the morning briefing for a date (today in the local zone by default)."""
        briefing_date = briefing_date or datetime.now(self._tz).date()
        window = full_run_window(
            briefing_date,
            self._tz,
            start=parse_hhmm(self._settings.full_window_start),
            end=parse_hhmm(self._settings.full_window_end),
        )
        return await self._run(RunKind.FULL, briefing_date, window)

    async def run_update(self, now: datetime | None = None) -> RunResult:
        """Run an update briefing over the last few hours up to now."""
        now = (now or datetime.now(self._tz)).astimezone(self._tz)
        window = update_run_window(now, self._settings.update_window_hours)
        return await self._run(RunKind.UPDATE, now.date(), window)

    async def _run(self, kind: RunKind, briefing_date: date, window: RunWindow) -> RunResult:
        logger.info(
            f"Starting {kind.value} briefing for {briefing_date} "
            f"({window.start.isoformat()} ~ {window.end.isoformat()})"
        )
        self._cache.purge_expired()
        result = RunResult(kind=kind, window=window)

        # Step 1: Market snapshot
        market = await self._market.fetch_snapshot()
        if market.is_empty:
            raise BatchFatalError("Market data unavailable: no quote could be fetched")

        # Step 2: Items in window
        items = await self._collect_items(window)
        result.item_count = len(items)

        if not items:
            if kind == RunKind.FULL:
                logger.info(f"No items found for {briefing_date}")
                result.delivered = await self._delivery.send_no_items_notice(briefing_date)
            else:
                logger.info("No new items in update window")
            return result

        # Step 3: Per-item processing
        processed: list[ProcessedItem] = []
        for index, item in enumerate(items, start=1):
            logger.info(f"Processing item {index}/{len(items)}: {item.title}")
            entry, recorded = await self._process_item(item, market, briefing_date)
            processed.append(entry)
            result.recommendations_recorded += recorded

        # Step 4: One-line insight
        insight = await self._engine.one_line_insight(
            [(p.item, p.brief) for p in processed], market
        )

        # Step 5: Delivery
        plan = DeliveryPlan(
            kind=kind,
            briefing_date=briefing_date,
            window=window,
            market=market,
            items=processed,
            insight=insight,
        )
        report = await self._delivery.deliver(plan)
        result.delivered = report.delivered

        logger.info(
            f"{kind.value.capitalize()} briefing completed: {result.item_count} items, "
            f"{result.recommendations_recorded} recommendations recorded"
        )
        return result

    async def _collect_items(self, window: RunWindow) -> list[Item]:
        """Merge, de-duplicate and window-filter items of all channels, newest first.

        Raises:
            BatchFatalError: If every configured channel failed.
        """
        failures = 0
        seen: dict[str, Item] = {}

        for channel in self._channels:
            try:
                channel_items = await self._videos.list_items(
                    channel.channel_id, window.start, window.end
                )
            except Exception as e:
                failures += 1
                logger.warning(f"Video source {channel.name} failed: {e}")
                continue

            for item in channel_items:
                if item.id not in seen:
                    seen[item.id] = item.with_source(channel.name)

        if self._channels and failures == len(self._channels):
            raise BatchFatalError("All video sources failed")

        items = [item for item in seen.values() if window.contains(item.published_at)]
        items.sort(key=lambda i: i.published_at, reverse=True)
        logger.info(f"Found {len(items)} items in window from {len(self._channels)} channels")
        return items

    async def _process_item(
        self, item: Item, market: MarketSnapshot, briefing_date: date
    ) -> tuple[ProcessedItem, int]:
        """Fetch, cache, analyze and record one item.

        Returns:
            Tuple of (processed item, number of recommendations stored).
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.item_timeout_seconds

        transcript = await self._fetch_transcript(item, deadline)

        # Cache writes precede delivery so button callbacks always resolve
        if transcript:
            self._cache.put_transcript(item.id, transcript)
        self._cache.put_item(item, has_transcript=bool(transcript))

        brief = await self._summarize(item, transcript, market, deadline)
        recorded = await self._record(item, brief, briefing_date)

        return ProcessedItem(item=item, has_transcript=bool(transcript), brief=brief), recorded

    async def _fetch_transcript(self, item: Item, deadline: float) -> str | None:
        try:
            transcript = await asyncio.wait_for(
                self._transcripts.fetch(item.id), timeout=self._remaining(deadline)
            )
        except asyncio.TimeoutError:
            logger.warning(f"Transcript fetch timed out for {item.id}")
            return None
        except Exception as e:
            logger.warning(f"Transcript fetch failed for {item.id}: {e}")
            return None

        logger.info("Transcript fetched" if transcript else "No transcript available")
        return transcript

    async def _summarize(
        self,
        item: Item,
        transcript: str | None,
        market: MarketSnapshot,
        deadline: float,
    ) -> BriefAnalysis:
        try:
            return await asyncio.wait_for(
                self._engine.summarize(item, transcript, market),
                timeout=self._remaining(deadline),
            )
        except asyncio.TimeoutError:
            logger.warning(f"Brief analysis timed out for {item.id}")
        except Exception as e:
            logger.warning(f"Brief analysis failed for {item.id}: {e}")
        return BriefAnalysis.unavailable()

    async def _record(self, item: Item, brief: BriefAnalysis, briefing_date: date) -> int:
        recorded = 0
        for recommendation in recommendations_from_analysis(item, brief, briefing_date):
            try:
                await self._store.create(recommendation)
                recorded += 1
            except Exception as e:
                logger.error(f"Failed to record {recommendation.ticker}: {e}")

        if recorded:
            logger.info(f"Recorded recommendations: {', '.join(brief.tickers)}")
        return recorded

    def _remaining(self, deadline: float) -> float:
        return max(deadline - asyncio.get_running_loop().time(), 0.0)
