"""On-demand detailed analysis triggered by inline button callbacks."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from briefing_bot.analysis.engine import AnalysisEngine
from briefing_bot.cache.item_cache import ItemCache
from briefing_bot.delivery.formatter import DETAIL_PREFIX, BriefingFormatter
from briefing_bot.delivery.models import CallbackEvent
from briefing_bot.delivery.telegram_channel import TelegramChannel
from briefing_bot.errors import CacheMissError
from briefing_bot.models.analysis import DetailedAnalysis
from briefing_bot.models.market import MarketSnapshot
from briefing_bot.sources.market_fetcher import MarketDataFetcher

logger = logging.getLogger(__name__)

ACK_TEXT = "상세 분석 생성 중... 잠시만 기다려주세요"
EXPIRED_TEXT = "⚠️ 비디오 정보를 찾을 수 없습니다. (24시간 후 만료)"
INTERIM_TEXT = "🔄 상세 분석을 생성하고 있습니다... (약 10초 소요)"
FAILED_TEXT = "⚠️ 상세 분석 생성에 실패했습니다. 잠시 후 다시 시도해주세요."


class DetailStatus(Enum):
    """Terminal state of one detail request."""

    IGNORED = "ignored"
    EXPIRED = "expired"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class DetailOutcome:
    """Result of handling one callback.

    Attributes:
        status: Terminal state reached.
        item_id: Item the callback referred to, if any.
        analysis: Detailed analysis shown to the user.
        from_cache: True when the analysis was memoized before this request.
        sent: True when the final message reached the chat.
    """

    status: DetailStatus
    item_id: str | None = None
    analysis: DetailedAnalysis | None = None
    from_cache: bool = False
    sent: bool = False


class CallbackHandler:
    """Resolves detail callbacks against the item cache.

    The detailed analysis of an item is computed at most once while its
    cache records live; concurrent taps on the same item wait on a per-item
    lock and then read the memoized result.
    """

    def __init__(
        self,
        cache: ItemCache,
        engine: AnalysisEngine,
        market_fetcher: MarketDataFetcher,
        channel: TelegramChannel,
        formatter: BriefingFormatter | None = None,
    ):
        self._cache = cache
        self._engine = engine
        self._market = market_fetcher
        self._channel = channel
        self._formatter = formatter or BriefingFormatter()
        self._locks: dict[str, asyncio.Lock] = {}
        # Taps holding or waiting on each lock; a lock is dropped at zero
        self._waiters: dict[str, int] = {}

    async def handle(self, event: CallbackEvent) -> DetailOutcome:
        """Handle one button tap.

        Args:
            event: Inbound callback event.

        Returns:
            DetailOutcome describing what the user was shown.
        """
        await self._channel.answer_callback(event.query_id, ACK_TEXT)

        if not event.payload.startswith(DETAIL_PREFIX):
            logger.debug(f"Ignoring callback payload {event.payload!r}")
            return DetailOutcome(status=DetailStatus.IGNORED)

        item_id = event.payload[len(DETAIL_PREFIX):]
        if self._cache.get_item(item_id) is None:
            return await self._expired(item_id, event.chat_id)

        lock = self._locks.setdefault(item_id, asyncio.Lock())
        self._waiters[item_id] = self._waiters.get(item_id, 0) + 1
        try:
            async with lock:
                return await self._resolve(item_id, event.chat_id)
        finally:
            self._waiters[item_id] -= 1
            if not self._waiters[item_id]:
                del self._waiters[item_id]
                del self._locks[item_id]

    async def _resolve(self, item_id: str, chat_id: str) -> DetailOutcome:
        analysis = self._cache.get_detail(item_id)
        if analysis is not None:
            logger.info(f"Serving cached detail for {item_id}")
            sent = await self._channel.send_message(
                self._formatter.format_detail(analysis), chat_id=chat_id
            )
            return DetailOutcome(
                status=DetailStatus.DELIVERED,
                item_id=item_id,
                analysis=analysis,
                from_cache=True,
                sent=sent,
            )

        record = self._cache.get_item(item_id)
        if record is None:
            return await self._expired(item_id, chat_id)

        await self._channel.send_message(INTERIM_TEXT, chat_id=chat_id)

        transcript = self._cache.get_transcript(item_id)
        market = await self._fetch_market()

        try:
            analysis = await self._engine.detail(record.item, transcript, market)
        except Exception as e:
            logger.error(f"Detailed analysis failed for {item_id}: {e}")
            await self._channel.send_message(FAILED_TEXT, chat_id=chat_id)
            return DetailOutcome(status=DetailStatus.FAILED, item_id=item_id)

        try:
            self._cache.put_detail(item_id, analysis)
        except CacheMissError:
            logger.warning(f"Item {item_id} expired while its detail was computed")
            return await self._expired(item_id, chat_id)

        sent = await self._channel.send_message(
            self._formatter.format_detail(analysis), chat_id=chat_id
        )
        logger.info(f"Delivered detailed analysis for {item_id}")
        return DetailOutcome(
            status=DetailStatus.DELIVERED, item_id=item_id, analysis=analysis, sent=sent
        )

    async def _expired(self, item_id: str, chat_id: str) -> DetailOutcome:
        logger.info(f"No item record for {item_id}")
        sent = await self._channel.send_message(EXPIRED_TEXT, chat_id=chat_id)
        return DetailOutcome(status=DetailStatus.EXPIRED, item_id=item_id, sent=sent)

    async def _fetch_market(self) -> MarketSnapshot | None:
        try:
            snapshot = await self._market.fetch_snapshot()
        except Exception as e:
            logger.warning(f"Market snapshot unavailable for detail analysis: {e}")
            return None
        return None if snapshot.is_empty else snapshot
