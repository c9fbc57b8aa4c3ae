# tests/callbacks/test_callback_handler.py
"""Tests for CallbackHandler."""
import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from briefing_bot.cache.item_cache import CacheSettings, ItemCache
from briefing_bot.callbacks.callback_handler import (
    ACK_TEXT,
    EXPIRED_TEXT,
    FAILED_TEXT,
    INTERIM_TEXT,
    CallbackHandler,
    DetailStatus,
)
from briefing_bot.delivery.formatter import BriefingFormatter
from briefing_bot.delivery.models import CallbackEvent
from briefing_bot.models.analysis import DetailedAnalysis
from briefing_bot.models.item import Item
from briefing_bot.models.market import MarketSnapshot, QuoteSnapshot

HOUR = 3600.0


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_item(item_id: str = "vid1") -> Item:
    return Item(
        id=item_id,
        title="GM raises guidance",
        source="CNBC",
        published_at=datetime(2026, 1, 27, 22, 0, tzinfo=timezone.utc),
        url=f"https://www.youtube.com/watch?v={item_id}",
    )


def make_event(payload: str = "detail:vid1", query_id: str = "q1") -> CallbackEvent:
    return CallbackEvent(actor_id=7, chat_id="12345", payload=payload, query_id=query_id)


def make_market(empty: bool = False) -> MarketSnapshot:
    if empty:
        return MarketSnapshot.build(indices=[], sectors=[])
    return MarketSnapshot.build(
        indices=[QuoteSnapshot(name="DOW", symbol="^DJI", price=40000.0, change=1.0, change_percent=0.1)],
        sectors=[],
    )


DETAIL = DetailedAnalysis.model_validate({"six_w": {"who": "GM"}, "confidence": "high"})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ItemCache(CacheSettings(), clock=clock)


@pytest.fixture
def engine():
    engine = MagicMock()
    engine.detail = AsyncMock(return_value=DETAIL)
    return engine


@pytest.fixture
def market_fetcher():
    fetcher = MagicMock()
    fetcher.fetch_snapshot = AsyncMock(return_value=make_market())
    return fetcher


@pytest.fixture
def channel():
    channel = MagicMock()
    channel.answer_callback = AsyncMock(return_value=True)
    channel.send_message = AsyncMock(return_value=True)
    return channel


@pytest.fixture
def handler(cache, engine, market_fetcher, channel):
    return CallbackHandler(cache, engine, market_fetcher, channel)


def sent_texts(channel) -> list[str]:
    return [call.args[0] for call in channel.send_message.call_args_list]


class TestCallbackHandler:
    """Tests for detail request resolution."""

    @pytest.mark.asyncio
    async def test_computes_and_memoizes_detail(self, handler, cache, engine, channel):
        cache.put_item(make_item(), has_transcript=True)
        cache.put_transcript("vid1", "full transcript")

        outcome = await handler.handle(make_event())

        assert outcome.status == DetailStatus.DELIVERED
        assert outcome.from_cache is False
        assert outcome.sent is True
        channel.answer_callback.assert_awaited_once_with("q1", ACK_TEXT)
        item, transcript, market = engine.detail.call_args.args
        assert item.id == "vid1"
        assert transcript == "full transcript"
        assert market.is_empty is False
        assert cache.get_detail("vid1") == DETAIL
        assert sent_texts(channel) == [INTERIM_TEXT, BriefingFormatter().format_detail(DETAIL)]
        assert channel.send_message.call_args.kwargs["chat_id"] == "12345"

    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(self, handler, cache, engine, channel):
        cache.put_item(make_item(), has_transcript=False)

        first = await handler.handle(make_event(query_id="q1"))
        second = await handler.handle(make_event(query_id="q2"))

        assert first.status == second.status == DetailStatus.DELIVERED
        assert second.from_cache is True
        assert second.analysis == first.analysis
        engine.detail.assert_awaited_once()
        assert sent_texts(channel).count(INTERIM_TEXT) == 1

    @pytest.mark.asyncio
    async def test_concurrent_requests_compute_once(self, handler, cache, engine):
        cache.put_item(make_item(), has_transcript=False)

        async def slow_detail(*args):
            await asyncio.sleep(0.01)
            return DETAIL

        engine.detail.side_effect = slow_detail

        outcomes = await asyncio.gather(
            handler.handle(make_event(query_id="q1")),
            handler.handle(make_event(query_id="q2")),
            handler.handle(make_event(query_id="q3")),
        )

        engine.detail.assert_awaited_once()
        assert all(o.status == DetailStatus.DELIVERED for o in outcomes)
        assert sorted(o.from_cache for o in outcomes) == [False, True, True]
        assert handler._locks == {}
        assert handler._waiters == {}

    @pytest.mark.asyncio
    async def test_locks_released_after_each_item(self, handler, cache, engine):
        for item_id in ("vid1", "vid2", "vid3"):
            cache.put_item(make_item(item_id), has_transcript=False)
            await handler.handle(make_event(payload=f"detail:{item_id}"))

        engine.detail.side_effect = RuntimeError("backend down")
        cache.put_item(make_item("vid4"), has_transcript=False)
        await handler.handle(make_event(payload="detail:vid4"))

        assert handler._locks == {}
        assert handler._waiters == {}

    @pytest.mark.asyncio
    async def test_expired_item(self, handler, cache, clock, engine, channel):
        cache.put_item(make_item(), has_transcript=False)
        clock.now += 25 * HOUR

        outcome = await handler.handle(make_event())

        assert outcome.status == DetailStatus.EXPIRED
        engine.detail.assert_not_called()
        assert sent_texts(channel) == [EXPIRED_TEXT]

    @pytest.mark.asyncio
    async def test_unknown_item(self, handler, engine, channel):
        outcome = await handler.handle(make_event("detail:never-seen"))

        assert outcome.status == DetailStatus.EXPIRED
        assert outcome.item_id == "never-seen"
        engine.detail.assert_not_called()

    @pytest.mark.asyncio
    async def test_item_expires_during_computation(self, handler, cache, clock, engine, channel):
        cache.put_item(make_item(), has_transcript=False)

        async def expiring_detail(*args):
            clock.now += 25 * HOUR
            return DETAIL

        engine.detail.side_effect = expiring_detail

        outcome = await handler.handle(make_event())

        assert outcome.status == DetailStatus.EXPIRED
        assert cache.get_detail("vid1") is None
        assert sent_texts(channel)[-1] == EXPIRED_TEXT

    @pytest.mark.asyncio
    async def test_engine_failure(self, handler, cache, engine, channel):
        cache.put_item(make_item(), has_transcript=False)
        engine.detail.side_effect = RuntimeError("backend down")

        outcome = await handler.handle(make_event())

        assert outcome.status == DetailStatus.FAILED
        assert cache.get_detail("vid1") is None
        assert sent_texts(channel) == [INTERIM_TEXT, FAILED_TEXT]

    @pytest.mark.asyncio
    async def test_failure_is_retried_on_next_tap(self, handler, cache, engine):
        cache.put_item(make_item(), has_transcript=False)
        engine.detail.side_effect = [RuntimeError("backend down"), DETAIL]

        await handler.handle(make_event(query_id="q1"))
        outcome = await handler.handle(make_event(query_id="q2"))

        assert outcome.status == DetailStatus.DELIVERED
        assert engine.detail.await_count == 2

    @pytest.mark.asyncio
    async def test_market_unavailable_passes_none(self, handler, cache, engine, market_fetcher):
        cache.put_item(make_item(), has_transcript=False)
        market_fetcher.fetch_snapshot.side_effect = RuntimeError("yfinance down")

        await handler.handle(make_event())

        assert engine.detail.call_args.args[2] is None

    @pytest.mark.asyncio
    async def test_empty_market_passes_none(self, handler, cache, engine, market_fetcher):
        cache.put_item(make_item(), has_transcript=False)
        market_fetcher.fetch_snapshot.return_value = make_market(empty=True)

        await handler.handle(make_event())

        assert engine.detail.call_args.args[2] is None

    @pytest.mark.asyncio
    async def test_foreign_payload_ignored(self, handler, engine, channel):
        outcome = await handler.handle(make_event("something-else"))

        assert outcome.status == DetailStatus.IGNORED
        channel.answer_callback.assert_awaited_once()
        channel.send_message.assert_not_called()
        engine.detail.assert_not_called()
