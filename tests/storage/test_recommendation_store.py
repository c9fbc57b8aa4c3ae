# tests/storage/test_recommendation_store.py
"""Tests for RecommendationStore."""
import json
from datetime import date, datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from briefing_bot.models.analysis import Action
from briefing_bot.models.recommendation import Recommendation
from briefing_bot.storage.recommendation_store import RecommendationStore, StorageSettings


def make_recommendation(
    ticker: str = "NVDA",
    action: Action = Action.BUY,
    briefing_date: date = date(2026, 1, 26),
    created_at: datetime | None = None,
    **overrides,
) -> Recommendation:
    """Create a Recommendation for testing."""
    return Recommendation(
        ticker=ticker,
        action=action,
        briefing_date=briefing_date,
        item_title="Nvidia earnings preview",
        created_at=created_at or datetime(2026, 1, 26, 5, 40),
        **overrides,
    )


@pytest.fixture
def store(tmp_path):
    return RecommendationStore(StorageSettings(data_dir=str(tmp_path / "recs")))


class TestRecommendationStoreCreate:
    """Tests for create."""

    def test_init_creates_directory(self, tmp_path):
        RecommendationStore(StorageSettings(data_dir=str(tmp_path / "a" / "b")))
        assert (tmp_path / "a" / "b").is_dir()

    @pytest.mark.asyncio
    async def test_create_assigns_sequential_ids(self, store):
        first = await store.create(make_recommendation("NVDA"))
        second = await store.create(make_recommendation("GM"))

        assert first == "2026-01-26-NVDA-001"
        assert second == "2026-01-26-GM-002"

    @pytest.mark.asyncio
    async def test_create_writes_daily_json_file(self, store, tmp_path):
        await store.create(make_recommendation(recommended_price=140.5, note="AI 수요"))

        file_path = tmp_path / "recs" / "2026-01-26.json"
        data = json.loads(file_path.read_text(encoding="utf-8"))

        assert len(data) == 1
        assert data[0]["id"] == "2026-01-26-NVDA-001"
        assert data[0]["ticker"] == "NVDA"
        assert data[0]["action"] == "BUY"
        assert data[0]["recommended_price"] == 140.5
        assert data[0]["briefing_date"] == "2026-01-26"
        assert "AI 수요" in file_path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_ids_restart_per_day(self, store):
        await store.create(make_recommendation(briefing_date=date(2026, 1, 26)))
        rec_id = await store.create(make_recommendation(briefing_date=date(2026, 1, 27)))

        assert rec_id == "2026-01-27-NVDA-001"


class TestRecommendationStoreQuery:
    """Tests for query and recent."""

    @pytest.mark.asyncio
    async def test_query_range_newest_first(self, store):
        await store.create(make_recommendation("A", briefing_date=date(2026, 1, 20)))
        await store.create(make_recommendation("B", briefing_date=date(2026, 1, 22)))
        await store.create(make_recommendation("C", briefing_date=date(2026, 1, 25)))

        results = await store.query(date(2026, 1, 21), date(2026, 1, 25))

        assert [r.ticker for r in results] == ["C", "B"]
        assert results[0].id == "2026-01-25-C-001"

    @pytest.mark.asyncio
    async def test_query_oldest_first(self, store):
        await store.create(make_recommendation("A", briefing_date=date(2026, 1, 20)))
        await store.create(make_recommendation("B", briefing_date=date(2026, 1, 22)))

        results = await store.query(date(2026, 1, 1), date(2026, 1, 31), newest_first=False)

        assert [r.ticker for r in results] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_query_same_day_orders_by_created_at(self, store):
        await store.create(make_recommendation("EARLY", created_at=datetime(2026, 1, 26, 5, 0)))
        await store.create(make_recommendation("LATE", created_at=datetime(2026, 1, 26, 9, 0)))

        results = await store.query(date(2026, 1, 26), date(2026, 1, 26))

        assert [r.ticker for r in results] == ["LATE", "EARLY"]

    @pytest.mark.asyncio
    async def test_query_filters_action(self, store):
        await store.create(make_recommendation("BUYME"))
        await store.create(make_recommendation("WATCHME", action=Action.WATCH))

        results = await store.query(date(2026, 1, 26), date(2026, 1, 26), action=Action.BUY)

        assert [r.ticker for r in results] == ["BUYME"]

    @pytest.mark.asyncio
    async def test_query_empty(self, store):
        assert await store.query(date(2026, 1, 1), date(2026, 1, 7)) == []

    @pytest.mark.asyncio
    async def test_recent_with_limit(self, store):
        for day in (20, 24, 26):
            await store.create(make_recommendation(f"T{day}", briefing_date=date(2026, 1, day)))

        results = await store.recent(days=7, limit=2, today=date(2026, 1, 27))

        assert [r.ticker for r in results] == ["T26", "T24"]

    @pytest.mark.asyncio
    async def test_recent_excludes_older_days(self, store):
        await store.create(make_recommendation("OLD", briefing_date=date(2026, 1, 10)))
        await store.create(make_recommendation("NEW", briefing_date=date(2026, 1, 26)))

        results = await store.recent(days=7, today=date(2026, 1, 27))

        assert [r.ticker for r in results] == ["NEW"]

    @pytest.mark.asyncio
    async def test_recent_uses_configured_zone_for_today(self, tmp_path):
        store = RecommendationStore(StorageSettings(data_dir=str(tmp_path / "recs")), timezone="Asia/Seoul")
        await store.create(make_recommendation("SEOUL", briefing_date=date(2026, 1, 28)))
        # 16:00 UTC on the 27th is already 01:00 on the 28th in Seoul
        utc_now = datetime(2026, 1, 27, 16, 0, tzinfo=timezone.utc)

        with patch("briefing_bot.storage.recommendation_store.datetime") as mock_datetime:
            mock_datetime.now.side_effect = lambda tz: utc_now.astimezone(tz)

            results = await store.recent(days=1)

        assert [r.ticker for r in results] == ["SEOUL"]
        assert mock_datetime.now.call_args.args[0] == ZoneInfo("Asia/Seoul")


class TestRecommendationStoreUpdatePrice:
    """Tests for update_current_price."""

    @pytest.mark.asyncio
    async def test_update_existing(self, store):
        rec_id = await store.create(make_recommendation(recommended_price=100.0))

        assert await store.update_current_price(rec_id, 110.0) is True

        [rec] = await store.query(date(2026, 1, 26), date(2026, 1, 26))
        assert rec.current_price == 110.0
        assert rec.return_percentage == 10.0

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        await store.create(make_recommendation())
        assert await store.update_current_price("2026-01-26-NVDA-009", 1.0) is False
