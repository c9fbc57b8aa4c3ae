# tests/models/test_market_models.py
"""Tests for market snapshot models."""
from datetime import datetime

from briefing_bot.models.market import (
    Direction,
    MarketSnapshot,
    QuoteSnapshot,
    hot_and_cold,
    rank_sectors,
)


def make_quote(name: str, change_percent: float, change: float | None = None) -> QuoteSnapshot:
    return QuoteSnapshot(
        name=name,
        symbol=name.upper()[:4],
        price=100.0,
        change=change_percent if change is None else change,
        change_percent=change_percent,
    )


class TestQuoteSnapshot:
    """Tests for QuoteSnapshot."""

    def test_direction_up_on_positive_change(self):
        assert make_quote("S&P 500", 0.8).direction == Direction.UP

    def test_direction_up_on_zero_change(self):
        """Zero change counts as up."""
        assert make_quote("DOW", 0.0).direction == Direction.UP

    def test_direction_down_on_negative_change(self):
        assert make_quote("NASDAQ", -1.2).direction == Direction.DOWN

    def test_direction_is_serialized(self):
        data = make_quote("VIX", -3.0).model_dump()
        assert data["direction"] == Direction.DOWN


class TestSectorRanking:
    """Tests for sector ranking and hot/cold derivation."""

    def test_ranking_example(self):
        """Six sectors rank best first; cold reads the tail worst first."""
        sectors = [
            make_quote("Util", -0.5),
            make_quote("Tech", 2.1),
            make_quote("Staples", -1.8),
            make_quote("Energy", 1.5),
            make_quote("RealEstate", -1.0),
            make_quote("Health", 0.3),
        ]

        ranked = rank_sectors(sectors)
        hot, cold = hot_and_cold(ranked)

        assert [s.name for s in ranked] == [
            "Tech", "Energy", "Health", "Util", "RealEstate", "Staples",
        ]
        assert hot == ["Tech", "Energy", "Health"]
        assert cold == ["Staples", "RealEstate", "Util"]

    def test_fewer_than_three_sectors(self):
        ranked = rank_sectors([make_quote("Tech", 1.0), make_quote("Energy", -1.0)])
        hot, cold = hot_and_cold(ranked)

        assert hot == ["Tech", "Energy"]
        assert cold == ["Energy", "Tech"]

    def test_no_sectors(self):
        assert hot_and_cold([]) == ([], [])


class TestMarketSnapshot:
    """Tests for MarketSnapshot.build."""

    def test_build_ranks_and_derives(self):
        snapshot = MarketSnapshot.build(
            indices=[make_quote("S&P 500", 0.5)],
            sectors=[make_quote("Energy", 1.5), make_quote("Tech", 2.1)],
            fetched_at=datetime(2026, 1, 28, 5, 0),
        )

        assert [s.name for s in snapshot.sectors] == ["Tech", "Energy"]
        assert snapshot.hot_sectors == ["Tech", "Energy"]
        assert snapshot.fetched_at == datetime(2026, 1, 28, 5, 0)
        assert snapshot.is_empty is False

    def test_empty_snapshot(self):
        snapshot = MarketSnapshot.build(indices=[], sectors=[])

        assert snapshot.is_empty is True
        assert snapshot.hot_sectors == []
        assert snapshot.cold_sectors == []

    def test_indices_only_is_not_empty(self):
        snapshot = MarketSnapshot.build(indices=[make_quote("DOW", 0.1)], sectors=[])
        assert snapshot.is_empty is False
