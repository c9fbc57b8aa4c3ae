# tests/models/test_recommendation.py
"""Tests for the Recommendation model and its derivation from analyses."""
from datetime import date, datetime, timezone

import pytest

from briefing_bot.models.analysis import Action, BriefAnalysis, TradeRecommendation
from briefing_bot.models.item import Item
from briefing_bot.models.price_parser import parse_price
from briefing_bot.models.recommendation import (
    Recommendation,
    RecommendationStatus,
    recommendations_from_analysis,
)

BRIEFING_DATE = date(2026, 1, 28)


def make_item(title: str = "GM raises guidance") -> Item:
    return Item(
        id="vid123",
        title=title,
        source="CNBC",
        published_at=datetime(2026, 1, 27, 22, 0, tzinfo=timezone.utc),
        url="https://www.youtube.com/watch?v=vid123",
    )


def make_recommendation(**overrides) -> Recommendation:
    data = {
        "ticker": "GM",
        "action": Action.BUY,
        "briefing_date": BRIEFING_DATE,
    }
    data.update(overrides)
    return Recommendation(**data)


class TestRecommendationsFromAnalysis:
    """Tests for recommendations_from_analysis."""

    def test_one_uppercased_record_per_ticker(self):
        brief = BriefAnalysis(
            action="BUY",
            tickers=["gm", "F", "GM"],
            investor_perspective=["전기차 전환 수혜", "배당 매력"],
        )

        recs = recommendations_from_analysis(make_item(), brief, BRIEFING_DATE)

        assert [r.ticker for r in recs] == ["GM", "F"]
        assert all(r.action == Action.BUY for r in recs)
        assert all(r.item_title == "GM raises guidance" for r in recs)
        assert all(r.briefing_date == BRIEFING_DATE for r in recs)
        assert recs[0].note == "전기차 전환 수혜 배당 매력"
        assert recs[0].confidence == "medium"

    def test_brief_only_has_no_prices(self):
        brief = BriefAnalysis(action="BUY", tickers=["GM"])

        rec = recommendations_from_analysis(make_item(), brief, BRIEFING_DATE)[0]

        assert rec.recommended_price is None
        assert rec.target_price is None
        assert rec.stop_loss is None

    def test_trade_prices_parsed(self):
        brief = BriefAnalysis(action="BUY", tickers=["GM"])
        trade = TradeRecommendation(
            entry_point="$45.50 부근",
            target_price="52달러",
            stop_loss="손절 42",
            position_size="5%",
        )

        rec = recommendations_from_analysis(make_item(), brief, BRIEFING_DATE, trade=trade)[0]

        assert rec.recommended_price == 45.5
        assert rec.target_price == 52.0
        assert rec.stop_loss == 42.0
        assert rec.position_size == "5%"

    @pytest.mark.parametrize("action", ["SELL", "HOLD", "WATCH"])
    def test_non_buy_yields_nothing(self, action):
        brief = BriefAnalysis(action=action, tickers=["GM"])
        assert recommendations_from_analysis(make_item(), brief, BRIEFING_DATE) == []

    def test_buy_without_tickers_yields_nothing(self):
        brief = BriefAnalysis(action="BUY", tickers=[])
        assert recommendations_from_analysis(make_item(), brief, BRIEFING_DATE) == []


class TestRecommendationPerformance:
    """Tests for derived performance values."""

    def test_return_percentage(self):
        rec = make_recommendation(recommended_price=100.0, current_price=112.5)
        assert rec.return_percentage == 12.5

    def test_return_percentage_without_prices(self):
        assert make_recommendation().return_percentage is None
        assert make_recommendation(recommended_price=100.0).return_percentage is None

    def test_status_target_hit(self):
        rec = make_recommendation(recommended_price=100.0, current_price=121.0, target_price=120.0)

        assert rec.target_hit is True
        assert rec.status == RecommendationStatus.TARGET_HIT

    def test_status_stopped_out(self):
        rec = make_recommendation(recommended_price=100.0, current_price=89.0, stop_loss=90.0)

        assert rec.stop_loss_triggered is True
        assert rec.status == RecommendationStatus.STOPPED_OUT

    @pytest.mark.parametrize("current,expected", [
        (105.0, RecommendationStatus.WINNING),
        (95.0, RecommendationStatus.LOSING),
        (100.0, RecommendationStatus.FLAT),
    ])
    def test_status_by_return(self, current, expected):
        rec = make_recommendation(recommended_price=100.0, current_price=current)
        assert rec.status == expected

    def test_status_unknown_without_prices(self):
        assert make_recommendation().status == RecommendationStatus.UNKNOWN

    def test_summary(self):
        rec = make_recommendation(recommended_price=100.0, current_price=105.0)

        assert rec.return_display == "+5.0%"
        assert rec.summary == "GM (BUY) - +5.0%"
        assert make_recommendation().summary == "GM (BUY) - N/A"


class TestParsePrice:
    """Tests for the tolerant price parser."""

    @pytest.mark.parametrize("text,expected", [
        ("$135.50", 135.5),
        ("135~140 달러", 135.0),
        ("1,250.5", 1250.5),
        ("약 .5", 0.5),
        (42, 42.0),
        (12.5, 12.5),
    ])
    def test_parses(self, text, expected):
        assert parse_price(text) == expected

    @pytest.mark.parametrize("text", [None, "", "시장가", "N/A", 0, -5, True])
    def test_unparseable_returns_none(self, text):
        assert parse_price(text) is None
