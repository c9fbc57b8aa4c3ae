"""Persisted recommendation model."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from briefing_bot.models.analysis import Action, BriefAnalysis, TradeRecommendation
from briefing_bot.models.item import Item
from briefing_bot.models.price_parser import parse_price


class RecommendationStatus(str, Enum):
    """Performance status derived from prices."""

    TARGET_HIT = "target_hit"
    STOPPED_OUT = "stopped_out"
    WINNING = "winning"
    LOSING = "losing"
    FLAT = "flat"
    UNKNOWN = "unknown"


class Recommendation(BaseModel):
    """A ticker recommendation recorded from a briefing.

    Attributes:
        id: Store-assigned id (YYYY-MM-DD-TICKER-NNN), None before create.
        ticker: Uppercased ticker symbol.
        action: Action verdict.
        recommended_price: Entry price parsed from the trade plan.
        current_price: Latest known price (price-refresh hook).
        target_price: Target price parsed from the trade plan.
        stop_loss: Stop price parsed from the trade plan.
        position_size: Free-text position size.
        time_horizon: Free-text horizon.
        confidence: Confidence tag.
        item_title: Title of the source item.
        briefing_date: Date of the briefing that produced it.
        note: Free-text note.
        created_at: When the record was created.
    """

    id: str | None = None
    ticker: str
    action: Action
    recommended_price: float | None = None
    current_price: float | None = None
    target_price: float | None = None
    stop_loss: float | None = None
    position_size: str | None = None
    time_horizon: str | None = None
    confidence: str = "medium"
    item_title: str = ""
    briefing_date: date
    note: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def return_percentage(self) -> float | None:
        """Return since recommendation in percent, rounded to 2 places."""
        if not self.recommended_price or self.current_price is None:
            return None
        if self.recommended_price <= 0:
            return None
        pct = (self.current_price - self.recommended_price) / self.recommended_price * 100
        return round(pct, 2)

    @property
    def target_hit(self) -> bool:
        if self.current_price is None or self.target_price is None:
            return False
        return self.current_price >= self.target_price

    @property
    def stop_loss_triggered(self) -> bool:
        if self.current_price is None or self.stop_loss is None:
            return False
        return self.current_price <= self.stop_loss

    @property
    def status(self) -> RecommendationStatus:
        if self.target_hit:
            return RecommendationStatus.TARGET_HIT
        if self.stop_loss_triggered:
            return RecommendationStatus.STOPPED_OUT

        pct = self.return_percentage
        if pct is None:
            return RecommendationStatus.UNKNOWN
        if pct > 0:
            return RecommendationStatus.WINNING
        if pct < 0:
            return RecommendationStatus.LOSING
        return RecommendationStatus.FLAT

    @property
    def return_display(self) -> str:
        pct = self.return_percentage
        if pct is None:
            return "N/A"
        return f"{'+' if pct >= 0 else ''}{pct}%"

    @property
    def summary(self) -> str:
        """One-line display summary."""
        return f"{self.ticker} ({self.action.value}) - {self.return_display}"


def recommendations_from_analysis(
    item: Item,
    analysis: BriefAnalysis,
    briefing_date: date,
    trade: TradeRecommendation | None = None,
    confidence: str = "medium",
) -> list[Recommendation]:
    """Derive one recommendation per ticker from an actionable analysis.

    Args:
        item: Source item the analysis belongs to.
        analysis: Brief analysis of the item.
        briefing_date: Date of the briefing.
        trade: Optional trade plan whose free-text prices are parsed.
        confidence: Confidence tag to record.

    Returns:
        Empty list unless action is BUY and tickers is non-empty.
    """
    if not analysis.is_actionable:
        return []

    trade = trade or TradeRecommendation()
    note = " ".join(analysis.investor_perspective) or None

    return [
        Recommendation(
            ticker=ticker.upper(),
            action=analysis.action,
            recommended_price=parse_price(trade.entry_point),
            target_price=parse_price(trade.target_price),
            stop_loss=parse_price(trade.stop_loss),
            position_size=trade.position_size,
            time_horizon=trade.time_horizon,
            confidence=confidence,
            item_title=item.title,
            briefing_date=briefing_date,
            note=note,
        )
        for ticker in analysis.tickers
    ]
