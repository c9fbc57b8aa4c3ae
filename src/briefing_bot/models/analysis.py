"""LLM analysis result models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNCLASSIFIED_SECTOR = "미분류"
NO_INFORMATION = "정보 없음"
MAX_LINES = 5


class Action(str, Enum):
    """Action verdict for an item."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    WATCH = "WATCH"


class Confidence(str, Enum):
    """Confidence of a detailed analysis."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _clean_lines(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a list of lines, got {type(value).__name__}")
    return [str(line).strip() for line in value if str(line).strip()]


class BriefAnalysis(BaseModel):
    """Lightweight per-item analysis, computed eagerly for every item."""

    model_config = ConfigDict(frozen=True)

    summary_lines: list[str] = Field(default_factory=list)
    interpretation: list[str] = Field(default_factory=list)
    investor_perspective: list[str] = Field(default_factory=list)
    sector: str = UNCLASSIFIED_SECTOR
    sector_rationale: str = ""
    tickers: list[str] = Field(default_factory=list)
    action: Action = Action.WATCH
    urgency: str = "monitoring"
    sentiment: str = "neutral"

    @field_validator("summary_lines", "interpretation", "investor_perspective", mode="before")
    @classmethod
    def limit_lines(cls, v: Any) -> list[str]:
        """Keep at most five non-empty lines."""
        return _clean_lines(v)[:MAX_LINES]

    @field_validator("tickers", mode="before")
    @classmethod
    def clean_tickers(cls, v: Any) -> list[str]:
        """Drop blanks and duplicates, preserving order."""
        seen: set[str] = set()
        tickers = []
        for ticker in _clean_lines(v):
            key = ticker.upper()
            if key not in seen:
                seen.add(key)
                tickers.append(ticker)
        return tickers

    @field_validator("action", mode="before")
    @classmethod
    def coerce_action(cls, v: Any) -> Action:
        """Unknown verdicts fall back to WATCH."""
        try:
            return Action(str(v).strip().upper())
        except ValueError:
            return Action.WATCH

    @field_validator("sector", mode="before")
    @classmethod
    def default_sector(cls, v: Any) -> str:
        """Blank sector means unclassified."""
        return str(v).strip() if v else UNCLASSIFIED_SECTOR

    @field_validator("sector_rationale", mode="before")
    @classmethod
    def coerce_rationale(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("urgency", mode="before")
    @classmethod
    def default_urgency(cls, v: Any) -> str:
        return str(v).strip().lower() if v else "monitoring"

    @field_validator("sentiment", mode="before")
    @classmethod
    def default_sentiment(cls, v: Any) -> str:
        return str(v).strip().lower() if v else "neutral"

    @property
    def is_actionable(self) -> bool:
        """True when this analysis should be recorded as a recommendation."""
        return self.action == Action.BUY and bool(self.tickers)

    @classmethod
    def unavailable(cls) -> "BriefAnalysis":
        """Fixed fallback used when the analysis cannot be produced."""
        return cls(
            summary_lines=["요약 정보를 가져올 수 없습니다."],
            interpretation=["해석 정보를 가져올 수 없습니다."],
            investor_perspective=["투자자 관점 정보를 가져올 수 없습니다."],
        )


class SixW(BaseModel):
    """Who/what/when/where/why/how narrative."""

    model_config = ConfigDict(frozen=True)

    who: str = NO_INFORMATION
    what: str = NO_INFORMATION
    when: str = NO_INFORMATION
    where: str = NO_INFORMATION
    why: str = NO_INFORMATION
    how: str = NO_INFORMATION

    @field_validator("who", "what", "when", "where", "why", "how", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return str(v) if v else NO_INFORMATION


class TradeRecommendation(BaseModel):
    """Free-text trade plan; every field may be absent."""

    model_config = ConfigDict(frozen=True)

    primary_pick: str | None = None
    entry_point: str | None = None
    target_price: str | None = None
    stop_loss: str | None = None
    position_size: str | None = None
    time_horizon: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        """The model sometimes answers with bare numbers."""
        if v is None or v == "":
            return None
        return str(v)

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class DetailedAnalysis(BaseModel):
    """Heavier analysis, computed lazily on user request."""

    model_config = ConfigDict(frozen=True)

    six_w: SixW = Field(default_factory=SixW)
    market_connection: str = "분석 정보 없음"
    trade_recommendation: TradeRecommendation = Field(default_factory=TradeRecommendation)
    opportunities: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    related_tickers: list[str] = Field(default_factory=list)
    confidence: Confidence = Confidence.LOW

    @field_validator("opportunities", "risks", "action_items", "related_tickers", mode="before")
    @classmethod
    def clean_lists(cls, v: Any) -> list[str]:
        return _clean_lines(v)

    @field_validator("six_w", "trade_recommendation", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("market_connection", mode="before")
    @classmethod
    def default_connection(cls, v: Any) -> str:
        return str(v) if v else "분석 정보 없음"

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Confidence:
        try:
            return Confidence(str(v).strip().lower())
        except ValueError:
            return Confidence.LOW

    @classmethod
    def unavailable(cls) -> "DetailedAnalysis":
        """Fixed fallback used when the analysis cannot be produced."""
        return cls()


class PickResult(BaseModel):
    """Best or worst pick of a weekly review."""

    model_config = ConfigDict(populate_by_name=True)

    ticker: str
    return_pct: str = Field(default="", alias="return")

    @field_validator("return_pct", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        return "" if v is None else str(v)


class WeeklyReview(BaseModel):
    """Weekly performance review, or an error marker."""

    total_recommendations: int | None = None
    winning_trades: int | None = None
    losing_trades: int | None = None
    win_rate: str | None = None
    total_return: str | None = None
    best_pick: PickResult | None = None
    worst_pick: PickResult | None = None
    lessons_learned: str | None = None
    next_week_outlook: str | None = None
    key_events_next_week: list[str] = Field(default_factory=list)
    error: str | None = None

    @field_validator("key_events_next_week", mode="before")
    @classmethod
    def clean_events(cls, v: Any) -> list[str]:
        return _clean_lines(v)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, message: str = "리뷰 생성 실패") -> "WeeklyReview":
        """Error marker returned instead of raising."""
        return cls(error=message)
