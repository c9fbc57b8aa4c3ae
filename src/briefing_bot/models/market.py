"""Market data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Direction(str, Enum):
    """Price direction of a quote."""

    UP = "up"
    DOWN = "down"


class QuoteSnapshot(BaseModel):
    """One market data point."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    price: float
    change: float
    change_percent: float

    @computed_field
    @property
    def direction(self) -> Direction:
        """UP when the change is zero or positive."""
        return Direction.UP if self.change >= 0 else Direction.DOWN


def rank_sectors(sectors: list[QuoteSnapshot]) -> list[QuoteSnapshot]:
    """Sort sectors by percent change, best performer first."""
    return sorted(sectors, key=lambda s: s.change_percent, reverse=True)


def hot_and_cold(
    ranked: list[QuoteSnapshot], count: int = 3
) -> tuple[list[str], list[str]]:
    """Derive hot and cold sector names from a ranking.

    Args:
        ranked: Sectors sorted best first.
        count: How many names to take from each end.

    Returns:
        Tuple of (hot, cold). Cold is read from the tail, worst first.
    """
    if not ranked:
        return [], []
    hot = [s.name for s in ranked[:count]]
    cold = [s.name for s in reversed(ranked[-count:])]
    return hot, cold


class MarketSnapshot(BaseModel):
    """Aggregated index and sector quotes for one point in time."""

    model_config = ConfigDict(frozen=True)

    indices: list[QuoteSnapshot] = Field(default_factory=list)
    sectors: list[QuoteSnapshot] = Field(default_factory=list)
    hot_sectors: list[str] = Field(default_factory=list)
    cold_sectors: list[str] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def build(
        cls,
        indices: list[QuoteSnapshot],
        sectors: list[QuoteSnapshot],
        fetched_at: datetime | None = None,
        hot_count: int = 3,
    ) -> "MarketSnapshot":
        """Build a snapshot, ranking sectors and deriving hot/cold names."""
        ranked = rank_sectors(sectors)
        hot, cold = hot_and_cold(ranked, hot_count)
        return cls(
            indices=indices,
            sectors=ranked,
            hot_sectors=hot,
            cold_sectors=cold,
            fetched_at=fetched_at or datetime.now(),
        )

    @property
    def is_empty(self) -> bool:
        """True when no quote at all could be fetched."""
        return not self.indices and not self.sectors
