"""Delivery plan models shared by the pipeline and the delivery channel."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from briefing_bot.models.analysis import BriefAnalysis
from briefing_bot.models.item import Item
from briefing_bot.models.market import MarketSnapshot


class RunKind(Enum):
    """Kind of pipeline run."""

    FULL = "full"
    UPDATE = "update"


@dataclass(frozen=True)
class RunWindow:
    """Closed publish-time interval [start, end] of a pipeline run."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def label(self) -> str:
        """HH:MM ~ HH:MM in the window's own zone."""
        return f"{self.start:%H:%M} ~ {self.end:%H:%M}"


@dataclass(frozen=True)
class ProcessedItem:
    """An item together with its brief analysis."""

    item: Item
    has_transcript: bool
    brief: BriefAnalysis


@dataclass
class DeliveryPlan:
    """Everything the delivery channel needs to render one run.

    Attributes:
        kind: Full or update run.
        briefing_date: Date shown in headers.
        window: Publish-time window of the run.
        market: Market snapshot fetched at the start of the run.
        items: Processed items, newest first.
        insight: One-line takeaway over the whole batch.
    """

    kind: RunKind
    briefing_date: date
    window: RunWindow
    market: MarketSnapshot
    items: list[ProcessedItem] = field(default_factory=list)
    insight: str = ""
