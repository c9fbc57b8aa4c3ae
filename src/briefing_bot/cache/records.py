"""Cache record types and key helpers."""

from dataclasses import dataclass

from briefing_bot.models.analysis import DetailedAnalysis
from briefing_bot.models.item import Item


def item_key(item_id: str) -> str:
    return f"item:{item_id}"


def transcript_key(item_id: str) -> str:
    return f"transcript:{item_id}"


def detail_key(item_id: str) -> str:
    return f"detail:{item_id}"


@dataclass(frozen=True)
class ItemRecord:
    """An item seen during a pipeline run."""

    item: Item
    has_transcript: bool


@dataclass(frozen=True)
class TranscriptRecord:
    """Transcript text kept for later detail requests."""

    text: str


@dataclass(frozen=True)
class DetailRecord:
    """Memoized detailed analysis."""

    analysis: DetailedAnalysis
