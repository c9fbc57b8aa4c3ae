"""Data models for pipeline runs."""

from dataclasses import dataclass
from enum import Enum

from briefing_bot.models.plan import RunKind, RunWindow


@dataclass
class RunResult:
    """Outcome of one pipeline run."""

    kind: RunKind
    window: RunWindow
    item_count: int = 0
    recommendations_recorded: int = 0
    delivered: bool = False


class JobKind(Enum):
    """Kind of scheduled job."""

    FULL = "full"
    UPDATE = "update"
    WEEKLY_REVIEW = "weekly_review"


class SchedulerState(Enum):
    """State of the briefing scheduler."""

    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"
