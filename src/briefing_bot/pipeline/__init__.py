"""Briefing runs, weekly review and scheduling."""

from briefing_bot.pipeline.briefing_pipeline import BriefingPipeline
from briefing_bot.pipeline.models import JobKind, RunResult, SchedulerState
from briefing_bot.pipeline.scheduler import BriefingScheduler, jobs_due_between, run_with_retry
from briefing_bot.pipeline.settings import PipelineSettings, SchedulerSettings, WeeklyReviewSettings
from briefing_bot.pipeline.weekly_review import WeeklyReviewJob
from briefing_bot.pipeline.windows import full_run_window, update_run_window

__all__ = [
    "BriefingPipeline",
    "BriefingScheduler",
    "JobKind",
    "PipelineSettings",
    "RunResult",
    "SchedulerSettings",
    "SchedulerState",
    "WeeklyReviewJob",
    "WeeklyReviewSettings",
    "full_run_window",
    "jobs_due_between",
    "run_with_retry",
    "update_run_window",
]
