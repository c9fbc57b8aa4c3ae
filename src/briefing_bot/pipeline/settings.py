"""Settings for pipeline runs and scheduling."""

from pydantic import BaseModel, Field, field_validator


def _check_hhmm(value: str) -> str:
    hours, _, minutes = value.partition(":")
    if not (hours.isdigit() and minutes.isdigit()):
        raise ValueError(f"Expected HH:MM, got {value!r}")
    if not (0 <= int(hours) < 24 and 0 <= int(minutes) < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return value


class PipelineSettings(BaseModel):
    """Configuration for BriefingPipeline.

    Attributes:
        timezone: Zone the run windows are computed in.
        full_window_start: Start of the full-run window on the previous day (HH:MM).
        full_window_end: End of the full-run window on the briefing day (HH:MM).
        update_window_hours: Look-back of an update run.
        item_timeout_seconds: Upper bound for processing one item.
    """

    timezone: str = "Asia/Seoul"
    full_window_start: str = "23:00"
    full_window_end: str = "05:30"
    update_window_hours: float = Field(default=3.0, gt=0, le=24)
    item_timeout_seconds: float = Field(default=180.0, gt=0)

    @field_validator("full_window_start", "full_window_end")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_hhmm(v)


class SchedulerSettings(BaseModel):
    """Configuration for BriefingScheduler.

    Attributes:
        enabled: Whether scheduled jobs run at all.
        full_run_time: Daily full briefing time (HH:MM, local).
        update_hours: Hours of the day an update briefing runs.
        weekly_review_weekday: Weekday of the weekly review (0 = Monday).
        weekly_review_time: Weekly review time (HH:MM, local).
        max_attempts: Attempts per job before a failure notice is sent.
        retry_base_delay_seconds: Base of the polynomial retry backoff.
        poll_interval_seconds: How often the loop checks for due jobs.
    """

    enabled: bool = True
    full_run_time: str = "05:30"
    update_hours: list[int] = Field(default_factory=lambda: [9, 12, 15, 18, 21])
    weekly_review_weekday: int = Field(default=5, ge=0, le=6)
    weekly_review_time: str = "09:00"
    max_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay_seconds: float = Field(default=3.0, ge=0)
    poll_interval_seconds: float = Field(default=30.0, gt=0)

    @field_validator("full_run_time", "weekly_review_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_hhmm(v)

    @field_validator("update_hours")
    @classmethod
    def validate_hours(cls, v: list[int]) -> list[int]:
        for hour in v:
            if not 0 <= hour < 24:
                raise ValueError(f"Update hour out of range: {hour}")
        return sorted(set(v))


class WeeklyReviewSettings(BaseModel):
    """Configuration for WeeklyReviewJob.

    Attributes:
        lookback_days: How many days of recommendations to review.
        refresh_prices: Refresh current prices through the quote source first.
    """

    lookback_days: int = Field(default=7, ge=1, le=31)
    refresh_prices: bool = False
