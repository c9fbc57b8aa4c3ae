"""Asyncio scheduler for briefing and weekly review jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta, tzinfo
from functools import partial
from typing import TypeVar

from briefing_bot.delivery.base import DeliveryChannel
from briefing_bot.delivery.formatter import BriefingFormatter
from briefing_bot.models.plan import RunKind
from briefing_bot.pipeline.briefing_pipeline import BriefingPipeline
from briefing_bot.pipeline.models import JobKind, RunResult, SchedulerState
from briefing_bot.pipeline.settings import SchedulerSettings
from briefing_bot.pipeline.weekly_review import WeeklyReviewJob
from briefing_bot.pipeline.windows import parse_hhmm

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_delay(attempt: int, base_delay: float) -> float:
    """Polynomially growing delay after the given failed attempt (1-based)."""
    return attempt**4 + base_delay


async def run_with_retry(
    job: Callable[[], Awaitable[T]],
    attempts: int = 3,
    base_delay: float = 3.0,
    on_failure: Callable[[Exception], Awaitable[object]] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    name: str = "job",
) -> T | None:
    """Run a job, retrying top-level failures with polynomial backoff.

    Args:
        job: Zero-argument coroutine factory, called once per attempt.
        attempts: Total attempts before giving up.
        base_delay: Constant part of the backoff delay.
        on_failure: Awaited with the last error once all attempts failed.
        sleep: Async sleep, injectable for tests.
        name: Job name used in log lines.

    Returns:
        The job's result, or None when every attempt failed.
    """
    for attempt in range(1, attempts + 1):
        try:
            return await job()
        except Exception as e:
            if attempt >= attempts:
                logger.error(f"{name} failed after {attempts} attempts: {e}")
                if on_failure is not None:
                    try:
                        await on_failure(e)
                    except Exception as notify_error:
                        logger.error(f"Failed to send failure notice for {name}: {notify_error}")
                return None

            delay = retry_delay(attempt, base_delay)
            logger.warning(
                f"{name} failed (attempt {attempt}/{attempts}): {e}. Retrying in {delay:.0f}s"
            )
            await sleep(delay)
    return None


def _slots_for_day(
    settings: SchedulerSettings, day: date, tz: tzinfo | None
) -> list[tuple[datetime, JobKind]]:
    slots = [(datetime.combine(day, parse_hhmm(settings.full_run_time), tzinfo=tz), JobKind.FULL)]
    for hour in settings.update_hours:
        slots.append((datetime(day.year, day.month, day.day, hour, tzinfo=tz), JobKind.UPDATE))
    if day.weekday() == settings.weekly_review_weekday:
        slots.append(
            (
                datetime.combine(day, parse_hhmm(settings.weekly_review_time), tzinfo=tz),
                JobKind.WEEKLY_REVIEW,
            )
        )
    return slots


def jobs_due_between(
    settings: SchedulerSettings, start: datetime, end: datetime
) -> list[tuple[datetime, JobKind]]:
    """List the jobs scheduled in (start, end], in time order.

    Both bounds must be in the scheduler's local zone.
    """
    due = []
    day = start.date()
    while day <= end.date():
        for when, kind in _slots_for_day(settings, day, end.tzinfo):
            if start < when <= end:
                due.append((when, kind))
        day += timedelta(days=1)
    return sorted(due, key=lambda slot: slot[0])


class BriefingScheduler:
    """Fires full, update and weekly review jobs at their local times.

    Jobs run one after another inside a single background task. Briefing
    runs are wrapped in run_with_retry and end with a failure notice to the
    chat when every attempt fails.
    """

    def __init__(
        self,
        pipeline: BriefingPipeline,
        weekly_review: WeeklyReviewJob,
        delivery: DeliveryChannel,
        settings: SchedulerSettings | None = None,
        formatter: BriefingFormatter | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._pipeline = pipeline
        self._weekly_review = weekly_review
        self._delivery = delivery
        self._settings = settings or SchedulerSettings()
        self._formatter = formatter or BriefingFormatter()
        self._clock = clock or (lambda: datetime.now(pipeline.timezone))
        self._sleep = sleep

        self._state = SchedulerState.STOPPED
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    async def start(self) -> None:
        """Start the scheduling loop."""
        if self._state != SchedulerState.STOPPED:
            raise RuntimeError("Scheduler already running")

        if not self._settings.enabled:
            logger.info("Scheduler disabled")
            return

        self._state = SchedulerState.RUNNING
        self._task = asyncio.create_task(self._run_loop(), name="briefing_scheduler")
        logger.info(
            f"Scheduler started: full at {self._settings.full_run_time}, "
            f"updates at {self._settings.update_hours}, weekly review on weekday "
            f"{self._settings.weekly_review_weekday} at {self._settings.weekly_review_time}"
        )

    async def stop(self) -> None:
        """Stop the scheduling loop."""
        if self._state == SchedulerState.STOPPED:
            return

        self._state = SchedulerState.STOPPING
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._state = SchedulerState.STOPPED
        logger.info("Scheduler stopped")

    async def run_job(self, kind: JobKind) -> RunResult | bool | None:
        """Run one job now.

        Returns:
            RunResult for briefing runs (None when all attempts failed), the
            sent flag for the weekly review.
        """
        if kind == JobKind.WEEKLY_REVIEW:
            return await self._weekly_review.run()

        if kind == JobKind.FULL:
            briefing_date = self._clock().date()
            job = partial(self._pipeline.run_full, briefing_date)
            run_kind = RunKind.FULL
        else:
            now = self._clock()
            job = partial(self._pipeline.run_update, now)
            run_kind = RunKind.UPDATE

        async def notify(error: Exception) -> None:
            await self._delivery.send_message(self._formatter.format_failure(run_kind, error))

        return await run_with_retry(
            job,
            attempts=self._settings.max_attempts,
            base_delay=self._settings.retry_base_delay_seconds,
            on_failure=notify,
            sleep=self._sleep,
            name=f"{run_kind.value} briefing",
        )

    async def _run_loop(self) -> None:
        last_tick = self._clock()
        try:
            while self._state == SchedulerState.RUNNING:
                await self._sleep(self._settings.poll_interval_seconds)
                now = self._clock()
                for when, kind in jobs_due_between(self._settings, last_tick, now):
                    logger.info(f"Running scheduled {kind.value} job for {when:%Y-%m-%d %H:%M}")
                    try:
                        await self.run_job(kind)
                    except Exception as e:
                        logger.error(f"Scheduled {kind.value} job crashed: {e}")
                last_tick = now
        except asyncio.CancelledError:
            pass
