"""Run window computation."""

from datetime import date, datetime, time, timedelta, tzinfo

from briefing_bot.models.plan import RunWindow


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string into a time."""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def full_run_window(
    briefing_date: date,
    tz: tzinfo,
    start: time = time(23, 0),
    end: time = time(5, 30),
) -> RunWindow:
    """Window of the morning briefing: previous evening to early morning.

    Args:
        briefing_date: Day the briefing is for.
        tz: Zone both bounds are expressed in.
        start: Start time on the previous day.
        end: End time on the briefing day.

    Returns:
        RunWindow [briefing_date - 1 at start, briefing_date at end].
    """
    previous = briefing_date - timedelta(days=1)
    return RunWindow(
        start=datetime.combine(previous, start, tzinfo=tz),
        end=datetime.combine(briefing_date, end, tzinfo=tz),
    )


def update_run_window(now: datetime, hours: float = 3.0) -> RunWindow:
    """Window of an update briefing: the last `hours` hours up to now."""
    return RunWindow(start=now - timedelta(hours=hours), end=now)
