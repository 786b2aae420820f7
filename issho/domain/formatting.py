"""
Human readable renderings of durations, ranges and hours.

The display settings (12h/24h clock) are always passed in by the caller.
"""

from typing import Literal, Tuple

from pendulum import DateTime

from .models import AvailabilityMetrics, TimeRange
from .slots import MINUTES_PER_DAY

TimeFormat = Literal["12h", "24h"]

_CLOCK_FORMATS = {"24h": "HH:mm", "12h": "h:mm A"}


def validate_time_format(time_format: str) -> TimeFormat:
    """Return ``time_format`` unchanged if it names a known clock style."""
    if time_format not in _CLOCK_FORMATS:
        raise ValueError(f"time_format must be '12h' or '24h', got {time_format!r}")
    return time_format


def clock_format(time_format: TimeFormat) -> str:
    """Return the pendulum format token for the clock style."""
    return _CLOCK_FORMATS[validate_time_format(time_format)]


def format_duration(minutes: int) -> str:
    """
    Format a duration in minutes.

    Whole days render as "N day(s)"; anything else as "Nd H hr(s) M min".
    """
    if minutes <= 0:
        return "0 min"

    days = minutes // MINUTES_PER_DAY
    hours = (minutes % MINUTES_PER_DAY) // 60
    remaining_minutes = minutes % 60

    if hours == 0 and remaining_minutes == 0 and days > 0:
        return f"{days} day{'s' if days != 1 else ''}"

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours} hr{'s' if hours != 1 else ''}")
    if remaining_minutes > 0:
        parts.append(f"{remaining_minutes} min")
    return " ".join(parts)


def format_hour_label(hour: int, time_format: TimeFormat) -> str:
    """Label an hour of day, e.g. "09:00" (24h) or "9AM" (12h)."""
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    if validate_time_format(time_format) == "24h":
        return f"{hour:02d}:00"
    period = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}{period}"


def format_instant(moment: DateTime, time_format: TimeFormat, with_time: bool = True) -> str:
    if not with_time:
        return moment.format("MMM D, YYYY")
    return moment.format(f"MMM D, YYYY {clock_format(time_format)}")


def _starts_at_midnight(moment: DateTime) -> bool:
    return moment.hour == 0 and moment.minute == 0


def format_range(time_range: TimeRange, time_format: TimeFormat) -> str:
    """
    Format a range, showing times only when it does not cover whole days.

    Whole-day ranges show their last day inclusively:
    Jan 1 00:00 - Jan 3 00:00 -> "Jan 1 - Jan 2, 2024"
    """
    start, end = time_range.start, time_range.end
    clock = clock_format(time_format)

    if _starts_at_midnight(start) and _starts_at_midnight(end):
        last_day = end.subtract(days=1)
        if start.to_date_string() == last_day.to_date_string():
            return start.format("MMM D, YYYY")
        return f"{start.format('MMM D')} - {last_day.format('MMM D, YYYY')}"

    if start.to_date_string() == end.to_date_string():
        return f"{start.format(f'MMM D, {clock}')} - {end.format(clock)}"
    return f"{start.format(f'MMM D, {clock}')} - {end.format(f'MMM D, YYYY {clock}')}"


def coverage_counts(metrics: AvailabilityMetrics) -> Tuple[int, int, str]:
    """
    Return ``(covered, total, unit)`` for the coverage display.

    Calendars made only of all-day entries are counted in calendar dates,
    so a 23 or 25 hour DST day still counts once.
    """
    if metrics.has_time_events:
        return metrics.total_slots_with_coverage, metrics.total_calendar_slots, "slots"
    return len(metrics.heatmap), metrics.total_calendar_days, "days"
