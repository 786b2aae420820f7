"""
Core business logic for aggregating availability intervals into metrics.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from datetime import tzinfo
from typing import Sequence, Union

from .availability_index import build_availability_index
from .exceptions import InvalidIntervalError
from .models import AvailabilityMetrics, Interval
from .ranges import (
    build_meeting_windows,
    common_ranges,
    longest_range,
    max_participation_ranges,
    max_participation_slots,
    rank_meeting_windows,
)
from .slots import SLOT_MINUTES, validate_slot_minutes
from . import statistics

logger = logging.getLogger(__name__)


def validate_intervals(intervals: Sequence[Interval]) -> None:
    """
    Reject the whole input if any interval is malformed.

    Raises:
        InvalidIntervalError: On the first interval that is not an ``Interval``
            or does not end after it starts
    """
    for position, interval in enumerate(intervals):
        if not isinstance(interval, Interval):
            raise InvalidIntervalError(
                f"Item {position} is a {type(interval).__name__}, expected an Interval"
            )
        if interval.end <= interval.start:
            raise InvalidIntervalError(
                f"Item {position} for '{interval.participant}' does not end after it starts"
            )


def compute_availability_metrics(
    intervals: Sequence[Interval],
    *,
    slot_minutes: int = SLOT_MINUTES,
    timezone: Union[str, tzinfo] = "UTC",
) -> AvailabilityMetrics:
    """
    Compute every availability metric for one snapshot of intervals.

    Args:
        intervals: All intervals of the calendar, in any order
        slot_minutes: Slot width used for all overlap arithmetic
        timezone: Zone whose wall clock defines slots, days and hours

    Returns:
        AvailabilityMetrics, or ``AvailabilityMetrics.empty()`` for no intervals

    Raises:
        InvalidIntervalError: If any interval is malformed
    """
    validate_slot_minutes(slot_minutes)
    intervals = tuple(intervals)
    validate_intervals(intervals)

    if not intervals:
        return AvailabilityMetrics.empty(slot_minutes)

    index = build_availability_index(intervals, slot_minutes=slot_minutes, timezone=timezone)

    best_slots = max_participation_slots(index)
    best_ranges = max_participation_ranges(index)
    full_ranges = common_ranges(index)
    longest = longest_range(full_ranges)

    windows = rank_meeting_windows(build_meeting_windows(index))

    covered, possible, coverage_percentage = statistics.coverage(index)
    participants = statistics.participant_metrics(index)
    most_available, least_available = statistics.most_and_least_available(participants)
    weekend_slots, weekday_slots = statistics.weekend_weekday_split(index)
    breakdown = statistics.day_of_week_breakdown(index)

    metrics = AvailabilityMetrics(
        slot_minutes=slot_minutes,
        total_participants=index.total_participants,
        everyone_available=bool(full_ranges),
        has_time_events=index.has_time_events,
        earliest_date=best_slots[0] if best_slots else None,
        latest_date=best_slots[-1] if best_slots else None,
        earliest_range=best_ranges[0] if best_ranges else None,
        latest_range=best_ranges[-1] if best_ranges else None,
        common_ranges=tuple(full_ranges),
        longest=longest,
        longest_duration_minutes=longest.duration_minutes() if longest else 0,
        total_slots_with_coverage=covered,
        total_calendar_slots=possible,
        total_calendar_days=statistics.total_calendar_days(index),
        coverage_percentage=coverage_percentage,
        average_participants_per_slot=statistics.average_participants_per_slot(index),
        participant_metrics=tuple(participants),
        most_available=most_available,
        least_available=least_available,
        meeting_windows=tuple(windows),
        weekend_slots=weekend_slots,
        weekday_slots=weekday_slots,
        optimal_meeting_minutes=statistics.optimal_meeting_minutes(windows, default=slot_minutes),
        pairwise_overlaps=tuple(statistics.pairwise_overlaps(index)),
        heatmap=statistics.heatmap(index),
        best_day_of_week=statistics.best_day_of_week(breakdown),
        day_of_week_breakdown=tuple(breakdown),
        peak_hours=tuple(statistics.peak_hours(index)),
    )

    logger.debug(
        "Computed metrics for %d participants: %d covered slots, %d windows, everyone available=%s",
        metrics.total_participants, covered, len(windows), metrics.everyone_available,
    )
    return metrics


class MetricsCalculator:
    """
    Aggregates availability intervals into planning metrics.

    Algorithm:
    1. Discretize every interval into fixed-width slots
    2. Index slot -> participants and participant -> slots
    3. Collapse consecutive slots into best, common and window ranges
    4. Summarize coverage, rankings, pairwise overlap and time-of-week stats

    The calculator holds configuration only; every call recomputes from
    scratch.
    """

    def __init__(self, slot_minutes: int = SLOT_MINUTES, timezone: Union[str, tzinfo] = "UTC"):
        self.slot_minutes = validate_slot_minutes(slot_minutes)
        self.timezone = timezone

    def calculate(self, intervals: Sequence[Interval]) -> AvailabilityMetrics:
        """Compute metrics for the full interval set."""
        return compute_availability_metrics(
            intervals,
            slot_minutes=self.slot_minutes,
            timezone=self.timezone,
        )
