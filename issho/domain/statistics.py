"""
Scalar and ranked statistics derived from the availability index.

Every function here is pure and reads only the index (and, for the modal
duration, the already extracted windows). Percentages guard their
denominators so degenerate input never yields NaN.
"""

from itertools import combinations
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .availability_index import AvailabilityIndex
from .models import (
    DayOfWeekMetric,
    MeetingWindow,
    PairwiseOverlap,
    ParticipantMetrics,
    PeakHourMetric,
)
from .slots import floor_to_slot, next_slot

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WEEKEND_DAY_INDICES = (0, 6)


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _day_index(slot) -> int:
    """Day of week with Sunday as 0, matching ``DAY_NAMES``."""
    return slot.isoweekday() % 7


def total_calendar_slots(index: AvailabilityIndex) -> int:
    """Number of grid slots from the first slot boundary up to the latest end."""
    current = floor_to_slot(index.earliest_start, index.slot_minutes)
    count = 0
    while current < index.latest_end:
        count += 1
        current = next_slot(current, index.slot_minutes)
    return count


def total_calendar_days(index: AvailabilityIndex) -> int:
    """Number of calendar dates the span from the earliest start to the latest end touches."""
    current = index.earliest_start.start_of("day")
    count = 0
    while current < index.latest_end:
        count += 1
        current = current.add(days=1)
    return count


def coverage(index: AvailabilityIndex) -> Tuple[int, int, float]:
    """Return ``(covered slots, possible slots, coverage percentage)``."""
    covered = len(index.slots)
    possible = total_calendar_slots(index)
    return covered, possible, _percentage(covered, possible)


def average_participants_per_slot(index: AvailabilityIndex) -> float:
    if not index.slots:
        return 0.0
    return sum(len(present) for present in index.slots.values()) / len(index.slots)


def participant_metrics(index: AvailabilityIndex) -> List[ParticipantMetrics]:
    """
    Per-participant totals sorted by available minutes, most available first.

    Participants are visited in name order, so equal totals keep name order.
    """
    covered = len(index.slots)
    metrics = [
        ParticipantMetrics(
            name=name,
            total_minutes=len(index.participant_slots[name]) * index.slot_minutes,
            percentage=_percentage(len(index.participant_slots[name]), covered),
            ranges=index.participant_ranges[name],
        )
        for name in index.participants
    ]
    metrics.sort(key=lambda metric: -metric.total_minutes)
    return metrics


def most_and_least_available(
    metrics: Sequence[ParticipantMetrics],
) -> Tuple[Optional[ParticipantMetrics], Optional[ParticipantMetrics]]:
    """Extremes of the ranking; the least available needs at least two participants."""
    if not metrics:
        return None, None
    least = metrics[-1] if len(metrics) >= 2 else None
    return metrics[0], least


def weekend_weekday_split(index: AvailabilityIndex) -> Tuple[int, int]:
    """Return ``(weekend slots, weekday slots)`` over the occupied slots."""
    weekend = sum(1 for slot in index.slots if _day_index(slot) in WEEKEND_DAY_INDICES)
    return weekend, len(index.slots) - weekend


def optimal_meeting_minutes(windows: Sequence[MeetingWindow], default: int) -> int:
    """
    Most frequent window duration.

    A tie goes to the duration seen first while scanning ``windows``.
    """
    frequencies: Dict[int, int] = {}
    for window in windows:
        frequencies[window.duration_minutes] = frequencies.get(window.duration_minutes, 0) + 1

    optimal = default
    best_frequency = 0
    for minutes, frequency in frequencies.items():
        if frequency > best_frequency:
            best_frequency = frequency
            optimal = minutes
    return optimal


def pairwise_overlaps(index: AvailabilityIndex) -> List[PairwiseOverlap]:
    """
    Shared availability for every unordered pair of distinct participants.

    Pairs without any shared slot are omitted. Sorted by overlap minutes,
    descending; equal overlaps keep name order.
    """
    covered = len(index.slots)
    overlaps: List[PairwiseOverlap] = []

    for first, second in combinations(index.participants, 2):
        shared = len(index.participant_slots[first] & index.participant_slots[second])
        if shared == 0:
            continue
        overlaps.append(
            PairwiseOverlap(
                pair=(first, second),
                overlap_minutes=shared * index.slot_minutes,
                percentage=_percentage(shared, covered),
            )
        )

    overlaps.sort(key=lambda overlap: -overlap.overlap_minutes)
    return overlaps


def heatmap(index: AvailabilityIndex) -> Mapping[str, int]:
    """Highest participant count seen in any slot, per calendar day (``YYYY-MM-DD``)."""
    strength: Dict[str, int] = {}
    for slot, present in index.slots.items():
        day = slot.to_date_string()
        if len(present) > strength.get(day, 0):
            strength[day] = len(present)
    return MappingProxyType(strength)


def day_of_week_breakdown(index: AvailabilityIndex) -> List[DayOfWeekMetric]:
    """Slot count and average participants for each weekday that has slots, Sunday first."""
    slot_counts = [0] * 7
    participant_totals = [0] * 7

    for slot, present in index.slots.items():
        day = _day_index(slot)
        slot_counts[day] += 1
        participant_totals[day] += len(present)

    return [
        DayOfWeekMetric(
            day=name,
            slots=slot_counts[day],
            avg_participants=participant_totals[day] / slot_counts[day],
        )
        for day, name in enumerate(DAY_NAMES)
        if slot_counts[day] > 0
    ]


def best_day_of_week(breakdown: Sequence[DayOfWeekMetric]) -> Optional[DayOfWeekMetric]:
    """Day with the highest average; the earliest in the breakdown wins a tie."""
    best: Optional[DayOfWeekMetric] = None
    for metric in breakdown:
        if best is None or metric.avg_participants > best.avg_participants:
            best = metric
    return best


def peak_hours(index: AvailabilityIndex) -> List[PeakHourMetric]:
    """
    Average participants per hour of day, best hour first.

    Empty when every interval is all-day, where the hour carries no meaning.
    """
    if not index.has_time_events:
        return []

    slot_counts = [0] * 24
    participant_totals = [0] * 24

    for slot, present in index.slots.items():
        slot_counts[slot.hour] += 1
        participant_totals[slot.hour] += len(present)

    hours = [
        PeakHourMetric(
            hour=hour,
            avg_participants=participant_totals[hour] / slot_counts[hour],
            total_slots=slot_counts[hour],
        )
        for hour in range(24)
        if slot_counts[hour] > 0
    ]
    hours.sort(key=lambda metric: -metric.avg_participants)
    return hours
