"""
Domain models for availability intervals and the metrics derived from them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidIntervalError

TOP_MEETING_WINDOWS = 5
TOP_PEAK_HOURS = 5


def _to_instant(value: Any, field_name: str) -> DateTime:
    if not isinstance(value, datetime):
        raise InvalidIntervalError(
            f"Interval {field_name} must be a datetime, got {type(value).__name__}"
        )
    return pendulum.instance(value)


@dataclass(frozen=True)
class Interval:
    """
    A participant's claimed availability span.

    The participant is identified by display name only; two intervals with the
    same name belong to the same participant. Naive datetimes are read as UTC.

    Invariant: start must be before end.
    """
    participant: str
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if not isinstance(self.participant, str) or not self.participant.strip():
            raise InvalidIntervalError("Interval participant must be a non-empty name")

        start = _to_instant(self.start, "start")
        end = _to_instant(self.end, "end")

        if end <= start:
            raise InvalidIntervalError(
                f"Interval for '{self.participant}' ends at {end} which is not after its start {start}"
            )

        object.__setattr__(self, "participant", self.participant.strip())
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    The end is exclusive. Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def to_dict(self) -> Dict[str, str]:
        return {
            "start": self.start.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
        }


@dataclass(frozen=True)
class MeetingWindow:
    """
    A run of consecutive slots during which the exact same people are available.
    """
    time_range: TimeRange
    participants: Tuple[str, ...]
    duration_minutes: int

    @property
    def count(self) -> int:
        return len(self.participants)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.time_range.to_dict(),
            "participants": list(self.participants),
            "count": self.count,
            "duration_minutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class ParticipantMetrics:
    """Availability totals for a single participant."""
    name: str
    total_minutes: int
    percentage: float
    ranges: Tuple[TimeRange, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_minutes": self.total_minutes,
            "percentage": self.percentage,
            "ranges": [time_range.to_dict() for time_range in self.ranges],
        }


@dataclass(frozen=True)
class PairwiseOverlap:
    """Shared availability between exactly two participants."""
    pair: Tuple[str, str]
    overlap_minutes: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pair": list(self.pair),
            "overlap_minutes": self.overlap_minutes,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class DayOfWeekMetric:
    day: str
    slots: int
    avg_participants: float

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, "slots": self.slots, "avg_participants": self.avg_participants}


@dataclass(frozen=True)
class PeakHourMetric:
    hour: int
    avg_participants: float
    total_slots: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hour": self.hour,
            "avg_participants": self.avg_participants,
            "total_slots": self.total_slots,
        }


def _range_dict(time_range: Optional[TimeRange]) -> Optional[Dict[str, str]]:
    return time_range.to_dict() if time_range else None


def _instant_str(value: Optional[DateTime]) -> Optional[str]:
    return value.to_iso8601_string() if value else None


@dataclass(frozen=True)
class AvailabilityMetrics:
    """
    Everything the planning views need, computed in one pass from the intervals.

    Instances are read-only. ``AvailabilityMetrics.empty()`` is the sentinel
    returned for an empty interval list.
    """
    slot_minutes: int
    total_participants: int = 0
    everyone_available: bool = False
    has_time_events: bool = False

    earliest_date: Optional[DateTime] = None
    latest_date: Optional[DateTime] = None
    earliest_range: Optional[TimeRange] = None
    latest_range: Optional[TimeRange] = None

    common_ranges: Tuple[TimeRange, ...] = ()
    longest: Optional[TimeRange] = None
    longest_duration_minutes: int = 0

    total_slots_with_coverage: int = 0
    total_calendar_slots: int = 0
    total_calendar_days: int = 0
    coverage_percentage: float = 0.0
    average_participants_per_slot: float = 0.0

    participant_metrics: Tuple[ParticipantMetrics, ...] = ()
    most_available: Optional[ParticipantMetrics] = None
    least_available: Optional[ParticipantMetrics] = None

    meeting_windows: Tuple[MeetingWindow, ...] = ()
    weekend_slots: int = 0
    weekday_slots: int = 0
    optimal_meeting_minutes: int = 0

    pairwise_overlaps: Tuple[PairwiseOverlap, ...] = ()
    heatmap: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    best_day_of_week: Optional[DayOfWeekMetric] = None
    day_of_week_breakdown: Tuple[DayOfWeekMetric, ...] = ()
    peak_hours: Tuple[PeakHourMetric, ...] = ()

    @classmethod
    def empty(cls, slot_minutes: int) -> "AvailabilityMetrics":
        """Metrics for a calendar without any intervals."""
        return cls(slot_minutes=slot_minutes)

    @property
    def is_empty(self) -> bool:
        return self.total_participants == 0

    @property
    def top_meeting_windows(self) -> Tuple[MeetingWindow, ...]:
        return self.meeting_windows[:TOP_MEETING_WINDOWS]

    @property
    def top_peak_hours(self) -> Tuple[PeakHourMetric, ...]:
        return self.peak_hours[:TOP_PEAK_HOURS]

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return {
            "slot_minutes": self.slot_minutes,
            "total_participants": self.total_participants,
            "everyone_available": self.everyone_available,
            "has_time_events": self.has_time_events,
            "earliest_date": _instant_str(self.earliest_date),
            "latest_date": _instant_str(self.latest_date),
            "earliest_range": _range_dict(self.earliest_range),
            "latest_range": _range_dict(self.latest_range),
            "common_ranges": [time_range.to_dict() for time_range in self.common_ranges],
            "longest": _range_dict(self.longest),
            "longest_duration_minutes": self.longest_duration_minutes,
            "total_slots_with_coverage": self.total_slots_with_coverage,
            "total_calendar_slots": self.total_calendar_slots,
            "total_calendar_days": self.total_calendar_days,
            "coverage_percentage": self.coverage_percentage,
            "average_participants_per_slot": self.average_participants_per_slot,
            "participant_metrics": [metric.to_dict() for metric in self.participant_metrics],
            "most_available": self.most_available.name if self.most_available else None,
            "least_available": self.least_available.name if self.least_available else None,
            "meeting_windows": [window.to_dict() for window in self.meeting_windows],
            "weekend_slots": self.weekend_slots,
            "weekday_slots": self.weekday_slots,
            "optimal_meeting_minutes": self.optimal_meeting_minutes,
            "pairwise_overlaps": [overlap.to_dict() for overlap in self.pairwise_overlaps],
            "heatmap": dict(self.heatmap),
            "best_day_of_week": self.best_day_of_week.to_dict() if self.best_day_of_week else None,
            "day_of_week_breakdown": [metric.to_dict() for metric in self.day_of_week_breakdown],
            "peak_hours": [metric.to_dict() for metric in self.peak_hours],
        }
