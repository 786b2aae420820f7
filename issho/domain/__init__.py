"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import IntervalSourceError, InvalidIntervalError, IsshoError
from .metrics_calculator import MetricsCalculator, compute_availability_metrics
from .models import (
    AvailabilityMetrics,
    DayOfWeekMetric,
    Interval,
    MeetingWindow,
    PairwiseOverlap,
    ParticipantMetrics,
    PeakHourMetric,
    TimeRange,
)
from .slots import SLOT_MINUTES

__all__ = [
    "AvailabilityMetrics",
    "DayOfWeekMetric",
    "Interval",
    "IntervalSourceError",
    "InvalidIntervalError",
    "IsshoError",
    "MeetingWindow",
    "MetricsCalculator",
    "PairwiseOverlap",
    "ParticipantMetrics",
    "PeakHourMetric",
    "SLOT_MINUTES",
    "TimeRange",
    "compute_availability_metrics",
]
