"""
Application service for computing availability metrics.

The service fetches intervals through an interval source adapter and delegates
the aggregation to the domain-level ``MetricsCalculator``. This keeps the CLI
thin and lets tests swap the source for a simple stub.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from pendulum import DateTime

from ..domain.metrics_calculator import MetricsCalculator
from ..domain.models import AvailabilityMetrics, Interval

logger = logging.getLogger(__name__)


class IntervalSourceProtocol(Protocol):
    """Protocol describing the interval source behaviour needed by the service."""

    def get_intervals(
        self,
        start: Optional[DateTime] = None,
        end: Optional[DateTime] = None,
    ) -> List[Interval]:
        """Return every availability interval, optionally limited to a window."""


class AvailabilityService:
    """
    Orchestrates interval retrieval and metrics calculation.

    Metrics are recomputed wholesale whenever the interval set changes; the
    result for the most recent interval set is memoized so repeated renders of
    unchanged data do not recompute.
    """

    def __init__(
        self,
        interval_source: IntervalSourceProtocol,
        calculator: MetricsCalculator,
    ) -> None:
        self._interval_source = interval_source
        self._calculator = calculator
        self._cached_key: Optional[Tuple[Interval, ...]] = None
        self._cached_metrics: Optional[AvailabilityMetrics] = None

    def fetch_intervals(
        self,
        *,
        start: Optional[DateTime] = None,
        end: Optional[DateTime] = None,
    ) -> List[Interval]:
        """Fetch intervals from the configured source."""
        return list(self._interval_source.get_intervals(start=start, end=end))

    def compute_metrics(self, intervals: Sequence[Interval]) -> AvailabilityMetrics:
        """Return metrics for ``intervals``, reusing the last result if the input is unchanged."""
        key = tuple(intervals)

        if self._cached_metrics is not None and key == self._cached_key:
            logger.debug("Interval set unchanged, reusing cached metrics")
            return self._cached_metrics

        metrics = self._calculator.calculate(key)
        self._cached_key = key
        self._cached_metrics = metrics
        return metrics

    def refresh(
        self,
        *,
        start: Optional[DateTime] = None,
        end: Optional[DateTime] = None,
    ) -> AvailabilityMetrics:
        """Fetch the current intervals and compute their metrics."""
        intervals = self.fetch_intervals(start=start, end=end)
        return self.compute_metrics(intervals)
