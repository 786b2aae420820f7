"""
Interval source backed by a JSON or YAML export of calendar events.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pendulum import DateTime

from ..domain.exceptions import IntervalSourceError
from ..domain.models import Interval
from .event_parsing import filter_to_window, intervals_from_events

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class FileIntervalSource:
    """
    Loads availability events from a file.

    The file holds either a list of events or a mapping with an ``events``
    list, e.g. the body returned by the events API saved to disk:

        [{"title": "Alice", "start": "2024-01-01T09:00:00Z", "end": "..."}]
    """

    def __init__(self, path: Path, timezone: str = "UTC"):
        """
        Args:
            path: JSON (.json) or YAML (.yaml/.yml) file
            timezone: Zone assumed for timestamps without an offset
        """
        self.path = Path(path)
        self.timezone = timezone

    def _load_payload(self) -> Any:
        if not self.path.exists():
            raise IntervalSourceError(f"Events file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.suffix.lower() in YAML_SUFFIXES:
                    return yaml.safe_load(f)
                return json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise IntervalSourceError(f"Could not parse events file {self.path}: {exc}") from exc
        except OSError as exc:
            raise IntervalSourceError(f"Could not read events file {self.path}: {exc}") from exc

    def get_intervals(
        self,
        start: Optional[DateTime] = None,
        end: Optional[DateTime] = None,
    ) -> List[Interval]:
        """
        Load intervals, optionally keeping only those overlapping ``[start, end)``.

        Raises:
            IntervalSourceError: If the file is missing, unreadable or not a list of events
            InvalidIntervalError: If any event is malformed
        """
        payload = self._load_payload()

        if isinstance(payload, dict):
            payload = payload.get("events")
        if payload is None:
            payload = []
        if not isinstance(payload, list):
            raise IntervalSourceError(
                f"Events file {self.path} must contain a list of events or an 'events' list"
            )

        intervals = intervals_from_events(payload, self.timezone)
        logger.info("Loaded %d intervals from %s", len(intervals), self.path)
        return filter_to_window(intervals, start, end)
