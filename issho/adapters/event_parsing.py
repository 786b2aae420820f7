"""
Conversion of raw calendar events (JSON/YAML payloads) into domain intervals.

Events use the host application's shape: ``title`` names the participant,
``start``/``end`` are ISO 8601 strings or epoch milliseconds. Any malformed
event fails the whole batch; nothing is skipped.
"""

import math
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import InvalidIntervalError
from ..domain.models import Interval

PARTICIPANT_KEYS = ("title", "participant")
MAX_PARTICIPANT_LENGTH = 128


def parse_instant(value: Any, timezone: str = "UTC") -> DateTime:
    """
    Parse a timestamp into an aware pendulum DateTime.

    Args:
        value: ISO 8601 string, epoch milliseconds, or datetime
        timezone: Zone assumed for strings and datetimes without an offset

    Raises:
        InvalidIntervalError: If the value is non-finite, of the wrong type or unparseable
    """
    if isinstance(value, bool):
        raise InvalidIntervalError(f"Timestamp must not be a boolean: {value!r}")

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidIntervalError(f"Timestamp is not finite: {value!r}")
        try:
            return pendulum.from_timestamp(value / 1000, tz="UTC")
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidIntervalError(f"Timestamp out of range: {value!r}") from exc

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pendulum.instance(value, tz=timezone)
        return pendulum.instance(value)

    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value, tz=timezone)
        except ValueError as exc:
            raise InvalidIntervalError(f"Could not parse timestamp {value!r}: {exc}") from exc
        if isinstance(parsed, DateTime):
            return parsed
        raise InvalidIntervalError(f"Timestamp {value!r} is not a date and time")

    raise InvalidIntervalError(f"Unsupported timestamp type {type(value).__name__}: {value!r}")


def interval_from_mapping(event: Mapping[str, Any], timezone: str = "UTC") -> Interval:
    """
    Build an Interval from one raw event.

    Raises:
        InvalidIntervalError: If the participant, start or end is missing or invalid
    """
    if not isinstance(event, Mapping):
        raise InvalidIntervalError(f"Event must be a mapping, got {type(event).__name__}")

    participant = next((event[key] for key in PARTICIPANT_KEYS if event.get(key)), None)
    if not isinstance(participant, str) or not participant.strip():
        raise InvalidIntervalError(f"Event has no participant name: {dict(event)!r}")
    if len(participant.strip()) > MAX_PARTICIPANT_LENGTH:
        raise InvalidIntervalError(
            f"Participant name must be {MAX_PARTICIPANT_LENGTH} characters or less"
        )

    for key in ("start", "end"):
        if event.get(key) is None:
            raise InvalidIntervalError(f"Event for '{participant}' is missing '{key}'")

    return Interval(
        participant=participant,
        start=parse_instant(event["start"], timezone),
        end=parse_instant(event["end"], timezone),
    )


def intervals_from_events(events: Iterable[Mapping[str, Any]], timezone: str = "UTC") -> List[Interval]:
    """Convert every event, failing on the first invalid one with its position."""
    intervals: List[Interval] = []
    for position, event in enumerate(events):
        try:
            intervals.append(interval_from_mapping(event, timezone))
        except InvalidIntervalError as exc:
            raise InvalidIntervalError(f"Event {position}: {exc}") from exc
    return intervals


def filter_to_window(
    intervals: Iterable[Interval],
    start: Optional[DateTime] = None,
    end: Optional[DateTime] = None,
) -> List[Interval]:
    """Keep intervals that overlap ``[start, end)``; open bounds match everything."""
    return [
        interval for interval in intervals
        if (end is None or interval.start < end) and (start is None or interval.end > start)
    ]
