"""
Discretization of availability intervals into fixed-width time slots.

A slot is a half-open window of ``slot_minutes`` aligned to wall-clock
boundaries (``:00, :15, :30, :45`` for the default width). Slots are identified
by their start instant; every other part of the engine works on these starts.
"""

from datetime import tzinfo
from typing import List, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidIntervalError

SLOT_MINUTES = 15
MINUTES_PER_DAY = 24 * 60


def validate_slot_minutes(slot_minutes: int) -> int:
    """Ensure the slot width is positive and divides a day evenly."""
    if isinstance(slot_minutes, bool) or not isinstance(slot_minutes, int):
        raise ValueError(f"slot_minutes must be an integer, got {slot_minutes!r}")
    if slot_minutes <= 0 or MINUTES_PER_DAY % slot_minutes:
        raise ValueError(
            f"slot_minutes must be a positive divisor of {MINUTES_PER_DAY}, got {slot_minutes}"
        )
    return slot_minutes


def floor_to_slot(moment: DateTime, slot_minutes: int = SLOT_MINUTES) -> DateTime:
    """
    Snap a moment down to the start of the slot containing it.

    Seconds and sub-seconds are truncated, then the minute of day is floored
    to a multiple of ``slot_minutes``. Applying it to a slot start is a no-op.
    """
    minute_of_day = moment.hour * 60 + moment.minute
    floored = (minute_of_day // slot_minutes) * slot_minutes
    return moment.set(hour=floored // 60, minute=floored % 60, second=0, microsecond=0)


def next_slot(slot: DateTime, slot_minutes: int = SLOT_MINUTES) -> DateTime:
    """Return the start of the slot immediately after ``slot``."""
    if slot_minutes % MINUTES_PER_DAY == 0:
        # Whole-day slots step by calendar day so DST shifts keep midnight alignment.
        return slot.add(days=slot_minutes // MINUTES_PER_DAY)
    return slot.add(minutes=slot_minutes)


def is_consecutive_slot(previous: DateTime, current: DateTime, slot_minutes: int = SLOT_MINUTES) -> bool:
    """Slot ``current`` continues ``previous`` iff it starts exactly one slot later."""
    return next_slot(previous, slot_minutes) == current


def generate_slots(start: DateTime, end: DateTime, slot_minutes: int = SLOT_MINUTES) -> List[DateTime]:
    """
    Return the ordered slot starts covering ``[start, end)``.

    The first slot starts at or before ``start``; the sequence stops strictly
    before ``end``. An interval shorter than one slot yields only the slot
    that contains its start, even if it crosses a slot boundary.

    Raises:
        InvalidIntervalError: If ``end`` is not after ``start``
    """
    if end <= start:
        raise InvalidIntervalError(f"Cannot discretize interval ending at {end} before its start {start}")

    current = floor_to_slot(start, slot_minutes)
    if (end - start).total_seconds() < slot_minutes * 60:
        return [current]

    slots: List[DateTime] = []
    while current < end:
        slots.append(current)
        current = next_slot(current, slot_minutes)

    return slots


def slot_key(slot: DateTime) -> str:
    """Serialise a slot start as an ISO 8601 string including its UTC offset."""
    return slot.to_iso8601_string()


def parse_slot_key(key: str, tz: Union[str, tzinfo, None] = None) -> DateTime:
    """
    Parse a key produced by ``slot_key`` back into the same instant.

    Raises:
        ValueError: If the key is not an ISO 8601 datetime
    """
    parsed = pendulum.parse(key)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Not a slot key: {key!r}")
    if tz is not None:
        return parsed.in_timezone(tz)
    return parsed


def is_all_day(start: DateTime, end: DateTime) -> bool:
    """Check whether a span starts and ends exactly on midnight boundaries."""
    def at_midnight(moment: DateTime) -> bool:
        return moment.hour == 0 and moment.minute == 0 and moment.second == 0 and moment.microsecond == 0

    return at_midnight(start) and at_midnight(end) and end > start
