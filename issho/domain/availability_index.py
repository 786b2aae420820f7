"""
Builds the slot -> participants index that every metric is derived from.
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Sequence, Set, Tuple, Union

from pendulum import DateTime

from .models import Interval, TimeRange
from .slots import SLOT_MINUTES, generate_slots, is_all_day, validate_slot_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityIndex:
    """
    Sparse slot index for one snapshot of intervals.

    ``slots`` maps each occupied slot start to the participants available in
    it and is ordered chronologically. A slot is present iff at least one
    participant covers it. ``participants`` is sorted by name so rankings built
    on top of the index break ties deterministically.
    """
    slot_minutes: int
    slots: Mapping[DateTime, FrozenSet[str]]
    participant_slots: Mapping[str, FrozenSet[DateTime]]
    participant_ranges: Mapping[str, Tuple[TimeRange, ...]]
    participants: Tuple[str, ...]
    has_time_events: bool
    earliest_start: DateTime
    latest_end: DateTime

    @property
    def slot_starts(self) -> Tuple[DateTime, ...]:
        return tuple(self.slots)

    @property
    def total_participants(self) -> int:
        return len(self.participants)

    def max_participant_count(self) -> int:
        return max((len(present) for present in self.slots.values()), default=0)


def build_availability_index(
    intervals: Sequence[Interval],
    slot_minutes: int = SLOT_MINUTES,
    timezone: Union[str, tzinfo] = "UTC",
) -> AvailabilityIndex:
    """
    Discretize every interval and union its slots into the global and
    per-participant indices.

    Work is proportional to the number of slots produced; intervals are never
    compared with each other.

    Args:
        intervals: Non-empty sequence of validated intervals
        slot_minutes: Slot width in minutes
        timezone: Zone whose wall clock defines slot boundaries and midnights

    Raises:
        ValueError: If ``intervals`` is empty
    """
    validate_slot_minutes(slot_minutes)
    if not intervals:
        raise ValueError("Cannot build an availability index without intervals")

    slot_map: Dict[DateTime, Set[str]] = {}
    participant_slots: Dict[str, Set[DateTime]] = {}
    participant_ranges: Dict[str, List[TimeRange]] = {}
    all_day_only = True
    earliest_start = None
    latest_end = None

    for interval in intervals:
        start = interval.start.in_timezone(timezone)
        end = interval.end.in_timezone(timezone)
        name = interval.participant

        if not is_all_day(start, end):
            all_day_only = False

        if earliest_start is None or start < earliest_start:
            earliest_start = start
        if latest_end is None or end > latest_end:
            latest_end = end

        own_slots = participant_slots.setdefault(name, set())
        participant_ranges.setdefault(name, []).append(TimeRange(start=start, end=end))

        for slot in generate_slots(start, end, slot_minutes):
            slot_map.setdefault(slot, set()).add(name)
            own_slots.add(slot)

    participants = tuple(sorted(participant_slots))

    logger.debug(
        "Indexed %d intervals into %d slots for %d participants",
        len(intervals), len(slot_map), len(participants),
    )

    return AvailabilityIndex(
        slot_minutes=slot_minutes,
        slots=MappingProxyType({slot: frozenset(slot_map[slot]) for slot in sorted(slot_map)}),
        participant_slots=MappingProxyType(
            {name: frozenset(participant_slots[name]) for name in participants}
        ),
        participant_ranges=MappingProxyType(
            {
                name: tuple(sorted(participant_ranges[name], key=lambda r: (r.start, r.end)))
                for name in participants
            }
        ),
        participants=participants,
        has_time_events=not all_day_only,
        earliest_start=earliest_start,
        latest_end=latest_end,
    )
