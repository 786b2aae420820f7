"""
Collapses runs of consecutive slots into ranges and meeting windows.

All three passes share ``group_consecutive_slots`` and the single adjacency
rule from ``slots.is_consecutive_slot``.
"""

from typing import Callable, FrozenSet, List, Optional, Sequence

from pendulum import DateTime

from .availability_index import AvailabilityIndex
from .models import MeetingWindow, TimeRange
from .slots import is_consecutive_slot, next_slot


def group_consecutive_slots(slots: Sequence[DateTime], slot_minutes: int) -> List[TimeRange]:
    """
    Group chronologically sorted slot starts into maximal ranges.

    Example (15 minute slots):
    Slots: [09:00, 09:15, 09:30, 11:00]
    Result: [09:00-09:45, 11:00-11:15]
    """
    if not slots:
        return []

    ranges: List[TimeRange] = []
    range_start = slots[0]
    previous = slots[0]

    for current in slots[1:]:
        if is_consecutive_slot(previous, current, slot_minutes):
            previous = current
            continue

        ranges.append(TimeRange(start=range_start, end=next_slot(previous, slot_minutes)))
        range_start = current
        previous = current

    ranges.append(TimeRange(start=range_start, end=next_slot(previous, slot_minutes)))
    return ranges


def matching_slots(
    index: AvailabilityIndex,
    predicate: Callable[[FrozenSet[str]], bool],
) -> List[DateTime]:
    """Return the occupied slots, in order, whose participant set satisfies ``predicate``."""
    return [slot for slot, present in index.slots.items() if predicate(present)]


def max_participation_slots(index: AvailabilityIndex) -> List[DateTime]:
    """Slots whose participant count equals the highest count seen in any slot."""
    maximum = index.max_participant_count()
    return matching_slots(index, lambda present: len(present) == maximum)


def max_participation_ranges(index: AvailabilityIndex) -> List[TimeRange]:
    return group_consecutive_slots(max_participation_slots(index), index.slot_minutes)


def common_ranges(index: AvailabilityIndex) -> List[TimeRange]:
    """Ranges where every known participant is available."""
    total = index.total_participants
    slots = matching_slots(index, lambda present: len(present) == total)
    return group_consecutive_slots(slots, index.slot_minutes)


def longest_range(ranges: Sequence[TimeRange]) -> Optional[TimeRange]:
    """Return the longest range; the earliest one wins a tie."""
    longest: Optional[TimeRange] = None
    for time_range in ranges:
        if longest is None or time_range.duration_minutes() > longest.duration_minutes():
            longest = time_range
    return longest


def build_meeting_windows(index: AvailabilityIndex) -> List[MeetingWindow]:
    """
    Partition every occupied slot into windows with a constant participant set.

    A slot continues the open window iff it has exactly the same participants
    and starts one slot after the window's last slot. Any other slot closes the
    window and opens a new one. Windows are returned in chronological order.
    """
    windows: List[MeetingWindow] = []
    window_slots: List[DateTime] = []
    window_participants: FrozenSet[str] = frozenset()

    def close_window() -> None:
        windows.append(
            MeetingWindow(
                time_range=TimeRange(
                    start=window_slots[0],
                    end=next_slot(window_slots[-1], index.slot_minutes),
                ),
                participants=tuple(sorted(window_participants)),
                duration_minutes=len(window_slots) * index.slot_minutes,
            )
        )

    for slot, present in index.slots.items():
        continues = (
            window_slots
            and present == window_participants
            and is_consecutive_slot(window_slots[-1], slot, index.slot_minutes)
        )
        if continues:
            window_slots.append(slot)
            continue

        if window_slots:
            close_window()
        window_slots = [slot]
        window_participants = present

    if window_slots:
        close_window()

    return windows


def rank_meeting_windows(windows: Sequence[MeetingWindow]) -> List[MeetingWindow]:
    """Order windows by participant count, then duration, both descending."""
    return sorted(windows, key=lambda window: (-window.count, -window.duration_minutes))
