"""
Tests for range and meeting window extraction.
"""

import pendulum

from issho.domain.availability_index import build_availability_index
from issho.domain.models import Interval, TimeRange
from issho.domain.ranges import (
    build_meeting_windows,
    common_ranges,
    group_consecutive_slots,
    longest_range,
    max_participation_ranges,
    max_participation_slots,
    rank_meeting_windows,
)
from issho.domain.slots import generate_slots


def _dt(value: str):
    return pendulum.parse(value, tz="UTC")


def _interval(name: str, start: str, end: str) -> Interval:
    return Interval(participant=name, start=_dt(start), end=_dt(end))


class TestGroupConsecutiveSlots:
    """Tests for the shared grouping primitive."""

    def test_groups_runs(self):
        """Test that gaps split ranges and ends are exclusive."""
        slots = [
            _dt("2024-01-01 09:00"),
            _dt("2024-01-01 09:15"),
            _dt("2024-01-01 09:30"),
            _dt("2024-01-01 11:00"),
        ]

        ranges = group_consecutive_slots(slots, 15)

        assert ranges == [
            TimeRange(start=_dt("2024-01-01 09:00"), end=_dt("2024-01-01 09:45")),
            TimeRange(start=_dt("2024-01-01 11:00"), end=_dt("2024-01-01 11:15")),
        ]

    def test_single_slot(self):
        """Test a lone slot becomes a one-slot range."""
        ranges = group_consecutive_slots([_dt("2024-01-01 09:00")], 15)

        assert ranges == [TimeRange(start=_dt("2024-01-01 09:00"), end=_dt("2024-01-01 09:15"))]

    def test_empty(self):
        """Test no slots gives no ranges."""
        assert group_consecutive_slots([], 15) == []


class TestParticipationRanges:
    """Tests for max-participation and common ranges."""

    def test_common_range_of_two_overlapping_participants(self):
        """Test the overlap of 09:00-10:00 and 09:30-10:30."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 10:00"),
            _interval("Bob", "2024-01-01 09:30", "2024-01-01 10:30"),
        ])

        ranges = common_ranges(index)

        assert ranges == [TimeRange(start=_dt("2024-01-01 09:30"), end=_dt("2024-01-01 10:00"))]
        assert longest_range(ranges).duration_minutes() == 30

    def test_no_common_range_when_disjoint(self):
        """Test that disjoint availability has no common range."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 10:00"),
            _interval("Bob", "2024-01-01 11:00", "2024-01-01 12:00"),
        ])

        assert common_ranges(index) == []
        assert longest_range([]) is None

    def test_max_participation_includes_all_ties(self):
        """Test that every run at the maximum count is reported."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 12:00"),
            _interval("Bob", "2024-01-01 09:00", "2024-01-01 09:30"),
            _interval("Carol", "2024-01-01 11:00", "2024-01-01 11:15"),
        ])

        ranges = max_participation_ranges(index)
        slots = max_participation_slots(index)

        assert ranges == [
            TimeRange(start=_dt("2024-01-01 09:00"), end=_dt("2024-01-01 09:30")),
            TimeRange(start=_dt("2024-01-01 11:00"), end=_dt("2024-01-01 11:15")),
        ]
        assert slots[0] == _dt("2024-01-01 09:00")
        assert slots[-1] == _dt("2024-01-01 11:00")

    def test_longest_range_prefers_first_on_tie(self):
        """Test the stable tie-break for equally long ranges."""
        first = TimeRange(start=_dt("2024-01-01 09:00"), end=_dt("2024-01-01 10:00"))
        second = TimeRange(start=_dt("2024-01-02 09:00"), end=_dt("2024-01-02 10:00"))
        shorter = TimeRange(start=_dt("2024-01-03 09:00"), end=_dt("2024-01-03 09:15"))

        assert longest_range([first, second, shorter]) is first


class TestMeetingWindows:
    """Tests for meeting window partitioning and ranking."""

    def test_windows_split_on_participant_change(self):
        """Test that a change in the participant set closes a window."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 10:00"),
            _interval("Bob", "2024-01-01 09:30", "2024-01-01 10:30"),
        ])

        windows = build_meeting_windows(index)

        assert [(w.participants, w.duration_minutes) for w in windows] == [
            (("Alice",), 30),
            (("Alice", "Bob"), 30),
            (("Bob",), 30),
        ]
        assert windows[1].time_range == TimeRange(
            start=_dt("2024-01-01 09:30"), end=_dt("2024-01-01 10:00")
        )

    def test_windows_split_on_gap(self):
        """Test that a time gap closes a window even with the same people."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 09:30"),
            _interval("Alice", "2024-01-01 10:00", "2024-01-01 10:30"),
        ])

        windows = build_meeting_windows(index)

        assert len(windows) == 2
        assert all(w.participants == ("Alice",) for w in windows)

    def test_same_size_different_people_is_new_window(self):
        """Test that windows compare exact sets, not just counts."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 09:00", "2024-01-01 09:30"),
            _interval("Bob", "2024-01-01 09:30", "2024-01-01 10:00"),
        ])

        windows = build_meeting_windows(index)

        assert [w.participants for w in windows] == [("Alice",), ("Bob",)]

    def test_windows_partition_occupied_slots(self):
        """Test that every occupied slot lies in exactly one window."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 08:00", "2024-01-01 12:00"),
            _interval("Bob", "2024-01-01 09:10", "2024-01-01 10:20"),
            _interval("Carol", "2024-01-01 09:45", "2024-01-01 13:00"),
            _interval("Bob", "2024-01-02 14:00", "2024-01-02 15:00"),
        ])

        windows = build_meeting_windows(index)

        covered = []
        for window in windows:
            covered.extend(generate_slots(window.time_range.start, window.time_range.end))

        assert covered == list(index.slot_starts)
        assert sum(w.duration_minutes for w in windows) == len(index.slots) * 15
        for earlier, later in zip(windows, windows[1:]):
            assert earlier.time_range.end <= later.time_range.start

    def test_ranking_by_count_then_duration(self):
        """Test window ordering with stable ties."""
        index = build_availability_index([
            _interval("Alice", "2024-01-01 08:00", "2024-01-01 12:00"),
            _interval("Bob", "2024-01-01 09:00", "2024-01-01 09:30"),
            _interval("Bob", "2024-01-01 10:00", "2024-01-01 11:00"),
        ])

        ranked = rank_meeting_windows(build_meeting_windows(index))

        assert [(w.count, w.duration_minutes) for w in ranked] == [
            (2, 60),
            (2, 30),
            (1, 60),
            (1, 60),
            (1, 30),
        ]
        # Equal windows keep chronological order.
        assert ranked[2].time_range.start == _dt("2024-01-01 08:00")
        assert ranked[3].time_range.start == _dt("2024-01-01 11:00")
