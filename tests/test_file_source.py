"""
Tests for the file-backed interval source.
"""

import json

import pendulum
import pytest

from issho.adapters.file_source import FileIntervalSource
from issho.domain.exceptions import IntervalSourceError, InvalidIntervalError

EVENTS = [
    {"title": "Alice", "start": "2024-01-01T09:00:00Z", "end": "2024-01-01T10:00:00Z"},
    {"title": "Bob", "start": "2024-01-01T09:30:00Z", "end": "2024-01-01T10:30:00Z"},
]


class TestFileIntervalSource:
    """Tests for FileIntervalSource."""

    def test_json_list(self, tmp_path):
        """Test a JSON list of events."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps(EVENTS), encoding="utf-8")

        intervals = FileIntervalSource(path).get_intervals()

        assert [i.participant for i in intervals] == ["Alice", "Bob"]

    def test_json_events_mapping(self, tmp_path):
        """Test a mapping with an events list."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"events": EVENTS}), encoding="utf-8")

        assert len(FileIntervalSource(path).get_intervals()) == 2

    def test_yaml(self, tmp_path):
        """Test a YAML file with epoch milliseconds and naive strings."""
        path = tmp_path / "events.yaml"
        path.write_text(
            "- participant: Alice\n"
            "  start: 1704099600000\n"
            "  end: 1704103200000\n"
            "- title: Bob\n"
            "  start: '2024-01-01T10:00:00'\n"
            "  end: '2024-01-01T11:00:00'\n",
            encoding="utf-8",
        )

        intervals = FileIntervalSource(path, timezone="Europe/Berlin").get_intervals()

        assert intervals[0].start == pendulum.datetime(2024, 1, 1, 9, tz="UTC")
        assert intervals[1].start == pendulum.datetime(2024, 1, 1, 9, tz="UTC")

    def test_empty_file_has_no_intervals(self, tmp_path):
        """Test an empty YAML document."""
        path = tmp_path / "events.yml"
        path.write_text("", encoding="utf-8")

        assert FileIntervalSource(path).get_intervals() == []

    def test_window_filter(self, tmp_path):
        """Test start/end limits."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps(EVENTS), encoding="utf-8")

        intervals = FileIntervalSource(path).get_intervals(
            start=pendulum.datetime(2024, 1, 1, 10, 0, tz="UTC"),
        )

        assert [i.participant for i in intervals] == ["Bob"]

    def test_missing_file(self, tmp_path):
        """Test a missing file."""
        with pytest.raises(IntervalSourceError, match="not found"):
            FileIntervalSource(tmp_path / "missing.json").get_intervals()

    def test_malformed_json(self, tmp_path):
        """Test unparseable content."""
        path = tmp_path / "events.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(IntervalSourceError, match="Could not parse"):
            FileIntervalSource(path).get_intervals()

    def test_wrong_shape(self, tmp_path):
        """Test a payload that is not a list of events."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"events": "nope"}), encoding="utf-8")

        with pytest.raises(IntervalSourceError, match="list of events"):
            FileIntervalSource(path).get_intervals()

    def test_invalid_event(self, tmp_path):
        """Test a malformed event aborts the load."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps([{"title": "Alice", "start": "2024-01-01T09:00:00Z"}]), encoding="utf-8")

        with pytest.raises(InvalidIntervalError):
            FileIntervalSource(path).get_intervals()
