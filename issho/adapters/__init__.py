"""
Adapters that load availability events from outside the domain.
"""

from .event_parsing import filter_to_window, interval_from_mapping, intervals_from_events
from .events_client import EventsApiClient
from .file_source import FileIntervalSource

__all__ = [
    "EventsApiClient",
    "FileIntervalSource",
    "filter_to_window",
    "interval_from_mapping",
    "intervals_from_events",
]
