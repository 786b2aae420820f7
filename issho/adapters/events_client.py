"""
HTTP client for the events endpoint of an Issho calendar.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from pendulum import DateTime

from ..domain.exceptions import IntervalSourceError
from ..domain.models import Interval
from .event_parsing import filter_to_window, intervals_from_events

logger = logging.getLogger(__name__)

CALENDAR_ID_PATTERN = re.compile(r"^[A-Z0-9]{8}$")
PIN_PATTERN = re.compile(r"^\d{6}$")


class EventsApiClient:
    """
    Client for a shared calendar's availability events.

    Uses ``GET /api/calendar/{id}/events`` with the calendar PIN as bearer
    token. The response is a JSON list of events ordered by start time.
    """

    def __init__(
        self,
        base_url: str,
        calendar_id: str,
        pin: str,
        timeout: float = 30,
        timezone: str = "UTC",
    ):
        """
        Initialize the events client.

        Args:
            base_url: Root URL of the Issho deployment
            calendar_id: 8 character calendar ID (case-insensitive)
            pin: 6 digit calendar PIN
            timeout: Request timeout in seconds
            timezone: Zone assumed for timestamps without an offset

        Raises:
            ValueError: If the calendar ID or PIN is malformed
        """
        normalized_id = calendar_id.strip().upper()
        if not CALENDAR_ID_PATTERN.match(normalized_id):
            raise ValueError(f"Calendar ID must be 8 letters or digits, got '{calendar_id}'")
        if not PIN_PATTERN.match(pin.strip()):
            raise ValueError("PIN must be 6 digits")

        self.base_url = base_url.rstrip("/")
        self.calendar_id = normalized_id
        self.timeout = timeout
        self.timezone = timezone
        self.headers = {
            "Authorization": f"Bearer {pin.strip()}",
            "Accept": "application/json",
        }

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/api/calendar/{self.calendar_id}/events"

    def fetch_events(self) -> List[Dict[str, Any]]:
        """
        Fetch the raw event payload.

        Raises:
            IntervalSourceError: If the request fails or the body is not a list
        """
        logger.info("Fetching events for calendar %s", self.calendar_id)

        try:
            response = requests.get(self.events_url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise IntervalSourceError(f"Failed to fetch events for calendar {self.calendar_id}: {e}") from e

        if not response.ok:
            raise IntervalSourceError(
                f"Events request for calendar {self.calendar_id} failed "
                f"({response.status_code}): {self._error_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise IntervalSourceError(f"Events response is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise IntervalSourceError("Events response must be a JSON list")

        logger.debug("Received %d events for calendar %s", len(data), self.calendar_id)
        return data

    def get_intervals(
        self,
        start: Optional[DateTime] = None,
        end: Optional[DateTime] = None,
    ) -> List[Interval]:
        """Fetch events and convert them to intervals, optionally limited to ``[start, end)``."""
        intervals = intervals_from_events(self.fetch_events(), self.timezone)
        return filter_to_window(intervals, start, end)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the server's ``error`` field over the raw status text."""
        try:
            body = response.json()
        except ValueError:
            return response.reason or "unknown error"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.reason or "unknown error"
