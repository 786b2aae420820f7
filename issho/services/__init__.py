"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, IntervalSourceProtocol

__all__ = ["AvailabilityService", "IntervalSourceProtocol"]
