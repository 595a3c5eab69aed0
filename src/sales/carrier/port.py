"""Carrier port: abstract interface for shipment tracking integrations.

Adapters are swapped via configuration; the tracking refresh programs
against this interface only.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TrackingResult:
    """Latest known state of a shipment as reported by a carrier."""

    success: bool
    tracking_number: str
    carrier: str
    status: str = "unknown"
    location: str | None = None
    description: str | None = None
    timestamp: datetime | None = None
    error: str | None = None


class CarrierPort(ABC):
    @abstractmethod
    def get_tracking(self, tracking_number: str, carrier: str) -> TrackingResult:
        """Look up the current status of a shipment."""
        ...
