"""Fake carrier adapter: deterministic tracking for testing and development.

Configurable success/failure behavior and reported status.
"""

from datetime import UTC, datetime

from sales.carrier.port import CarrierPort, TrackingResult


class FakeCarrier(CarrierPort):
    """Fake carrier that reports the shipment in transit by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Failed to retrieve tracking information"
        self.status = "In Transit"
        self.location = "Distribution Center"
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        status: str = "In Transit",
        location: str = "Distribution Center",
        failure_reason: str = "Failed to retrieve tracking information",
    ):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.status = status
        self.location = location
        self.failure_reason = failure_reason

    def get_tracking(self, tracking_number: str, carrier: str) -> TrackingResult:
        self.calls.append({"tracking_number": tracking_number, "carrier": carrier})

        if not self.should_succeed:
            return TrackingResult(
                success=False,
                tracking_number=tracking_number,
                carrier=carrier,
                status="Error",
                error=self.failure_reason,
            )

        return TrackingResult(
            success=True,
            tracking_number=tracking_number,
            carrier=carrier,
            status=self.status,
            location=self.location,
            description=f"Package {self.status.lower()} at {self.location}",
            timestamp=datetime.now(UTC),
        )
