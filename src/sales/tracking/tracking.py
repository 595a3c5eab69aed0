"""TrackingUpdate aggregate: a carrier status report stored against an order."""

from protean.fields import DateTime, Identifier, String, Text

from sales.domain import sales


@sales.aggregate
class TrackingUpdate:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)
    carrier = String(required=True, max_length=100)
    status = String(required=True, max_length=100)
    location = String(max_length=255)
    description = Text()
    timestamp = DateTime(required=True)
    created_at = DateTime(required=True)


@sales.repository(part_of=TrackingUpdate)
class TrackingUpdateRepository:
    def for_order(self, order_id) -> list[TrackingUpdate]:
        return self._dao.query.filter(order_id=str(order_id)).order_by("-timestamp").limit(None).all().items

    def for_tracking_number(self, tracking_number: str) -> list[TrackingUpdate]:
        return (
            self._dao.query.filter(tracking_number=tracking_number).order_by("-timestamp").limit(None).all().items
        )
