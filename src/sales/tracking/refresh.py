"""Refreshing shipment tracking from the order's carrier.

A successful lookup is stored as a TrackingUpdate. A delivered shipment marks
the order delivered; an in-transit style status moves a pending order to
shipped.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from sales.carrier import get_carrier
from sales.domain import sales
from sales.order.order import Order, OrderStatus
from sales.tracking.tracking import TrackingUpdate
from shared.errors import NotFound, RequestRejected, UpstreamUnavailable

logger = structlog.get_logger(__name__)

_IN_TRANSIT_MARKERS = ("in transit", "shipped", "picked up", "accepted")


@sales.command(part_of="TrackingUpdate")
class RefreshTracking:
    order_id = Identifier(required=True)


def _next_order_status(order: Order, carrier_status: str) -> str | None:
    status = carrier_status.lower()
    if status == OrderStatus.DELIVERED.value:
        return OrderStatus.DELIVERED.value if order.status != OrderStatus.DELIVERED.value else None
    if order.status == OrderStatus.PENDING.value and any(marker in status for marker in _IN_TRANSIT_MARKERS):
        return OrderStatus.SHIPPED.value
    return None


@sales.command_handler(part_of=TrackingUpdate)
class TrackingHandler:
    @handle(RefreshTracking)
    def refresh_tracking(self, command):
        orders = current_domain.repository_for(Order)
        order = orders.find(command.order_id)
        if order is None:
            raise NotFound("Order not found", field="orderId")
        if not order.is_trackable:
            raise RequestRejected("Order does not have tracking information", field="orderId")

        result = get_carrier().get_tracking(order.tracking_number, order.carrier)
        if not result.success:
            logger.warning(
                "Carrier tracking lookup failed",
                order_id=str(order.id),
                carrier=order.carrier,
                error=result.error,
            )
            raise UpstreamUnavailable(result.error or "Failed to retrieve tracking information", field="carrier")

        now = datetime.now(UTC)
        update = TrackingUpdate(
            order_id=str(order.id),
            tracking_number=result.tracking_number,
            carrier=result.carrier,
            status=result.status,
            location=result.location,
            description=result.description,
            timestamp=result.timestamp or now,
            created_at=now,
        )
        current_domain.repository_for(TrackingUpdate).add(update)

        next_status = _next_order_status(order, result.status)
        if next_status:
            order.change_status(next_status)
            orders.add(order)
            logger.info("Order status updated from tracking", order_id=str(order.id), status=next_status)

        return update
