"""Recording stock movements: command, handler and entry point.

The handler loads the product and the referenced locations, applies the
movement and writes the product and its ledger entry in the same unit of work.
A failure inside that unit of work leaves neither write behind.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.catalogue.product import Product
from inventory.domain import inventory
from inventory.errors import DestinationNotFound, LocationNotFound, ProductNotFound
from inventory.location.location import Location
from inventory.movement.engine import MovementRequest, apply_movement, parse_movement_request
from inventory.movement.movement import StockMovement
from shared.errors import RequestRejected, TransactionFailed

logger = structlog.get_logger(__name__)


@inventory.command(part_of="StockMovement")
class RecordStockMovement:
    """Apply a validated movement to a product and append it to the ledger."""

    product_id = Identifier(required=True)
    location_id = Identifier(required=True)
    movement_type = String(required=True, max_length=20)
    quantity = Integer(required=True, min_value=0)
    reason = Text(required=True)
    reference = String(max_length=255)
    destination_location_id = Identifier()
    user_id = String(required=True, max_length=255)


@inventory.command_handler(part_of=StockMovement)
class StockMovementHandler:
    @handle(RecordStockMovement)
    def record_stock_movement(self, command):
        request = MovementRequest(
            product_id=str(command.product_id),
            location_id=str(command.location_id),
            movement_type=command.movement_type,
            quantity=command.quantity,
            reason=command.reason,
            user_id=command.user_id,
            reference=command.reference,
            destination_location_id=str(command.destination_location_id) if command.destination_location_id else None,
        )

        products = current_domain.repository_for(Product)
        locations = current_domain.repository_for(Location)

        product = products.find(request.product_id)
        if product is None:
            raise ProductNotFound()
        if locations.find(request.location_id) is None:
            raise LocationNotFound()
        if request.is_transfer and locations.find(request.destination_location_id) is None:
            raise DestinationNotFound()

        outcome = apply_movement(product.allocation_map(), product.quantity, request)

        now = datetime.now(UTC)
        product.rebalance(outcome.allocations, outcome.quantity, outcome.touched, at=now)
        products.add(product)

        movement = StockMovement(
            product_id=request.product_id,
            location_id=request.location_id,
            movement_type=request.movement_type,
            quantity=request.quantity,
            previous_quantity=outcome.previous_quantity,
            new_quantity=outcome.new_quantity,
            reason=request.reason,
            reference=request.reference,
            destination_location_id=request.destination_location_id,
            user_id=request.user_id,
            created_at=now,
        )
        current_domain.repository_for(StockMovement).add(movement)

        logger.info(
            "Stock movement recorded",
            movement_id=str(movement.id),
            product_id=request.product_id,
            movement_type=request.movement_type,
            quantity=request.quantity,
            product_quantity=product.quantity,
        )
        return movement, product


def record_stock_movement(payload: dict, actor) -> tuple[StockMovement, Product]:
    """Validate a raw movement request from ``actor`` and record it.

    Rejections propagate unchanged. Any other failure is logged and surfaced
    as ``TransactionFailed``.
    """
    try:
        request = parse_movement_request(payload, actor.user_id)
        return current_domain.process(
            RecordStockMovement(
                product_id=request.product_id,
                location_id=request.location_id,
                movement_type=request.movement_type,
                quantity=request.quantity,
                reason=request.reason,
                reference=request.reference,
                destination_location_id=request.destination_location_id,
                user_id=request.user_id,
            ),
            asynchronous=False,
        )
    except RequestRejected as exc:
        logger.info(
            "Stock movement rejected",
            product_id=payload.get("productId"),
            movement_type=payload.get("movementType"),
            reason=exc.message,
        )
        raise
    except Exception as exc:
        logger.error(
            "Stock movement transaction failed",
            product_id=payload.get("productId"),
            movement_type=payload.get("movementType"),
            exc_info=True,
        )
        raise TransactionFailed() from exc
