"""Shelving: place unallocated stock on a location or take it back off.

Only the distribution across locations changes. The product's aggregate
quantity stays as it is and no ledger entry is written.
"""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.catalogue.product import Product
from inventory.domain import inventory
from inventory.errors import AllocationRejected, LocationNotFound, ProductNotFound
from inventory.location.location import Location

logger = structlog.get_logger(__name__)


class AllocationAction(Enum):
    ADD = "add"
    REMOVE = "remove"


@inventory.command(part_of="Product")
class AllocateStock:
    product_id = Identifier(required=True)
    location_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    action = String(required=True, choices=AllocationAction)


def reallocate(allocations: dict[str, int], quantity: int, location_id: str, amount: int, action: str) -> dict[str, int]:
    """Return the allocations after adding or removing ``amount`` at a location."""
    result = dict(allocations)
    current = result.get(location_id, 0)

    if action == AllocationAction.ADD.value:
        available = max(0, quantity - sum(result.values()))
        if available <= 0:
            raise AllocationRejected("No unallocated stock available")
        if amount > available:
            raise AllocationRejected(f"Only {available} units available to allocate")
        result[location_id] = current + amount
        return result

    if current <= 0:
        raise AllocationRejected("Product is not stored at this location")
    if amount > current:
        raise AllocationRejected(f"Only {current} units stored at this location")
    if current - amount:
        result[location_id] = current - amount
    else:
        del result[location_id]
    return result


@inventory.command_handler(part_of=Product)
class ShelvingHandler:
    @handle(AllocateStock)
    def allocate_stock(self, command):
        products = current_domain.repository_for(Product)
        product = products.find(command.product_id)
        if product is None:
            raise ProductNotFound()
        if current_domain.repository_for(Location).find(command.location_id) is None:
            raise LocationNotFound()

        location_id = str(command.location_id)
        allocations = reallocate(
            product.allocation_map(),
            product.quantity,
            location_id,
            command.quantity,
            command.action,
        )
        product.rebalance(allocations, product.quantity, [location_id], at=datetime.now(UTC))
        products.add(product)

        logger.info(
            "Stock shelved" if command.action == AllocationAction.ADD.value else "Stock unshelved",
            product_id=str(product.id),
            location_id=location_id,
            quantity=command.quantity,
        )
        return product


def allocate_to_location(product_id, location_id, quantity, action) -> Product:
    return current_domain.process(
        AllocateStock(product_id=product_id, location_id=location_id, quantity=quantity, action=action),
        asynchronous=False,
    )
