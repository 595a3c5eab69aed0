"""StockMovement aggregate: one entry of the append-only stock ledger."""

from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory


class MovementType(Enum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


@inventory.aggregate
class StockMovement:
    """A recorded change of stock at a location.

    ``previous_quantity`` and ``new_quantity`` are the source location's
    balance before and after the movement. For transfers ``new_quantity``
    holds the transferred amount instead.
    """

    product_id = Identifier(required=True)
    location_id = Identifier(required=True)
    movement_type = String(required=True, choices=MovementType)
    quantity = Integer(required=True, min_value=0)
    previous_quantity = Integer(required=True, min_value=0)
    new_quantity = Integer(required=True, min_value=0)
    reason = Text(required=True)
    reference = String(max_length=255)
    destination_location_id = Identifier()
    user_id = String(required=True, max_length=255)
    created_at = DateTime(required=True)
