"""Stock movement engine: request parsing and allocation arithmetic.

Everything here is pure. ``parse_movement_request`` turns a raw request body
into a ``MovementRequest`` or raises the first rule it breaks.
``apply_movement`` computes a product's new allocations and aggregate quantity
for one movement without touching persistence.

Allocations are handled as an insertion-ordered ``{location_id: quantity}``
map. Entries never hold zero: a location whose balance reaches zero is
dropped, and new locations are appended at the end.

The amount of stock not placed on any location (``quantity - sum(allocations)``)
is never changed by a movement.
"""

import math
from dataclasses import dataclass

from inventory.errors import (
    DestinationRequired,
    InsufficientStock,
    InvalidMovementType,
    InvalidQuantity,
    InvalidReference,
    MissingField,
    SameLocationTransfer,
)
from inventory.movement.movement import MovementType
from shared.identifiers import is_identifier

REQUIRED_FIELDS = ("productId", "locationId", "movementType", "quantity", "reason")

_MOVEMENT_TYPES = {t.value for t in MovementType}


@dataclass(frozen=True)
class MovementRequest:
    product_id: str
    location_id: str
    movement_type: str
    quantity: int
    reason: str
    user_id: str
    reference: str | None = None
    destination_location_id: str | None = None

    @property
    def is_transfer(self) -> bool:
        return self.movement_type == MovementType.TRANSFER.value


@dataclass(frozen=True)
class MovementOutcome:
    allocations: dict[str, int]
    quantity: int
    previous_quantity: int
    new_quantity: int
    touched: tuple[str, ...]


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_quantity(raw, movement_type: str) -> int:
    if isinstance(raw, bool):
        raise InvalidQuantity("Quantity must be a number")

    if isinstance(raw, int):
        value = raw
    else:
        try:
            number = float(raw.strip() if isinstance(raw, str) else raw)
        except (TypeError, ValueError):
            raise InvalidQuantity("Quantity must be a number") from None
        if not math.isfinite(number):
            raise InvalidQuantity("Quantity must be a finite number")
        if not number.is_integer():
            raise InvalidQuantity("Quantity must be a whole number")
        value = int(number)

    if movement_type == MovementType.ADJUSTMENT.value:
        if value < 0:
            raise InvalidQuantity("Adjustment quantity cannot be negative")
    elif value <= 0:
        raise InvalidQuantity("Quantity must be a positive number")
    return value


def parse_movement_request(payload: dict, user_id: str) -> MovementRequest:
    """Validate a movement request body in a fixed order.

    Required fields, identifier format, movement type, quantity, then the
    transfer destination. The actor comes from the caller, never the body.
    """
    for field_name in REQUIRED_FIELDS:
        if _is_missing(payload.get(field_name)):
            raise MissingField(field_name)

    for field_name in ("productId", "locationId"):
        if not is_identifier(payload[field_name]):
            raise InvalidReference(field_name)

    movement_type = payload["movementType"]
    if not isinstance(movement_type, str) or movement_type not in _MOVEMENT_TYPES:
        raise InvalidMovementType(movement_type)

    quantity = _parse_quantity(payload["quantity"], movement_type)

    destination = None
    if movement_type == MovementType.TRANSFER.value:
        destination = payload.get("destinationLocationId")
        if _is_missing(destination):
            raise DestinationRequired()
        if not is_identifier(destination):
            raise InvalidReference("destinationLocationId")
        if destination == payload["locationId"]:
            raise SameLocationTransfer()

    reference = payload.get("reference")
    return MovementRequest(
        product_id=payload["productId"],
        location_id=payload["locationId"],
        movement_type=movement_type,
        quantity=quantity,
        reason=str(payload["reason"]).strip(),
        user_id=str(user_id),
        reference=str(reference) if not _is_missing(reference) else None,
        destination_location_id=destination,
    )


def _withdraw(allocations: dict[str, int], location_id: str, quantity: int) -> int:
    """Take ``quantity`` off a location, dropping it at zero. Returns the prior balance."""
    previous = allocations.get(location_id, 0)
    if previous < quantity:
        raise InsufficientStock(available=previous, requested=quantity)
    remaining = previous - quantity
    if remaining:
        allocations[location_id] = remaining
    else:
        del allocations[location_id]
    return previous


def apply_movement(allocations: dict[str, int], quantity: int, request: MovementRequest) -> MovementOutcome:
    """Compute the stock levels that result from one movement."""
    result = dict(allocations)
    source = request.location_id
    amount = request.quantity
    previous = result.get(source, 0)
    touched = (source,)

    if request.movement_type == MovementType.IN.value:
        new = previous + amount
        result[source] = new
        total = quantity + amount

    elif request.movement_type == MovementType.OUT.value:
        _withdraw(result, source, amount)
        new = previous - amount
        total = quantity - amount

    elif request.movement_type == MovementType.ADJUSTMENT.value:
        # Absolute set; zero clears the location
        new = amount
        if new:
            result[source] = new
        else:
            result.pop(source, None)
        total = quantity + (new - previous)

    elif request.movement_type == MovementType.TRANSFER.value:
        if not request.destination_location_id:
            raise DestinationRequired()
        destination = request.destination_location_id
        _withdraw(result, source, amount)
        result[destination] = result.get(destination, 0) + amount
        new = amount
        total = quantity
        touched = (source, destination)

    else:
        raise InvalidMovementType(request.movement_type)

    return MovementOutcome(
        allocations=result,
        quantity=total,
        previous_quantity=previous,
        new_quantity=new,
        touched=touched,
    )
