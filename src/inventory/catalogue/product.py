"""Product aggregate with per-location StockAllocation entities.

A product's ``quantity`` is its aggregate stock. ``locations`` records how much
of it sits on each storage location; an allocation exists only while its
quantity is positive, and at most one allocation exists per location.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from inventory.domain import inventory


@inventory.value_object(part_of="Product")
class Dimensions:
    """Package dimensions in centimetres."""

    length = Float(min_value=0.0)
    width = Float(min_value=0.0)
    height = Float(min_value=0.0)


@inventory.entity(part_of="Product")
class StockAllocation:
    """Quantity of a product held at one location."""

    location_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    last_updated = DateTime()


@inventory.aggregate
class Product:
    """A stocked item, its aggregate quantity and where that stock is shelved."""

    name = String(required=True, max_length=255)
    description = Text()
    sku = String(required=True, max_length=100, unique=True)
    category = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    cost = Float(min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    min_stock_level = Integer(default=5, min_value=0)
    supplier = String(max_length=255)
    barcode = String(max_length=100)
    weight = Float(min_value=0.0)
    dimensions = ValueObject(Dimensions)
    locations = HasMany(StockAllocation)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def each_location_is_allocated_once(self):
        seen = set()
        for allocation in self.locations or []:
            location_id = str(allocation.location_id)
            if location_id in seen:
                raise ValidationError({"locations": [f"Location {location_id} is allocated more than once"]})
            seen.add(location_id)

    @invariant.post
    def allocations_cannot_exceed_quantity(self):
        allocated = sum(a.quantity for a in self.locations or [])
        if allocated > (self.quantity or 0):
            raise ValidationError(
                {"locations": [f"Allocated stock ({allocated}) exceeds product quantity ({self.quantity or 0})"]}
            )

    @classmethod
    def create(
        cls,
        name,
        sku,
        category,
        price,
        quantity=0,
        allocations=None,
        dimensions=None,
        **details,
    ):
        """Create a product, optionally shelving part or all of its stock.

        ``allocations`` is an iterable of ``(location_id, quantity)`` pairs.
        """
        now = datetime.now(UTC)
        entries = [
            StockAllocation(location_id=str(location_id), quantity=qty, last_updated=now)
            for location_id, qty in (allocations or [])
        ]
        return cls(
            name=name,
            sku=sku,
            category=category,
            price=price,
            quantity=quantity,
            dimensions=Dimensions(**dimensions) if isinstance(dimensions, dict) else dimensions,
            locations=entries,
            created_at=now,
            updated_at=now,
            **details,
        )

    def allocation_map(self) -> dict[str, int]:
        """Allocations keyed by location id, in shelving order."""
        return {str(a.location_id): a.quantity for a in self.locations or []}

    def allocation_at(self, location_id) -> int:
        return self.allocation_map().get(str(location_id), 0)

    @property
    def allocated_quantity(self) -> int:
        return sum(a.quantity for a in self.locations or [])

    @property
    def available_quantity(self) -> int:
        """Stock not yet placed on any location."""
        return max(0, (self.quantity or 0) - self.allocated_quantity)

    def update_details(self, **fields):
        """Update descriptive fields. Stock levels are not editable here."""
        if "dimensions" in fields and isinstance(fields["dimensions"], dict):
            fields["dimensions"] = Dimensions(**fields["dimensions"])
        for field_name, value in fields.items():
            setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)

    def rebalance(self, allocations: dict[str, int], quantity: int, touched, at=None):
        """Replace stock levels with ``allocations`` and ``quantity``.

        Existing allocation entities are updated in place, vanished ones are
        removed and new ones appended in the order given. ``touched`` names the
        locations whose ``last_updated`` is stamped.
        """
        at = at or datetime.now(UTC)
        touched = {str(location_id) for location_id in touched}
        current = {str(a.location_id): a for a in self.locations or []}

        with atomic_change(self):
            for location_id, allocation in current.items():
                if location_id not in allocations:
                    self.remove_locations(allocation)

            for location_id, qty in allocations.items():
                allocation = current.get(location_id)
                if allocation is None:
                    self.add_locations(StockAllocation(location_id=location_id, quantity=qty, last_updated=at))
                    continue
                if allocation.quantity != qty:
                    allocation.quantity = qty
                if location_id in touched:
                    allocation.last_updated = at

            self.quantity = quantity
            self.updated_at = at
