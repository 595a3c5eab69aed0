"""Location aggregate: a warehouse, zone, shelf or bin that can hold stock.

Locations form a tree through ``parent_location_id``. Shelves created from the
warehouse visualisation follow the ``R<rack>S<shelf>`` code convention.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory


class LocationType(Enum):
    WAREHOUSE = "warehouse"
    ZONE = "zone"
    SHELF = "shelf"
    BIN = "bin"


@inventory.aggregate
class Location:
    """A physical place where stock is kept."""

    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50, unique=True)
    type = String(choices=LocationType, default=LocationType.SHELF.value)
    capacity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    parent_location_id = Identifier()
    description = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, code, type=LocationType.SHELF.value, capacity=0, **details):
        now = datetime.now(UTC)
        return cls(
            name=name,
            code=code,
            type=type,
            capacity=capacity,
            created_at=now,
            updated_at=now,
            **details,
        )

    def update_details(self, **fields):
        for field_name, value in fields.items():
            setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)
