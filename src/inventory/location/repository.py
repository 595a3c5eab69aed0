"""Repository for the Location aggregate."""

from protean.exceptions import ObjectNotFoundError

from inventory.domain import inventory
from inventory.location.location import Location


@inventory.repository(part_of=Location)
class LocationRepository:
    def find_by_code(self, code: str) -> Location | None:
        return self._dao.query.filter(code=code).all().first

    def find(self, location_id) -> Location | None:
        """Return the location with this id, or None."""
        try:
            return self.get(str(location_id))
        except ObjectNotFoundError:
            return None

    def children_of(self, location_id) -> list[Location]:
        return self._dao.query.filter(parent_location_id=str(location_id)).all().items

    def listing(self) -> list[Location]:
        return self._dao.query.order_by("code").limit(None).all().items
