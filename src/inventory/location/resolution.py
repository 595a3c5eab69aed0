"""Find-or-create of locations by code.

Used when a shelf is picked by rack and shelf number and no Location record
exists for it yet. Creation is idempotent: a caller that loses a race on the
unique ``code`` gets the winner's location back.
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from inventory.location.location import Location, LocationType
from inventory.location.registry import CreateLocation

logger = structlog.get_logger(__name__)

SHELF_CAPACITY = 100


def shelf_code(rack, shelf) -> str:
    return f"R{rack}S{shelf}"


def shelf_defaults(rack, shelf) -> dict:
    """Defaults for a shelf location created from a rack/shelf pick."""
    return {
        "name": f"Rack {rack} Shelf {shelf}",
        "type": LocationType.SHELF.value,
        "capacity": SHELF_CAPACITY,
        "is_active": True,
        "description": f"Shelf {shelf} on Rack {rack}",
    }


def resolve_or_create_location(code: str, defaults: dict | None = None) -> tuple[Location, bool]:
    """Return ``(location, created)`` for ``code``, creating it if absent."""
    repo = current_domain.repository_for(Location)

    existing = repo.find_by_code(code)
    if existing is not None:
        return existing, False

    attributes = {"name": code, "type": LocationType.SHELF.value, "capacity": 0, "is_active": True}
    attributes.update(defaults or {})
    attributes.pop("code", None)

    try:
        location_id = current_domain.process(
            CreateLocation(
                code=code,
                name=attributes["name"],
                location_type=attributes["type"],
                capacity=attributes["capacity"],
                is_active=attributes["is_active"],
                parent_location_id=attributes.get("parent_location_id"),
                description=attributes.get("description"),
            ),
            asynchronous=False,
        )
    except ValidationError as exc:
        # Lost the race on the unique code: the other caller's location wins
        if "code" not in (exc.messages or {}):
            raise
        winner = repo.find_by_code(code)
        if winner is None:
            raise
        logger.info("Location created concurrently, using existing", code=code, location_id=str(winner.id))
        return winner, False

    logger.info("Location created", code=code, location_id=location_id)
    return repo.get(location_id), True


def resolve_shelf(rack, shelf) -> tuple[Location, bool]:
    return resolve_or_create_location(shelf_code(rack, shelf), shelf_defaults(rack, shelf))
