"""Location registry: commands and handler for maintaining locations."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.catalogue.product import Product
from inventory.domain import inventory
from inventory.errors import InvalidReference, LocationCodeTaken, LocationInUse, LocationNotFound
from inventory.location.location import Location
from shared.errors import NotFound, RequestRejected
from shared.identifiers import is_identifier


@inventory.command(part_of="Location")
class CreateLocation:
    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    location_type = String(required=True, max_length=20)
    capacity = Integer(required=True, min_value=0)
    is_active = Boolean(default=True)
    parent_location_id = String(max_length=50)
    description = Text()


@inventory.command(part_of="Location")
class UpdateLocation:
    location_id = Identifier(required=True)
    name = String(max_length=255)
    code = String(max_length=50)
    location_type = String(max_length=20)
    capacity = Integer(min_value=0)
    is_active = Boolean()
    parent_location_id = String(max_length=50)
    description = Text()


@inventory.command(part_of="Location")
class RemoveLocation:
    location_id = Identifier(required=True)


def _check_parent(repo, parent_location_id, location_id=None):
    if not parent_location_id:
        return
    if not is_identifier(parent_location_id):
        raise InvalidReference("parentLocationId")
    if location_id is not None and str(parent_location_id) == str(location_id):
        raise RequestRejected("A location cannot be its own parent", field="parentLocationId")
    if repo.find(parent_location_id) is None:
        raise NotFound("Parent location not found", field="parentLocationId")


@inventory.command_handler(part_of=Location)
class LocationRegistryHandler:
    @handle(CreateLocation)
    def create_location(self, command):
        repo = current_domain.repository_for(Location)
        if repo.find_by_code(command.code) is not None:
            raise LocationCodeTaken(command.code)
        _check_parent(repo, command.parent_location_id)

        location = Location.create(
            name=command.name,
            code=command.code,
            type=command.location_type,
            capacity=command.capacity,
            is_active=command.is_active if command.is_active is not None else True,
            parent_location_id=command.parent_location_id or None,
            description=command.description,
        )
        repo.add(location)
        return str(location.id)

    @handle(UpdateLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Location)
        location = repo.find(command.location_id)
        if location is None:
            raise LocationNotFound()

        if command.code and command.code != location.code:
            if repo.find_by_code(command.code) is not None:
                raise LocationCodeTaken(command.code)
        _check_parent(repo, command.parent_location_id, location_id=location.id)

        changes = {
            field_name: getattr(command, field_name)
            for field_name in ("name", "code", "capacity", "is_active", "parent_location_id", "description")
            if getattr(command, field_name) is not None
        }
        if command.location_type:
            changes["type"] = command.location_type
        location.update_details(**changes)
        repo.add(location)

    @handle(RemoveLocation)
    def remove_location(self, command):
        repo = current_domain.repository_for(Location)
        location = repo.find(command.location_id)
        if location is None:
            raise LocationNotFound()

        if current_domain.repository_for(Product).stocked_at(location.id):
            raise LocationInUse("Cannot delete a location that still holds stock")
        if repo.children_of(location.id):
            raise LocationInUse("Cannot delete a location that has child locations")

        repo._dao.delete(location)
