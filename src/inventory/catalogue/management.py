"""Product catalog management: commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.catalogue.product import Product
from inventory.domain import inventory
from inventory.errors import InvalidReference, LocationNotFound, ProductNotFound, SkuTaken
from inventory.location.location import Location
from shared.errors import RequestRejected
from shared.identifiers import is_identifier

# Fields a catalog update may change; stock levels are not among them
_DESCRIPTIVE_FIELDS = (
    "name",
    "description",
    "sku",
    "category",
    "price",
    "cost",
    "min_stock_level",
    "supplier",
    "barcode",
    "weight",
)


@inventory.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    category = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=0)
    description = Text()
    cost = Float(min_value=0.0)
    min_stock_level = Integer(min_value=0)
    supplier = String(max_length=255)
    barcode = String(max_length=100)
    weight = Float(min_value=0.0)
    dimensions = Text()  # JSON-encoded {length, width, height}
    allocations = Text()  # JSON-encoded [{location_id, quantity}]


@inventory.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    sku = String(max_length=100)
    category = String(max_length=100)
    price = Float(min_value=0.0)
    description = Text()
    cost = Float(min_value=0.0)
    min_stock_level = Integer(min_value=0)
    supplier = String(max_length=255)
    barcode = String(max_length=100)
    weight = Float(min_value=0.0)
    dimensions = Text()  # JSON-encoded {length, width, height}


@inventory.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


def _initial_allocations(raw) -> list[tuple[str, int]]:
    entries = json.loads(raw) if raw else []
    allocations = []
    locations = current_domain.repository_for(Location)
    for entry in entries:
        location_id = entry.get("location_id")
        if not is_identifier(location_id):
            raise InvalidReference("locationId")
        if locations.find(location_id) is None:
            raise LocationNotFound()
        quantity = entry.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise RequestRejected("Allocation quantity must be a positive whole number", field="locations")
        allocations.append((location_id, quantity))
    return allocations


def check_new_product(sku: str, quantity: int, allocation_quantities) -> None:
    """Reject a new product whose SKU is taken or whose allocations exceed its stock."""
    if current_domain.repository_for(Product).find_by_sku(sku) is not None:
        raise SkuTaken(sku)
    allocated = sum(allocation_quantities)
    if allocated > quantity:
        raise RequestRejected(
            f"Allocated stock ({allocated}) exceeds product quantity ({quantity})",
            field="locations",
        )


@inventory.command_handler(part_of=Product)
class ProductCatalogHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        allocations = _initial_allocations(command.allocations)
        check_new_product(command.sku, command.quantity, [quantity for _, quantity in allocations])

        details = {
            field_name: getattr(command, field_name)
            for field_name in ("description", "cost", "min_stock_level", "supplier", "barcode", "weight")
            if getattr(command, field_name) is not None
        }
        product = Product.create(
            name=command.name,
            sku=command.sku,
            category=command.category,
            price=command.price,
            quantity=command.quantity,
            allocations=allocations,
            dimensions=json.loads(command.dimensions) if command.dimensions else None,
            **details,
        )
        repo.add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find(command.product_id)
        if product is None:
            raise ProductNotFound()

        if command.sku and command.sku != product.sku and repo.find_by_sku(command.sku) is not None:
            raise SkuTaken(command.sku)

        changes = {
            field_name: getattr(command, field_name)
            for field_name in _DESCRIPTIVE_FIELDS
            if getattr(command, field_name) is not None
        }
        if command.dimensions:
            changes["dimensions"] = json.loads(command.dimensions)
        product.update_details(**changes)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find(command.product_id)
        if product is None:
            raise ProductNotFound()
        repo._dao.delete(product)
