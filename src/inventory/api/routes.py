"""FastAPI routes for the Inventory domain: stock movements, locations and products."""

import json

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from identity.dependencies import require_actor
from identity.tokens import Actor
from inventory.allocation.shelving import allocate_to_location
from inventory.api.schemas import (
    AllocateStockRequest,
    AllocationSchema,
    CreateLocationRequest,
    CreateProductRequest,
    DimensionsSchema,
    LocationResponse,
    ProductResponse,
    ProductStockResponse,
    RecordMovementResponse,
    ResolveLocationRequest,
    ResolveLocationResponse,
    ShelfPick,
    StatusResponse,
    StockedProductResponse,
    StockMovementResponse,
    UpdateLocationRequest,
    UpdateProductRequest,
)
from inventory.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct, check_new_product
from inventory.catalogue.product import Product
from inventory.errors import InvalidReference, LocationNotFound, ProductNotFound
from inventory.location.location import Location
from inventory.location.registry import CreateLocation, RemoveLocation, UpdateLocation
from inventory.location.resolution import resolve_or_create_location, resolve_shelf, shelf_code, shelf_defaults
from inventory.movement.movement import StockMovement
from inventory.movement.recording import record_stock_movement
from shared.errors import RequestRejected
from shared.http import read_json_body
from shared.identifiers import is_identifier
from shared.logging import bind_request_context


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------
def _allocations(product: Product) -> list[AllocationSchema]:
    return [
        AllocationSchema(location_id=str(a.location_id), quantity=a.quantity, last_updated=a.last_updated)
        for a in product.locations or []
    ]


def _product_response(product: Product) -> ProductResponse:
    dimensions = product.dimensions
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        sku=product.sku,
        category=product.category,
        price=product.price,
        cost=product.cost,
        quantity=product.quantity,
        min_stock_level=product.min_stock_level,
        supplier=product.supplier,
        barcode=product.barcode,
        weight=product.weight,
        dimensions=(
            DimensionsSchema(length=dimensions.length, width=dimensions.width, height=dimensions.height)
            if dimensions
            else None
        ),
        locations=_allocations(product),
        allocated=product.allocated_quantity,
        available=product.available_quantity,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def _location_response(location: Location) -> LocationResponse:
    return LocationResponse(
        id=str(location.id),
        name=location.name,
        code=location.code,
        type=location.type,
        capacity=location.capacity,
        is_active=location.is_active,
        parent_location_id=str(location.parent_location_id) if location.parent_location_id else None,
        description=location.description,
        created_at=location.created_at,
        updated_at=location.updated_at,
    )


def _movement_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=str(movement.id),
        product_id=str(movement.product_id),
        location_id=str(movement.location_id),
        movement_type=movement.movement_type,
        quantity=movement.quantity,
        previous_quantity=movement.previous_quantity,
        new_quantity=movement.new_quantity,
        reason=movement.reason,
        reference=movement.reference,
        destination_location_id=(
            str(movement.destination_location_id) if movement.destination_location_id else None
        ),
        user_id=movement.user_id,
        created_at=movement.created_at,
    )


def _load_product(product_id: str) -> Product:
    if not is_identifier(product_id):
        raise InvalidReference("productId")
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise ProductNotFound()
    return product


def _load_location(location_id: str) -> Location:
    if not is_identifier(location_id):
        raise InvalidReference("locationId")
    location = current_domain.repository_for(Location).find(location_id)
    if location is None:
        raise LocationNotFound()
    return location


def _picked_location_id(pick: ShelfPick) -> str:
    """Location id for a pick, creating the rack/shelf location if needed."""
    if pick.location_id:
        if not is_identifier(pick.location_id):
            raise InvalidReference("locationId")
        return pick.location_id
    if pick.rack is not None and pick.shelf is not None:
        location, _ = resolve_shelf(pick.rack, pick.shelf)
        return str(location.id)
    raise RequestRejected("Either locationId or rack and shelf are required", field="locationId")


def _check_picks(picks: list[ShelfPick]) -> None:
    """Reject unusable picks without creating any location."""
    seen = set()
    for pick in picks:
        if pick.location_id:
            key = str(_load_location(pick.location_id).id)
        elif pick.rack is not None and pick.shelf is not None:
            key = shelf_code(pick.rack, pick.shelf)
        else:
            raise RequestRejected("Either locationId or rack and shelf are required", field="locationId")
        if key in seen:
            raise RequestRejected(f"Location {key} is allocated more than once", field="locations")
        seen.add(key)


# ---------------------------------------------------------------------------
# Stock Movement Router
# ---------------------------------------------------------------------------
movement_router = APIRouter(
    prefix="/stock-movements",
    tags=["stock-movements"],
    dependencies=[Depends(require_actor)],
)


@movement_router.post("", status_code=201, response_model=RecordMovementResponse)
async def create_stock_movement(request: Request, actor: Actor = Depends(require_actor)) -> RecordMovementResponse:
    payload = await read_json_body(request)
    bind_request_context(
        user_id=actor.user_id,
        product_id=payload.get("productId"),
        movement_type=payload.get("movementType"),
    )
    movement, product = record_stock_movement(payload, actor)
    return RecordMovementResponse(
        message="Stock movement recorded successfully",
        stock_movement=_movement_response(movement),
        product=ProductStockResponse(
            id=str(product.id),
            name=product.name,
            quantity=product.quantity,
            locations=_allocations(product),
        ),
    )


@movement_router.get("", response_model=list[StockMovementResponse])
async def list_stock_movements() -> list[StockMovementResponse]:
    movements = current_domain.repository_for(StockMovement).recent(limit=100)
    return [_movement_response(m) for m in movements]


# ---------------------------------------------------------------------------
# Location Router
# ---------------------------------------------------------------------------
location_router = APIRouter(
    prefix="/locations",
    tags=["locations"],
    dependencies=[Depends(require_actor)],
)


@location_router.get("", response_model=list[LocationResponse])
async def list_locations() -> list[LocationResponse]:
    return [_location_response(loc) for loc in current_domain.repository_for(Location).listing()]


@location_router.post("", status_code=201, response_model=LocationResponse)
async def create_location(body: CreateLocationRequest) -> LocationResponse:
    command = CreateLocation(
        name=body.name,
        code=body.code,
        location_type=body.type,
        capacity=body.capacity,
        is_active=body.is_active,
        parent_location_id=body.parent_location_id,
        description=body.description,
    )
    location_id = current_domain.process(command, asynchronous=False)
    return _location_response(current_domain.repository_for(Location).get(location_id))


@location_router.post("/resolve", response_model=ResolveLocationResponse)
async def resolve_location(body: ResolveLocationRequest) -> ResolveLocationResponse:
    """Find a location by code, or by rack and shelf, creating it if absent."""
    if body.code:
        code = body.code
        defaults = {}
    elif body.rack is not None and body.shelf is not None:
        code = shelf_code(body.rack, body.shelf)
        defaults = shelf_defaults(body.rack, body.shelf)
    else:
        raise RequestRejected("Either code or rack and shelf are required", field="code")

    for field_name in ("name", "capacity", "description"):
        value = getattr(body, field_name)
        if value is not None:
            defaults[field_name] = value

    location, created = resolve_or_create_location(code, defaults)
    return ResolveLocationResponse(location=_location_response(location), created=created)


@location_router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: str) -> LocationResponse:
    return _location_response(_load_location(location_id))


@location_router.get("/{location_id}/products", response_model=list[StockedProductResponse])
async def list_location_products(location_id: str) -> list[StockedProductResponse]:
    """What is shelved at a location and how much of each product."""
    location = _load_location(location_id)
    products = current_domain.repository_for(Product).stocked_at(location.id)
    return [
        StockedProductResponse(
            id=str(p.id),
            name=p.name,
            sku=p.sku,
            quantity=p.allocation_at(location.id),
        )
        for p in products
    ]


@location_router.put("/{location_id}", response_model=LocationResponse)
async def update_location(location_id: str, body: UpdateLocationRequest) -> LocationResponse:
    _load_location(location_id)
    command = UpdateLocation(
        location_id=location_id,
        name=body.name,
        code=body.code,
        location_type=body.type,
        capacity=body.capacity,
        is_active=body.is_active,
        parent_location_id=body.parent_location_id,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return _location_response(current_domain.repository_for(Location).get(location_id))


@location_router.delete("/{location_id}", response_model=StatusResponse)
async def delete_location(location_id: str) -> StatusResponse:
    _load_location(location_id)
    current_domain.process(RemoveLocation(location_id=location_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(require_actor)],
)


@product_router.get("", response_model=list[ProductResponse])
async def list_products() -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).catalog()]


@product_router.get("/search-barcode", response_model=ProductResponse)
async def search_product_by_barcode(barcode: str | None = None) -> ProductResponse:
    """Look a product up by the barcode scanned at the shelf."""
    if not barcode or not barcode.strip():
        raise RequestRejected("Barcode is required", field="barcode")
    product = current_domain.repository_for(Product).find_by_barcode(barcode.strip())
    if product is None:
        raise ProductNotFound()
    return _product_response(product)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest) -> ProductResponse:
    # Nothing is created for rack/shelf picks until the product itself would be accepted
    _check_picks(body.locations)
    check_new_product(body.sku, body.quantity, [entry.quantity for entry in body.locations])
    allocations = [
        {"location_id": _picked_location_id(entry), "quantity": entry.quantity} for entry in body.locations
    ]
    command = CreateProduct(
        name=body.name,
        sku=body.sku,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
        description=body.description,
        cost=body.cost,
        min_stock_level=body.min_stock_level,
        supplier=body.supplier,
        barcode=body.barcode,
        weight=body.weight,
        dimensions=json.dumps(body.dimensions.model_dump()) if body.dimensions else None,
        allocations=json.dumps(allocations),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(_load_product(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    _load_product(product_id)
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        sku=body.sku,
        category=body.category,
        price=body.price,
        description=body.description,
        cost=body.cost,
        min_stock_level=body.min_stock_level,
        supplier=body.supplier,
        barcode=body.barcode,
        weight=body.weight,
        dimensions=json.dumps(body.dimensions.model_dump()) if body.dimensions else None,
    )
    current_domain.process(command, asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    _load_product(product_id)
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="deleted")


@product_router.post("/{product_id}/allocations", response_model=ProductResponse)
async def allocate_product_stock(product_id: str, body: AllocateStockRequest) -> ProductResponse:
    """Shelve unallocated stock on a location or take it back off."""
    _load_product(product_id)
    product = allocate_to_location(
        product_id=product_id,
        location_id=_picked_location_id(body),
        quantity=body.quantity,
        action=body.action,
    )
    return _product_response(product)
