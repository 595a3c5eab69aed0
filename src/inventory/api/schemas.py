"""Pydantic request/response schemas for the Inventory API.

These are external contracts, kept separate from the internal Protean
commands. JSON keys are camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AllocationSchema(CamelModel):
    location_id: str
    quantity: int
    last_updated: datetime | None = None


class DimensionsSchema(CamelModel):
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)


class ShelfPick(CamelModel):
    """A location given either by id or by rack and shelf number."""

    location_id: str | None = None
    rack: int | None = Field(default=None, ge=1)
    shelf: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Stock movement schemas
# ---------------------------------------------------------------------------
class StockMovementResponse(CamelModel):
    id: str
    product_id: str
    location_id: str
    movement_type: str
    quantity: int
    previous_quantity: int
    new_quantity: int
    reason: str
    reference: str | None = None
    destination_location_id: str | None = None
    user_id: str
    created_at: datetime


class ProductStockResponse(CamelModel):
    id: str
    name: str
    quantity: int
    locations: list[AllocationSchema]


class RecordMovementResponse(CamelModel):
    message: str
    stock_movement: StockMovementResponse
    product: ProductStockResponse


# ---------------------------------------------------------------------------
# Location schemas
# ---------------------------------------------------------------------------
class CreateLocationRequest(CamelModel):
    name: str
    code: str
    type: str
    capacity: int = Field(ge=0)
    is_active: bool = True
    parent_location_id: str | None = None
    description: str | None = None


class UpdateLocationRequest(CamelModel):
    name: str | None = None
    code: str | None = None
    type: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    parent_location_id: str | None = None
    description: str | None = None


class ResolveLocationRequest(CamelModel):
    code: str | None = None
    rack: int | None = Field(default=None, ge=1)
    shelf: int | None = Field(default=None, ge=1)
    name: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    description: str | None = None


class LocationResponse(CamelModel):
    id: str
    name: str
    code: str
    type: str
    capacity: int
    is_active: bool
    parent_location_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ResolveLocationResponse(CamelModel):
    location: LocationResponse
    created: bool


class StockedProductResponse(CamelModel):
    id: str
    name: str
    sku: str
    quantity: int


# ---------------------------------------------------------------------------
# Product schemas
# ---------------------------------------------------------------------------
class InitialAllocation(ShelfPick):
    quantity: int = Field(ge=1)


class CreateProductRequest(CamelModel):
    name: str
    sku: str
    category: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=0)
    description: str | None = None
    cost: float | None = Field(default=None, ge=0)
    min_stock_level: int | None = Field(default=None, ge=0)
    supplier: str | None = None
    barcode: str | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: DimensionsSchema | None = None
    locations: list[InitialAllocation] = Field(default_factory=list)


class UpdateProductRequest(CamelModel):
    name: str | None = None
    sku: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    description: str | None = None
    cost: float | None = Field(default=None, ge=0)
    min_stock_level: int | None = Field(default=None, ge=0)
    supplier: str | None = None
    barcode: str | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: DimensionsSchema | None = None


class AllocateStockRequest(ShelfPick):
    quantity: int = Field(ge=1)
    action: str


class ProductResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    sku: str
    category: str
    price: float
    cost: float | None = None
    quantity: int
    min_stock_level: int | None = None
    supplier: str | None = None
    barcode: str | None = None
    weight: float | None = None
    dimensions: DimensionsSchema | None = None
    locations: list[AllocationSchema]
    allocated: int
    available: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusResponse(CamelModel):
    status: str = "ok"
