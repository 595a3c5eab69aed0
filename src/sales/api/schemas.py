"""Pydantic request/response schemas for the Sales API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressSchema(CamelModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Order schemas
# ---------------------------------------------------------------------------
class OrderItemRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1)


class CreateOrderRequest(CamelModel):
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_address: AddressSchema
    items: list[OrderItemRequest] = Field(min_length=1)
    shipping: float = Field(default=0.0, ge=0)
    tracking_number: str | None = None
    carrier: str | None = None
    notes: str | None = None


class UpdateOrderStatusRequest(CamelModel):
    status: str
    tracking_number: str | None = None
    carrier: str | None = None


class OrderItemResponse(CamelModel):
    product_id: str
    product_name: str
    sku: str
    quantity: int
    price: float
    total: float


class OrderResponse(CamelModel):
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_address: AddressSchema
    items: list[OrderItemResponse]
    status: str
    tracking_number: str | None = None
    carrier: str | None = None
    subtotal: float
    tax: float
    shipping: float
    total: float
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None


# ---------------------------------------------------------------------------
# Invoice schemas
# ---------------------------------------------------------------------------
class CreateInvoiceRequest(CamelModel):
    order_id: str


class UpdateInvoiceStatusRequest(CamelModel):
    status: str


class InvoiceItemResponse(CamelModel):
    product_name: str
    sku: str
    quantity: int
    price: float
    total: float


class InvoiceResponse(CamelModel):
    id: str
    invoice_number: str
    order_id: str
    customer_name: str
    customer_address: AddressSchema | None = None
    items: list[InvoiceItemResponse]
    subtotal: float
    tax: float
    total: float
    status: str
    due_date: datetime | None = None
    paid_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Tracking schemas
# ---------------------------------------------------------------------------
class RefreshTrackingRequest(CamelModel):
    order_id: str


class TrackingUpdateResponse(CamelModel):
    id: str
    order_id: str
    tracking_number: str
    carrier: str
    status: str
    location: str | None = None
    description: str | None = None
    timestamp: datetime
    created_at: datetime


class RefreshTrackingResponse(CamelModel):
    message: str
    tracking_update: TrackingUpdateResponse


class StatusResponse(CamelModel):
    status: str = "ok"
