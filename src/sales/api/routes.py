"""FastAPI routes for the Sales domain: orders, invoices and tracking."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from identity.dependencies import require_actor
from sales.api.schemas import (
    AddressSchema,
    CreateInvoiceRequest,
    CreateOrderRequest,
    InvoiceItemResponse,
    InvoiceResponse,
    OrderItemResponse,
    OrderResponse,
    RefreshTrackingRequest,
    RefreshTrackingResponse,
    StatusResponse,
    TrackingUpdateResponse,
    UpdateInvoiceStatusRequest,
    UpdateOrderStatusRequest,
)
from sales.invoice.generation import GenerateInvoice, UpdateInvoiceStatus
from sales.invoice.invoice import Invoice
from sales.order.lifecycle import DeleteOrder, UpdateOrderStatus
from sales.order.order import Order
from sales.order.placement import PlaceOrder, price_items
from sales.tracking.refresh import RefreshTracking
from sales.tracking.tracking import TrackingUpdate
from shared.errors import NotFound, RequestRejected
from shared.identifiers import is_identifier


def _address(address) -> AddressSchema | None:
    if address is None:
        return None
    return AddressSchema(
        street=address.street,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_address=_address(order.customer_address),
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                sku=item.sku,
                quantity=item.quantity,
                price=item.price,
                total=item.total,
            )
            for item in order.items or []
        ],
        status=order.status,
        tracking_number=order.tracking_number,
        carrier=order.carrier,
        subtotal=order.subtotal,
        tax=order.tax,
        shipping=order.shipping,
        total=order.total,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
    )


def _invoice_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=str(invoice.id),
        invoice_number=invoice.invoice_number,
        order_id=str(invoice.order_id),
        customer_name=invoice.customer_name,
        customer_address=_address(invoice.customer_address),
        items=[
            InvoiceItemResponse(
                product_name=item.product_name,
                sku=item.sku,
                quantity=item.quantity,
                price=item.price,
                total=item.total,
            )
            for item in invoice.items or []
        ],
        subtotal=invoice.subtotal,
        tax=invoice.tax,
        total=invoice.total,
        status=invoice.status,
        due_date=invoice.due_date,
        paid_date=invoice.paid_date,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


def _tracking_response(update: TrackingUpdate) -> TrackingUpdateResponse:
    return TrackingUpdateResponse(
        id=str(update.id),
        order_id=str(update.order_id),
        tracking_number=update.tracking_number,
        carrier=update.carrier,
        status=update.status,
        location=update.location,
        description=update.description,
        timestamp=update.timestamp,
        created_at=update.created_at,
    )


def _check_order_id(order_id: str) -> None:
    if not is_identifier(order_id):
        raise RequestRejected("Invalid order ID format", field="orderId")


def _load_order(order_id: str) -> Order:
    _check_order_id(order_id)
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise NotFound("Order not found", field="orderId")
    return order


def _load_invoice(invoice_id: str) -> Invoice:
    if not is_identifier(invoice_id):
        raise RequestRejected("Invalid invoice ID format", field="invoiceId")
    invoice = current_domain.repository_for(Invoice).find(invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found", field="invoiceId")
    return invoice


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_actor)])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders() -> list[OrderResponse]:
    return [_order_response(o) for o in current_domain.repository_for(Order).newest_first()]


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest) -> OrderResponse:
    items = price_items([(item.product_id, item.quantity) for item in body.items])
    command = PlaceOrder(
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        customer_address=json.dumps(body.customer_address.model_dump()),
        items=json.dumps(items),
        shipping=body.shipping,
        tracking_number=body.tracking_number,
        carrier=body.carrier,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(_load_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    _load_order(order_id)
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        carrier=body.carrier,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    _check_order_id(order_id)
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Invoice Router
# ---------------------------------------------------------------------------
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"], dependencies=[Depends(require_actor)])


@invoice_router.get("", response_model=list[InvoiceResponse])
async def list_invoices() -> list[InvoiceResponse]:
    return [_invoice_response(i) for i in current_domain.repository_for(Invoice).newest_first()]


@invoice_router.post("", status_code=201, response_model=InvoiceResponse)
async def create_invoice(body: CreateInvoiceRequest) -> InvoiceResponse:
    _check_order_id(body.order_id)
    invoice_id = current_domain.process(GenerateInvoice(order_id=body.order_id), asynchronous=False)
    return _invoice_response(current_domain.repository_for(Invoice).get(invoice_id))


@invoice_router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str) -> InvoiceResponse:
    return _invoice_response(_load_invoice(invoice_id))


@invoice_router.put("/{invoice_id}/status", response_model=InvoiceResponse)
async def update_invoice_status(invoice_id: str, body: UpdateInvoiceStatusRequest) -> InvoiceResponse:
    _load_invoice(invoice_id)
    current_domain.process(UpdateInvoiceStatus(invoice_id=invoice_id, status=body.status), asynchronous=False)
    return _invoice_response(current_domain.repository_for(Invoice).get(invoice_id))


# ---------------------------------------------------------------------------
# Tracking Router
# ---------------------------------------------------------------------------
tracking_router = APIRouter(prefix="/tracking", tags=["tracking"], dependencies=[Depends(require_actor)])


@tracking_router.get("", response_model=list[TrackingUpdateResponse])
async def list_tracking_updates(
    order_id: str | None = Query(default=None, alias="orderId"),
    tracking_number: str | None = Query(default=None, alias="trackingNumber"),
) -> list[TrackingUpdateResponse]:
    """Tracking history for an order or a tracking number, newest first."""
    repo = current_domain.repository_for(TrackingUpdate)
    if order_id:
        _check_order_id(order_id)
        updates = repo.for_order(order_id)
    elif tracking_number:
        updates = repo.for_tracking_number(tracking_number)
    else:
        raise RequestRejected("Either orderId or trackingNumber is required", field="orderId")
    return [_tracking_response(u) for u in updates]


@tracking_router.post("/refresh", response_model=RefreshTrackingResponse)
async def refresh_tracking(body: RefreshTrackingRequest) -> RefreshTrackingResponse:
    _check_order_id(body.order_id)
    update = current_domain.process(RefreshTracking(order_id=body.order_id), asynchronous=False)
    return RefreshTrackingResponse(
        message="Tracking information updated successfully",
        tracking_update=_tracking_response(update),
    )
