"""Invoice aggregate: billing document generated from an order.

State Machine:
    DRAFT → SENT → PAID
    DRAFT → PAID
    SENT → OVERDUE → PAID
"""

from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from sales.domain import sales

PAYMENT_TERMS_DAYS = 30


class InvoiceStatus(Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


_VALID_TRANSITIONS = {
    InvoiceStatus.DRAFT: {InvoiceStatus.SENT, InvoiceStatus.PAID},
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID},
    InvoiceStatus.PAID: set(),  # Terminal
}


def generate_invoice_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"INV-{now.year}-{uuid4().hex[:8].upper()}"


@sales.value_object(part_of="Invoice")
class BillingAddress:
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@sales.entity(part_of="Invoice")
class InvoiceItem:
    product_name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)


@sales.aggregate
class Invoice:
    invoice_number = String(required=True, max_length=50, unique=True)
    order_id = Identifier(required=True, unique=True)
    customer_name = String(required=True, max_length=255)
    customer_address = ValueObject(BillingAddress)
    items = HasMany(InvoiceItem)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(default=0.0)
    status = String(choices=InvoiceStatus, default=InvoiceStatus.DRAFT.value)
    due_date = DateTime()
    paid_date = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def for_order(cls, order):
        """Bill an order: copy its customer, lines and totals."""
        now = datetime.now(UTC)
        address = order.customer_address
        return cls(
            invoice_number=generate_invoice_number(now),
            order_id=str(order.id),
            customer_name=order.customer_name,
            customer_address=BillingAddress(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            ),
            items=[
                InvoiceItem(
                    product_name=item.product_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    price=item.price,
                    total=item.total,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            tax=order.tax,
            total=order.total,
            due_date=now + timedelta(days=PAYMENT_TERMS_DAYS),
            created_at=now,
            updated_at=now,
        )

    def change_status(self, status):
        try:
            target = InvoiceStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Invalid invoice status: {status}"]}) from None

        current = InvoiceStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        self.status = target.value
        self.updated_at = datetime.now(UTC)
        if target == InvoiceStatus.PAID:
            self.paid_date = self.updated_at
