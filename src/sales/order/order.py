"""Order aggregate with OrderItem entities and a ShippingAddress value object.

State Machine:
    Any status may be set directly. SHIPPED stamps ``shipped_at`` and
    DELIVERED stamps ``delivered_at`` the first time they are reached.
    Only PENDING, DELIVERED and CANCELLED orders may be deleted.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from sales.domain import sales

TAX_RATE = 0.20


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_DELETABLE = {OrderStatus.PENDING.value, OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"TSV-{now.year}-{uuid4().hex[:8].upper()}"


@sales.value_object(part_of="Order")
class ShippingAddress:
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@sales.entity(part_of="Order")
class OrderItem:
    """A product line, priced from the catalog when the order was placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)


@sales.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=255)
    customer_address = ValueObject(ShippingAddress, required=True)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tracking_number = String(max_length=100)
    carrier = String(max_length=100)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()

    @classmethod
    def place(
        cls,
        customer_name,
        customer_email,
        customer_address,
        items,
        shipping=0.0,
        tracking_number=None,
        carrier=None,
        notes=None,
    ):
        """Place an order from priced line items.

        ``items`` is a list of dicts with product_id, product_name, sku,
        quantity and price.
        """
        if not items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        lines = [
            OrderItem(
                product_id=item["product_id"],
                product_name=item["product_name"],
                sku=item["sku"],
                quantity=item["quantity"],
                price=item["price"],
                total=round(item["price"] * item["quantity"], 2),
            )
            for item in items
        ]
        subtotal = round(sum(line.total for line in lines), 2)
        tax = round(subtotal * TAX_RATE, 2)
        shipping = shipping or 0.0

        return cls(
            order_number=generate_order_number(now),
            customer_name=customer_name,
            customer_email=customer_email,
            customer_address=(
                ShippingAddress(**customer_address) if isinstance(customer_address, dict) else customer_address
            ),
            items=lines,
            tracking_number=tracking_number,
            carrier=carrier,
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total=round(subtotal + tax + shipping, 2),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def change_status(self, status, tracking_number=None, carrier=None):
        if status not in {s.value for s in OrderStatus}:
            raise ValidationError({"status": [f"Invalid order status: {status}"]})
        self.status = status
        now = datetime.now(UTC)
        if self.status == OrderStatus.SHIPPED.value and self.shipped_at is None:
            self.shipped_at = now
        elif self.status == OrderStatus.DELIVERED.value and self.delivered_at is None:
            self.delivered_at = now
        if tracking_number is not None:
            self.tracking_number = tracking_number
        if carrier is not None:
            self.carrier = carrier
        self.updated_at = now

    @property
    def is_trackable(self) -> bool:
        return bool(self.tracking_number and self.carrier)

    def assert_deletable(self):
        if self.status not in _DELETABLE:
            raise ValidationError({"status": ["Only pending, delivered, or cancelled orders can be deleted"]})
