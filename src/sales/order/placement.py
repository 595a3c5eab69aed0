"""Order placement: pricing line items from the catalog and the PlaceOrder command."""

import json

import structlog
from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from inventory.catalogue.product import Product
from inventory.domain import inventory
from sales.domain import sales
from sales.order.order import Order
from shared.errors import NotFound, RequestRejected
from shared.identifiers import is_identifier

logger = structlog.get_logger(__name__)


@sales.command(part_of="Order")
class PlaceOrder:
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=255)
    customer_address = Text(required=True)  # JSON-encoded address
    items = Text(required=True)  # JSON-encoded priced line items
    shipping = Float(default=0.0, min_value=0.0)
    tracking_number = String(max_length=100)
    carrier = String(max_length=100)
    notes = Text()


def price_items(requested) -> list[dict]:
    """Snapshot catalog name, SKU and price for ``(product_id, quantity)`` pairs.

    Each product must exist and hold at least the requested quantity.
    """
    if not requested:
        raise RequestRejected("Order must contain at least one item", field="items")

    priced = []
    with inventory.domain_context():
        products = current_domain.repository_for(Product)
        for product_id, quantity in requested:
            if not is_identifier(product_id):
                raise RequestRejected("Invalid product ID in order items", field="items")
            if quantity is None or quantity <= 0:
                raise RequestRejected("Quantity must be a positive number", field="items")

            product = products.find(product_id)
            if product is None:
                raise NotFound(f"Product not found: {product_id}", field="items")
            if (product.quantity or 0) < quantity:
                raise RequestRejected(f"Insufficient stock for product: {product.name}", field="items")

            priced.append(
                {
                    "product_id": str(product.id),
                    "product_name": product.name,
                    "sku": product.sku,
                    "quantity": quantity,
                    "price": product.price,
                }
            )
    return priced


@sales.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            customer_address=json.loads(command.customer_address),
            items=json.loads(command.items),
            shipping=command.shipping or 0.0,
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order placed", order_id=str(order.id), order_number=order.order_number, total=order.total)
        return str(order.id)
