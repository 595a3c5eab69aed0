"""Sales bounded context: orders, invoices and shipment tracking.

Orders snapshot product name, SKU and price from the inventory catalog at
placement time. Placing an order does not move stock.
"""

import structlog
from protean.domain import Domain

sales = Domain(name="sales")

logger = structlog.get_logger(__name__)
