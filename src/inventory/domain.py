"""Inventory bounded context: products, warehouse locations and stock movements.

Owns the product catalog, the location registry, the stock movement engine
and its append-only ledger, and shelf allocation reconciliation.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
