"""Repository for the stock movement ledger."""

from inventory.domain import inventory
from inventory.movement.movement import StockMovement


@inventory.repository(part_of=StockMovement)
class StockMovementRepository:
    def recent(self, limit: int = 100) -> list[StockMovement]:
        """The newest ledger entries first."""
        return self._dao.query.order_by("-created_at").limit(limit).all().items

    def for_product(self, product_id) -> list[StockMovement]:
        return self._dao.query.filter(product_id=str(product_id)).order_by("-created_at").all().items
