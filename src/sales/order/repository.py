"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from sales.domain import sales
from sales.order.order import Order


@sales.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order | None:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            return None

    def newest_first(self) -> list[Order]:
        return self._dao.query.order_by("-created_at").limit(None).all().items
