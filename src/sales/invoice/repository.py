"""Repository for the Invoice aggregate."""

from protean.exceptions import ObjectNotFoundError

from sales.domain import sales
from sales.invoice.invoice import Invoice


@sales.repository(part_of=Invoice)
class InvoiceRepository:
    def find(self, invoice_id) -> Invoice | None:
        try:
            return self.get(str(invoice_id))
        except ObjectNotFoundError:
            return None

    def find_by_order(self, order_id) -> Invoice | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first

    def newest_first(self) -> list[Invoice]:
        return self._dao.query.order_by("-created_at").limit(None).all().items
