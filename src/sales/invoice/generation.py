"""Invoice generation and status changes."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from sales.domain import sales
from sales.invoice.invoice import Invoice
from sales.order.order import Order
from shared.errors import Conflict, NotFound

logger = structlog.get_logger(__name__)


@sales.command(part_of="Invoice")
class GenerateInvoice:
    order_id = Identifier(required=True)


@sales.command(part_of="Invoice")
class UpdateInvoiceStatus:
    invoice_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@sales.command_handler(part_of=Invoice)
class InvoiceHandler:
    @handle(GenerateInvoice)
    def generate_invoice(self, command):
        order = current_domain.repository_for(Order).find(command.order_id)
        if order is None:
            raise NotFound("Order not found", field="orderId")

        invoices = current_domain.repository_for(Invoice)
        if invoices.find_by_order(order.id) is not None:
            raise Conflict("Invoice already exists for this order", field="orderId")

        invoice = Invoice.for_order(order)
        invoices.add(invoice)
        logger.info("Invoice generated", invoice_id=str(invoice.id), order_id=str(order.id))
        return str(invoice.id)

    @handle(UpdateInvoiceStatus)
    def update_invoice_status(self, command):
        invoices = current_domain.repository_for(Invoice)
        invoice = invoices.find(command.invoice_id)
        if invoice is None:
            raise NotFound("Invoice not found", field="invoiceId")
        invoice.change_status(command.status)
        invoices.add(invoice)
