"""Tests for the Invoice aggregate and its status transitions."""

import re
from datetime import timedelta

import pytest
from protean.exceptions import ValidationError
from sales.invoice.invoice import Invoice, generate_invoice_number
from sales.order.order import Order

ADDRESS = {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip_code": "62701", "country": "US"}


def _order():
    return Order.place(
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        customer_address=ADDRESS,
        items=[
            {
                "product_id": "7f1c2f9e-3a53-4f6e-9c39-1d8f5f1a2b3c",
                "product_name": "Desk Lamp",
                "sku": "LAMP-001",
                "quantity": 2,
                "price": 25.0,
            }
        ],
        shipping=5.0,
    )


class TestInvoiceForOrder:
    def test_number_format(self):
        assert re.fullmatch(r"INV-\d{4}-[0-9A-F]{8}", generate_invoice_number())

    def test_copies_order(self):
        order = _order()
        invoice = Invoice.for_order(order)
        assert invoice.order_id == str(order.id)
        assert invoice.customer_name == "Jane Doe"
        assert invoice.customer_address.city == "Springfield"
        assert [(i.product_name, i.quantity, i.total) for i in invoice.items] == [("Desk Lamp", 2, 50.0)]
        assert invoice.subtotal == order.subtotal
        assert invoice.tax == order.tax
        assert invoice.total == order.total

    def test_due_in_thirty_days(self):
        invoice = Invoice.for_order(_order())
        assert invoice.due_date - invoice.created_at == timedelta(days=30)

    def test_starts_as_draft(self):
        assert Invoice.for_order(_order()).status == "draft"


class TestInvoiceStatus:
    @pytest.mark.parametrize(
        ("path", "final"),
        [
            (["sent"], "sent"),
            (["paid"], "paid"),
            (["sent", "paid"], "paid"),
            (["sent", "overdue"], "overdue"),
            (["sent", "overdue", "paid"], "paid"),
        ],
    )
    def test_valid_transitions(self, path, final):
        invoice = Invoice.for_order(_order())
        for status in path:
            invoice.change_status(status)
        assert invoice.status == final

    @pytest.mark.parametrize(("path", "target"), [([], "overdue"), (["paid"], "sent"), (["sent"], "draft")])
    def test_invalid_transitions(self, path, target):
        invoice = Invoice.for_order(_order())
        for status in path:
            invoice.change_status(status)
        with pytest.raises(ValidationError):
            invoice.change_status(target)

    def test_paid_stamps_paid_date(self):
        invoice = Invoice.for_order(_order())
        invoice.change_status("paid")
        assert invoice.paid_date is not None

    def test_unknown_status(self):
        invoice = Invoice.for_order(_order())
        with pytest.raises(ValidationError) as exc:
            invoice.change_status("void")
        assert exc.value.messages == {"status": ["Invalid invoice status: void"]}
