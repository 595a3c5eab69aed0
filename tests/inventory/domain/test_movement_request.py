"""Tests for movement request parsing and its validation order."""

from uuid import uuid4

import pytest
from inventory.errors import (
    DestinationRequired,
    InvalidMovementType,
    InvalidQuantity,
    InvalidReference,
    MissingField,
    SameLocationTransfer,
)
from inventory.movement.engine import parse_movement_request


def _payload(**overrides):
    payload = {
        "productId": str(uuid4()),
        "locationId": str(uuid4()),
        "movementType": "in",
        "quantity": 5,
        "reason": "Delivery from supplier",
    }
    payload.update(overrides)
    return payload


class TestRequiredFields:
    @pytest.mark.parametrize("field_name", ["productId", "locationId", "movementType", "quantity", "reason"])
    def test_missing_field_is_rejected(self, field_name):
        payload = _payload()
        del payload[field_name]
        with pytest.raises(MissingField) as exc:
            parse_movement_request(payload, "user-001")
        assert str(exc.value) == f"Missing required field: {field_name}"

    def test_blank_reason_counts_as_missing(self):
        with pytest.raises(MissingField):
            parse_movement_request(_payload(reason="   "), "user-001")

    def test_missing_field_is_reported_before_bad_identifier(self):
        payload = _payload(productId="not-an-id")
        del payload["reason"]
        with pytest.raises(MissingField):
            parse_movement_request(payload, "user-001")


class TestIdentifiers:
    def test_malformed_product_id(self):
        with pytest.raises(InvalidReference) as exc:
            parse_movement_request(_payload(productId="abc"), "user-001")
        assert exc.value.field == "productId"

    def test_malformed_location_id(self):
        with pytest.raises(InvalidReference) as exc:
            parse_movement_request(_payload(locationId="123"), "user-001")
        assert exc.value.field == "locationId"

    def test_non_string_identifier(self):
        with pytest.raises(InvalidReference):
            parse_movement_request(_payload(productId=42), "user-001")


class TestMovementType:
    def test_unknown_type(self):
        with pytest.raises(InvalidMovementType):
            parse_movement_request(_payload(movementType="restock"), "user-001")

    @pytest.mark.parametrize("movement_type", [["in"], {"t": "in"}, 1])
    def test_non_string_type(self, movement_type):
        with pytest.raises(InvalidMovementType):
            parse_movement_request(_payload(movementType=movement_type), "user-001")

    def test_type_is_checked_before_quantity(self):
        with pytest.raises(InvalidMovementType):
            parse_movement_request(_payload(movementType="restock", quantity=-1), "user-001")


class TestQuantity:
    @pytest.mark.parametrize("quantity", [0, -3, "-1", "abc", "NaN", "inf", 2.5, True])
    def test_invalid_quantity_for_in(self, quantity):
        with pytest.raises(InvalidQuantity):
            parse_movement_request(_payload(quantity=quantity), "user-001")

    @pytest.mark.parametrize(("raw", "expected"), [(5, 5), ("7", 7), (3.0, 3), ("12.0", 12)])
    def test_numeric_quantities_are_accepted(self, raw, expected):
        request = parse_movement_request(_payload(quantity=raw), "user-001")
        assert request.quantity == expected

    def test_adjustment_to_zero_is_allowed(self):
        request = parse_movement_request(_payload(movementType="adjustment", quantity=0), "user-001")
        assert request.quantity == 0

    def test_negative_adjustment_is_rejected(self):
        with pytest.raises(InvalidQuantity):
            parse_movement_request(_payload(movementType="adjustment", quantity=-2), "user-001")

    def test_zero_transfer_is_rejected(self):
        with pytest.raises(InvalidQuantity):
            parse_movement_request(
                _payload(movementType="transfer", quantity=0, destinationLocationId=str(uuid4())),
                "user-001",
            )


class TestTransferDestination:
    def test_destination_required(self):
        with pytest.raises(DestinationRequired):
            parse_movement_request(_payload(movementType="transfer"), "user-001")

    def test_malformed_destination(self):
        with pytest.raises(InvalidReference) as exc:
            parse_movement_request(_payload(movementType="transfer", destinationLocationId="shelf-9"), "user-001")
        assert exc.value.field == "destinationLocationId"

    def test_same_location_transfer(self):
        payload = _payload(movementType="transfer")
        payload["destinationLocationId"] = payload["locationId"]
        with pytest.raises(SameLocationTransfer):
            parse_movement_request(payload, "user-001")

    def test_destination_ignored_for_other_types(self):
        request = parse_movement_request(_payload(destinationLocationId="whatever"), "user-001")
        assert request.destination_location_id is None


class TestParsedRequest:
    def test_actor_comes_from_caller(self):
        request = parse_movement_request(_payload(userId="someone-else"), "user-001")
        assert request.user_id == "user-001"

    def test_reference_is_optional(self):
        assert parse_movement_request(_payload(), "user-001").reference is None
        assert parse_movement_request(_payload(reference="PO-1001"), "user-001").reference == "PO-1001"

    def test_transfer_request(self):
        destination = str(uuid4())
        request = parse_movement_request(
            _payload(movementType="transfer", quantity=8, destinationLocationId=destination),
            "user-001",
        )
        assert request.is_transfer
        assert request.destination_location_id == destination
        assert request.quantity == 8
