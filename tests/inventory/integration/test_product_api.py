"""Integration tests for the product endpoints via TestClient."""

from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory.api import product_router
from inventory.location.location import Location
from protean import current_domain
from shared.http import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(product_router)
    return TestClient(app)


@pytest.fixture()
def shelf_id():
    location = Location.create(name="Rack 1 Shelf 1", code="R1S1")
    current_domain.repository_for(Location).add(location)
    return str(location.id)


def _create_product(client, headers, **overrides):
    body = {"name": "Desk Lamp", "sku": "LAMP-001", "category": "Lighting", "price": 25.0, "quantity": 10}
    body.update(overrides)
    response = client.post("/products", json=body, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


class TestCreateProduct:
    def test_create(self, client, auth_headers):
        data = _create_product(client, auth_headers, supplier="Acme", minStockLevel=3)
        assert data["sku"] == "LAMP-001"
        assert data["quantity"] == 10
        assert data["minStockLevel"] == 3
        assert data["supplier"] == "Acme"
        assert data["locations"] == []
        assert data["allocated"] == 0
        assert data["available"] == 10

    def test_create_with_location_id(self, client, auth_headers, shelf_id):
        data = _create_product(client, auth_headers, locations=[{"locationId": shelf_id, "quantity": 4}])
        assert [(a["locationId"], a["quantity"]) for a in data["locations"]] == [(shelf_id, 4)]
        assert data["available"] == 6

    def test_create_with_rack_and_shelf(self, client, auth_headers):
        data = _create_product(client, auth_headers, locations=[{"rack": 3, "shelf": 1, "quantity": 10}])
        location = current_domain.repository_for(Location).find_by_code("R3S1")
        assert location is not None
        assert data["locations"][0]["locationId"] == str(location.id)

    def test_allocations_beyond_quantity(self, client, auth_headers, shelf_id):
        response = client.post(
            "/products",
            json={
                "name": "Desk Lamp",
                "sku": "LAMP-001",
                "category": "Lighting",
                "price": 25.0,
                "quantity": 2,
                "locations": [{"locationId": shelf_id, "quantity": 4}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_duplicate_sku(self, client, auth_headers):
        _create_product(client, auth_headers)
        response = client.post(
            "/products",
            json={"name": "Lamp", "sku": "LAMP-001", "category": "Lighting", "price": 1.0, "quantity": 1},
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert response.json() == {"error": "A product with SKU LAMP-001 already exists"}

    def test_negative_price(self, client, auth_headers):
        response = client.post(
            "/products",
            json={"name": "Lamp", "sku": "LAMP-009", "category": "Lighting", "price": -1, "quantity": 1},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestReadProducts:
    def test_list_alphabetical(self, client, auth_headers):
        _create_product(client, auth_headers, name="Wall Clock", sku="CLK-1")
        _create_product(client, auth_headers, name="Armchair", sku="CHR-1")
        response = client.get("/products", headers=auth_headers)
        assert [p["name"] for p in response.json()] == ["Armchair", "Wall Clock"]

    def test_get(self, client, auth_headers):
        product_id = _create_product(client, auth_headers)["id"]
        response = client.get(f"/products/{product_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == product_id

    def test_get_unknown(self, client, auth_headers):
        response = client.get(f"/products/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}


class TestUpdateAndDeleteProduct:
    def test_update_does_not_touch_stock(self, client, auth_headers):
        product_id = _create_product(client, auth_headers)["id"]
        response = client.put(
            f"/products/{product_id}",
            json={"name": "Floor Lamp", "quantity": 999, "dimensions": {"length": 1, "width": 2, "height": 3}},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Floor Lamp"
        assert data["quantity"] == 10
        assert data["dimensions"] == {"length": 1.0, "width": 2.0, "height": 3.0}

    def test_delete(self, client, auth_headers):
        product_id = _create_product(client, auth_headers)["id"]
        response = client.delete(f"/products/{product_id}", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}", headers=auth_headers).status_code == 404


class TestAllocations:
    def test_shelve_and_unshelve(self, client, auth_headers, shelf_id):
        product_id = _create_product(client, auth_headers)["id"]

        response = client.post(
            f"/products/{product_id}/allocations",
            json={"locationId": shelf_id, "quantity": 7, "action": "add"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["allocated"] == 7
        assert response.json()["quantity"] == 10

        response = client.post(
            f"/products/{product_id}/allocations",
            json={"locationId": shelf_id, "quantity": 7, "action": "remove"},
            headers=auth_headers,
        )
        assert response.json()["locations"] == []

    def test_shelve_beyond_available(self, client, auth_headers, shelf_id):
        product_id = _create_product(client, auth_headers)["id"]
        response = client.post(
            f"/products/{product_id}/allocations",
            json={"locationId": shelf_id, "quantity": 11, "action": "add"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Only 10 units available to allocate"}

    def test_shelve_by_rack_and_shelf(self, client, auth_headers):
        product_id = _create_product(client, auth_headers)["id"]
        response = client.post(
            f"/products/{product_id}/allocations",
            json={"rack": 4, "shelf": 2, "quantity": 3, "action": "add"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert current_domain.repository_for(Location).find_by_code("R4S2") is not None


class TestRejectedCreateLeavesNoShelf:
    def test_duplicate_sku_with_rack_and_shelf(self, client, auth_headers):
        _create_product(client, auth_headers, sku="DUP")
        response = client.post(
            "/products",
            json={
                "name": "Desk Lamp",
                "sku": "DUP",
                "category": "Lighting",
                "price": 25.0,
                "quantity": 10,
                "locations": [{"rack": 9, "shelf": 9, "quantity": 5}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert current_domain.repository_for(Location).find_by_code("R9S9") is None

    def test_allocations_beyond_quantity_with_rack_and_shelf(self, client, auth_headers):
        response = client.post(
            "/products",
            json={
                "name": "Desk Lamp",
                "sku": "LAMP-002",
                "category": "Lighting",
                "price": 25.0,
                "quantity": 2,
                "locations": [{"rack": 9, "shelf": 8, "quantity": 5}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Allocated stock (5) exceeds product quantity (2)"}
        assert current_domain.repository_for(Location).find_by_code("R9S8") is None

    def test_unknown_location_next_to_rack_and_shelf(self, client, auth_headers):
        response = client.post(
            "/products",
            json={
                "name": "Desk Lamp",
                "sku": "LAMP-003",
                "category": "Lighting",
                "price": 25.0,
                "quantity": 10,
                "locations": [{"rack": 9, "shelf": 7, "quantity": 2}, {"locationId": str(uuid4()), "quantity": 2}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert current_domain.repository_for(Location).find_by_code("R9S7") is None

    def test_same_shelf_twice(self, client, auth_headers):
        response = client.post(
            "/products",
            json={
                "name": "Desk Lamp",
                "sku": "LAMP-004",
                "category": "Lighting",
                "price": 25.0,
                "quantity": 10,
                "locations": [{"rack": 9, "shelf": 6, "quantity": 2}, {"rack": 9, "shelf": 6, "quantity": 3}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert current_domain.repository_for(Location).find_by_code("R9S6") is None


class TestSearchByBarcode:
    def test_found(self, client, auth_headers):
        product_id = _create_product(client, auth_headers, barcode="5012345678900")["id"]
        response = client.get("/products/search-barcode", params={"barcode": "5012345678900"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == product_id

    def test_missing_barcode(self, client, auth_headers):
        response = client.get("/products/search-barcode", headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Barcode is required"}

    def test_no_match(self, client, auth_headers):
        _create_product(client, auth_headers, barcode="5012345678900")
        response = client.get("/products/search-barcode", params={"barcode": "0000000000000"}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_requires_auth(self, client):
        assert client.get("/products/search-barcode", params={"barcode": "1"}).status_code == 401
