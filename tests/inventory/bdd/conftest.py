"""Shared BDD fixtures and step definitions for stock movements."""

import pytest
from identity.tokens import Actor
from inventory.catalogue.product import Product
from inventory.errors import InsufficientStock
from inventory.location.location import Location
from inventory.movement.movement import StockMovement
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def clerk():
    return Actor(user_id="clerk-001", email="clerk@example.com")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('shelves "{first}" and "{second}" exist'), target_fixture="shelves")
def _(first, second):
    shelves = {}
    for code in (first, second):
        location = Location.create(name=f"Shelf {code}", code=code)
        current_domain.repository_for(Location).add(location)
        shelves[code] = str(location.id)
    return shelves


@given(parsers.cfparse('a product with {qty:d} units on shelf "{shelf}"'), target_fixture="product_id")
def _(shelves, qty, shelf):
    product = Product.create(
        name="Desk Lamp",
        sku="LAMP-001",
        category="Lighting",
        price=25.0,
        quantity=qty,
        allocations=[(shelves[shelf], qty)],
    )
    current_domain.repository_for(Product).add(product)
    return str(product.id)


@given("a product with no stock", target_fixture="product_id")
def _():
    product = Product.create(name="Desk Lamp", sku="LAMP-001", category="Lighting", price=25.0)
    current_domain.repository_for(Product).add(product)
    return str(product.id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _stored(product_id):
    return current_domain.repository_for(Product).get(product_id)


@then(parsers.cfparse('shelf "{shelf}" holds {qty:d} units'))
def _(shelves, product_id, shelf, qty):
    assert _stored(product_id).allocation_at(shelves[shelf]) == qty


@then(parsers.cfparse('the product is not stored on shelf "{shelf}"'))
def _(shelves, product_id, shelf):
    assert shelves[shelf] not in _stored(product_id).allocation_map()


@then(parsers.cfparse("the product quantity is {qty:d}"))
def _(product_id, qty):
    assert _stored(product_id).quantity == qty


@then(parsers.re(r"(?P<count>\d+) ledger entr(?:y is|ies are) recorded"), converters={"count": int})
def _(count):
    assert len(current_domain.repository_for(StockMovement).recent()) == count


@then("the movement is rejected for insufficient stock")
def _(outcome):
    assert isinstance(outcome["error"], InsufficientStock)
