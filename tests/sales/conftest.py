import pytest


def _reset(domain):
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()
        for _, broker in domain.brokers.items():
            broker._data_reset()
        domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def run_around_tests(domains):
    """Push the sales context before each test; clean both contexts after."""
    ctx = domains["sales"].domain_context()
    ctx.push()

    yield

    ctx.pop()
    _reset(domains["sales"])
    _reset(domains["inventory"])


@pytest.fixture()
def stocked_product(domains):
    """Create a catalog product with 50 units and return its id."""
    from inventory.catalogue.management import CreateProduct

    with domains["inventory"].domain_context():
        from protean import current_domain

        return current_domain.process(
            CreateProduct(name="Desk Lamp", sku="LAMP-001", category="Lighting", price=25.0, quantity=50),
            asynchronous=False,
        )
