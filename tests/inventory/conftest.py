import pytest


@pytest.fixture(autouse=True)
def run_around_tests(domains):
    """Push the inventory context before each test, cleanup after."""
    inventory = domains["inventory"]
    ctx = inventory.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
