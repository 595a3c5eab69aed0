import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain is imported and initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("AUTH_TOKEN_SECRET", "stockroom-test-secret-for-signing-tokens")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def domains():
    """Initialize both bounded contexts once per session."""
    from inventory.domain import inventory
    from sales.domain import sales

    inventory.init()
    sales.init()
    return {"inventory": inventory, "sales": sales}


@pytest.fixture(scope="session", autouse=True)
def setup_db(domains):
    from shared.db import drop_db, setup_db

    for domain in domains.values():
        setup_db(domain)

    yield

    for domain in domains.values():
        drop_db(domain)


@pytest.fixture()
def carrier():
    """A fresh fake carrier, reset again after the test."""
    from sales.carrier import get_carrier, reset_carrier

    reset_carrier()
    yield get_carrier()
    reset_carrier()


@pytest.fixture()
def actor():
    from identity.tokens import Actor

    return Actor(user_id="user-001", email="clerk@example.com", role="employee")


@pytest.fixture()
def auth_headers(actor):
    from identity.tokens import issue_token

    return {"Authorization": f"Bearer {issue_token(actor.user_id, actor.email, actor.role)}"}
