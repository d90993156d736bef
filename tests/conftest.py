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
    """Pytest hook to run before collecting tests.

    PROTEAN_ENV must be set before the domain module is imported, because
    the domain reads its configuration overlay on construction.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def _medstore_domain():
    """Initialize the medstore domain once per session."""
    from medstore.domain import medstore

    medstore.init()
    return medstore


@pytest.fixture(scope="session", autouse=True)
def setup_db(_medstore_domain):
    from medstore.utils.db import drop_db, setup_db

    setup_db(_medstore_domain)

    yield

    drop_db(_medstore_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_medstore_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _medstore_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Factories shared across layers
# ---------------------------------------------------------------------------
SHIPPING_ADDRESS = {
    "name": "Asha Verma",
    "street": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "postal_code": "411001",
    "country": "India",
    "phone": "9800000000",
}


@pytest.fixture()
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture()
def make_user():
    from protean import current_domain

    from medstore.account.user import User

    counter = {"n": 0}

    def _make(name="Asha Verma", email=None, password="secret123", role="user"):
        counter["n"] += 1
        user = User.register(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            password=password,
            role=role,
        )
        current_domain.repository_for(User).add(user)
        return current_domain.repository_for(User).get(user.id)

    return _make


@pytest.fixture()
def make_category():
    from protean import current_domain

    from medstore.category.management import CreateCategory

    def _make(name="Allopathic", **fields):
        return current_domain.process(CreateCategory(name=name, **fields), asynchronous=False)

    return _make


@pytest.fixture()
def make_product(make_category):
    from protean import current_domain

    from medstore.product.creation import CreateProduct

    state = {"category_id": None}

    def _make(name="Paracetamol", price=100.0, mrp=100.0, stock=5, category_id=None, **fields):
        if category_id is None:
            if state["category_id"] is None:
                state["category_id"] = make_category()
            category_id = state["category_id"]
        command = CreateProduct(
            name=name,
            description=f"{name} description",
            price=price,
            mrp=mrp,
            stock=stock,
            category_id=category_id,
            **fields,
        )
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture()
def place_order(shipping_address):
    import json

    from protean import current_domain

    from medstore.order.placement import PlaceOrder

    def _place(user_id, lines, payment_method="cod"):
        command = PlaceOrder(
            user_id=user_id,
            items=json.dumps([{"product_id": pid, "quantity": qty} for pid, qty in lines]),
            shipping_address=json.dumps(shipping_address),
            payment_method=payment_method,
        )
        return current_domain.process(command, asynchronous=False)

    return _place
