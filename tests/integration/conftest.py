import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from medstore.api import ROUTERS, register_error_handlers
from medstore.shared.security import create_access_token


@pytest.fixture()
def client():
    app = FastAPI()
    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def customer(make_user):
    return make_user(name="Asha Verma", email="asha@example.com")


@pytest.fixture()
def admin(make_user):
    return make_user(name="Admin User", email="admin@rmtmedical.com", role="admin")


@pytest.fixture()
def customer_headers(customer, auth_headers):
    return auth_headers(customer)


@pytest.fixture()
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
