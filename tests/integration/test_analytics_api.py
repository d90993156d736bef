"""HTTP tests for the administrator reports."""

import pytest


@pytest.fixture()
def sale(client, customer_headers, make_product, shipping_address):
    product_id = make_product(price=100.0, mrp=100.0, stock=12)
    body = {
        "items": [{"product_id": product_id, "quantity": 3}],
        "shipping_address": shipping_address,
    }
    response = client.post("/orders", headers=customer_headers, json=body)
    assert response.status_code == 201
    return response.json()


def test_reports_require_admin(client, customer_headers):
    for path in ("/analytics/dashboard", "/analytics/sales/daily", "/analytics/users", "/analytics/products"):
        assert client.get(path, headers=customer_headers).status_code == 403


def test_dashboard(client, admin_headers, sale):
    data = client.get("/analytics/dashboard", headers=admin_headers).json()
    assert data["stats"]["total_orders"] == 1
    assert data["stats"]["total_revenue"] == 300.0
    assert data["stats"]["low_stock_products"] == 1
    assert data["recent_orders"][0]["order_number"] == sale["order_number"]
    assert data["top_products"][0]["total_sold"] == 3


def test_sales_by_period(client, admin_headers, sale):
    buckets = client.get("/analytics/sales/monthly", headers=admin_headers).json()
    assert len(buckets) == 1
    assert buckets[0]["total_sales"] == 300.0
    assert buckets[0]["order_count"] == 1


def test_unknown_period(client, admin_headers):
    response = client.get("/analytics/sales/hourly", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid period"


def test_user_and_product_reports(client, admin_headers, customer, sale):
    users = client.get("/analytics/users", headers=admin_headers).json()
    assert users["stats"] == {"total_users": 2, "admin_users": 1, "regular_users": 1}

    products = client.get("/analytics/products", headers=admin_headers).json()
    assert products["stats"] == {"total_products": 1, "low_stock_count": 1}
    assert products["products_by_category"] == [{"category": "Allopathic", "count": 1, "total_stock": 9}]
