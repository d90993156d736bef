"""Shared BDD fixtures and step definitions for ordering scenarios."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

from medstore.order.fulfillment import UpdateOrder
from medstore.order.order import Order
from medstore.product.product import Product


@pytest.fixture()
def ctx():
    """Scenario state shared between steps."""
    return {"products": {}, "order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer")
def registered_customer(ctx, make_user):
    ctx["customer"] = make_user()


@given("another registered customer")
def another_customer(ctx, make_user):
    ctx["other"] = make_user(name="Ravi Kumar")


@given(parsers.re(r'a product "(?P<name>[^"]+)" priced (?P<price>\d+) with (?P<stock>\d+) in stock$'))
def product_in_stock(ctx, make_product, name, price, stock):
    ctx["products"][name] = make_product(name=name, price=float(price), mrp=float(price), stock=int(stock))


@given(parsers.re(r'the customer has ordered (?P<quantity>\d+) of "(?P<name>[^"]+)"$'))
def customer_has_ordered(ctx, place_order, name, quantity):
    result = place_order(ctx["customer"].id, [(ctx["products"][name], int(quantity))])
    ctx["order_id"] = result["id"]


@given("the order has been shipped")
def order_has_been_shipped(ctx):
    for status in ("processing", "shipped"):
        current_domain.process(UpdateOrder(order_id=ctx["order_id"], status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.re(r'the order status is "(?P<status>[a-z]+)"$'))
def order_status_is(ctx, status):
    assert current_domain.repository_for(Order).get(ctx["order_id"]).status == status


@then(parsers.re(r'"(?P<name>[^"]+)" has (?P<stock>\d+) in stock$'))
def product_stock_is(ctx, name, stock):
    assert current_domain.repository_for(Product).get(ctx["products"][name]).stock == int(stock)
