"""Shared BDD fixtures and step definitions for the Storefront domain."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.product import Product


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Catalogue products by title."""
    return {}


@pytest.fixture()
def placed():
    """Container for the order under test."""
    return {"order_id": None}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _cart(products, first_qty, first, second_qty, second):
    return [
        {"product_id": str(products[first].id), "quantity": int(first_qty)},
        {"product_id": str(products[second].id), "quantity": int(second_qty)},
    ]


def _confirm(products, placed, cart, coupon_code=None):
    placed["order_id"] = current_domain.process(
        PlaceOrder(
            customer_id="cust-bdd-001",
            email="bdd@example.com",
            items=json.dumps(cart),
            coupon_code=coupon_code,
        ),
        asynchronous=False,
    )


def _move(placed, status):
    current_domain.process(UpdateOrderStatus(order_id=placed["order_id"], status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{title}" priced {price:f} with {stock:d} in stock'))
def _(products, title, price, stock):
    product = Product.add(title=title, price=price, stock=stock)
    current_domain.repository_for(Product).add(product)
    products[title] = product


@given(parsers.cfparse('the customer confirmed {first_qty:d} "{first}" and {second_qty:d} "{second}"'))
def _(products, placed, first_qty, first, second_qty, second):
    _confirm(products, placed, _cart(products, first_qty, first, second_qty, second))


@given(parsers.cfparse('the order was moved to "{status}"'))
def _(placed, status):
    _move(placed, status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse('the customer confirms {first_qty:d} "{first}" and {second_qty:d} "{second}" with coupon "{code}"')
)
def _(products, placed, first_qty, first, second_qty, second, code):
    _confirm(products, placed, _cart(products, first_qty, first, second_qty, second), code)


@when(parsers.cfparse('the order is moved to "{status}"'))
def _(placed, error, status):
    try:
        _move(placed, status)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(placed, status):
    assert current_domain.repository_for(Order).get(placed["order_id"]).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def _(placed, total):
    assert current_domain.repository_for(Order).get(placed["order_id"]).total_price == pytest.approx(total)


@then(parsers.cfparse('"{title}" has {stock:d} in stock'))
def _(products, title, stock):
    assert current_domain.repository_for(Product).get(products[title].id).stock == stock


@then(parsers.cfparse('the change is refused with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert error["exc"].messages["status"] == [message]
