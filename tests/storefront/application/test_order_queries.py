"""Application tests for order lookups."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.shared.errors import OrderNotFound


@pytest.fixture()
def product(add_product):
    return add_product(stock=100)


def _place(product, email="buyer@example.com", customer_id="cust-001"):
    return current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            email=email,
            items=json.dumps([{"product_id": str(product.id), "quantity": 1}]),
        ),
        asynchronous=False,
    )


class TestLookupByEmail:
    def test_returns_orders_newest_first(self, product):
        first = _place(product)
        second = _place(product)
        _place(product, email="someone@else.com")

        orders = current_domain.repository_for(Order).for_email("buyer@example.com")
        assert [str(o.id) for o in orders] == [second, first]

    def test_lookup_is_case_insensitive(self, product):
        order_id = _place(product, email="Buyer@Example.com")
        orders = current_domain.repository_for(Order).for_email("  BUYER@example.COM ")
        assert [str(o.id) for o in orders] == [order_id]

    def test_no_matches(self, product):
        _place(product)
        assert current_domain.repository_for(Order).for_email("nobody@example.com") == []

    @pytest.mark.parametrize("email", ["", "  ", None])
    def test_blank_email_is_rejected(self, email):
        with pytest.raises(ValidationError) as exc:
            current_domain.repository_for(Order).for_email(email)
        assert exc.value.messages == {"email": ["Please provide an email address"]}


class TestOrderQueries:
    def test_load(self, product):
        order_id = _place(product)
        assert str(current_domain.repository_for(Order).load(order_id).id) == order_id

    def test_load_missing(self):
        with pytest.raises(OrderNotFound) as exc:
            current_domain.repository_for(Order).load("missing")
        assert exc.value.messages["order"] == ["Order with ID missing not found"]
        assert str(exc.value) == "Order with ID missing not found"

    def test_for_customer(self, product):
        mine = _place(product, customer_id="cust-001")
        _place(product, customer_id="cust-002")
        orders = current_domain.repository_for(Order).for_customer("cust-001")
        assert [str(o.id) for o in orders] == [mine]

    def test_listing_filters_by_status(self, product):
        placed = _place(product)
        cancelled = _place(product)
        current_domain.process(UpdateOrderStatus(order_id=cancelled, status="Cancelled"), asynchronous=False)

        repo = current_domain.repository_for(Order)
        assert {str(o.id) for o in repo.listing()} == {placed, cancelled}
        assert [str(o.id) for o in repo.listing("Placed")] == [placed]
        assert [str(o.id) for o in repo.listing("Cancelled")] == [cancelled]

    def test_listing_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            current_domain.repository_for(Order).listing("Shipped")
