"""Application tests for order status changes and cancellation restocking."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.product import Product
from storefront.shared.errors import InvalidTransition, OrderNotFound


def _place(items):
    return current_domain.process(
        PlaceOrder(customer_id="cust-001", email="buyer@example.com", items=json.dumps(items)),
        asynchronous=False,
    )


def _update(order_id, status):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


class TestUpdateOrderStatusCommand:
    def test_processing_then_delivered(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 1}])

        assert _update(order_id, "Processing") == "Processing"
        assert _update(order_id, "Delivered") == "Delivered"

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "Delivered"

    def test_non_cancel_transitions_leave_stock_alone(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 2}])
        _update(order_id, "Processing")
        _update(order_id, "Delivered")
        assert _stock(a.id) == 3

    def test_invalid_transition_is_rejected(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 1}])
        with pytest.raises(InvalidTransition):
            _update(order_id, "Delivered")
        assert current_domain.repository_for(Order).get(order_id).status == "Placed"

    def test_unknown_status_is_rejected(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 1}])
        with pytest.raises(ValidationError):
            _update(order_id, "Lost")

    def test_unknown_order(self):
        with pytest.raises(OrderNotFound):
            _update("no-such-order", "Processing")


class TestCancellationRestock:
    def test_cancel_restores_stock(self, add_product):
        a = add_product(stock=5)
        b = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 2}, {"product_id": str(b.id), "quantity": 1}])
        assert _stock(a.id) == 3

        _update(order_id, "Cancelled")

        assert _stock(a.id) == 5
        assert _stock(b.id) == 5

    def test_cancel_from_processing_restores_stock(self, add_product):
        a = add_product(stock=4)
        order_id = _place([{"product_id": str(a.id), "quantity": 4}])
        _update(order_id, "Processing")
        _update(order_id, "Cancelled")
        assert _stock(a.id) == 4

    def test_cancel_restores_repeated_lines(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 1}, {"product_id": str(a.id), "quantity": 2}])
        assert _stock(a.id) == 2
        _update(order_id, "Cancelled")
        assert _stock(a.id) == 5

    def test_cancel_skips_removed_products(self, add_product):
        a = add_product(stock=5)
        b = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 2}, {"product_id": str(b.id), "quantity": 1}])

        repo = current_domain.repository_for(Product)
        repo._dao.delete(repo.get(b.id))

        assert _update(order_id, "Cancelled") == "Cancelled"
        assert _stock(a.id) == 5

    def test_rejected_cancel_does_not_restock(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 2}])
        _update(order_id, "Processing")
        _update(order_id, "Delivered")

        with pytest.raises(InvalidTransition):
            _update(order_id, "Cancelled")
        assert _stock(a.id) == 3

    def test_cancel_twice_restocks_once(self, add_product):
        a = add_product(stock=5)
        order_id = _place([{"product_id": str(a.id), "quantity": 2}])
        _update(order_id, "Cancelled")
        with pytest.raises(InvalidTransition):
            _update(order_id, "Cancelled")
        assert _stock(a.id) == 5
