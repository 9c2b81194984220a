"""FastAPI routes for the Storefront domain — order pricing and lifecycle."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    ConfirmOrderRequest,
    LookupOrdersRequest,
    OrderListResponse,
    OrderResponse,
    PreviewOrderRequest,
    PreviewResponse,
    UpdateOrderStatusRequest,
)
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.preview import preview_order
from storefront.order.status import UpdateOrderStatus
from storefront.product.product import Product
from storefront.shared.errors import ProductNotFound

order_router = APIRouter(prefix="/orders", tags=["orders"])


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
def _product_summary(item, products):
    """Resolve a line's product for display; fall back to the title snapshot."""
    product_id = str(item.product_id)
    if product_id not in products:
        try:
            products[product_id] = current_domain.repository_for(Product).load(product_id).summary()
        except ProductNotFound:
            products[product_id] = {"product_id": product_id, "title": item.title, "price": None, "images": []}
    return products[product_id]


def _order_document(order, products=None) -> dict:
    products = {} if products is None else products
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "email": order.email,
        "items": [
            {
                "product": _product_summary(item, products),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
            }
            for item in order.items
        ],
        "subtotal": order.subtotal,
        "coupon_code": order.coupon_code,
        "discount_amount": order.discount_amount,
        "total_price": order.total_price,
        "status": order.status,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def _order_list(orders) -> OrderListResponse:
    products = {}
    return OrderListResponse(
        count=len(orders),
        orders=[OrderResponse(**_order_document(order, products)) for order in orders],
    )


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------
@order_router.post("/preview", response_model=PreviewResponse)
async def preview(body: PreviewOrderRequest) -> PreviewResponse:
    quote = preview_order([item.model_dump() for item in body.items], body.coupon_code)
    return PreviewResponse(**quote.as_dict())


@order_router.post("/confirm", status_code=201, response_model=OrderResponse)
async def confirm(body: ConfirmOrderRequest) -> OrderResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        email=body.email,
        items=json.dumps([item.model_dump() for item in body.items]),
        coupon_code=body.coupon_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).load(order_id)
    return OrderResponse(**_order_document(order))


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).load(order_id)
    return OrderResponse(**_order_document(order))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@order_router.post("/lookup", response_model=OrderListResponse)
async def lookup_by_email(body: LookupOrdersRequest) -> OrderListResponse:
    return _order_list(current_domain.repository_for(Order).for_email(body.email))


@order_router.get("/customer/{customer_id}", response_model=OrderListResponse)
async def orders_for_customer(customer_id: str) -> OrderListResponse:
    return _order_list(current_domain.repository_for(Order).for_customer(customer_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).load(order_id)
    return OrderResponse(**_order_document(order))


@order_router.get("", response_model=OrderListResponse)
async def list_orders(status: str | None = None) -> OrderListResponse:
    return _order_list(current_domain.repository_for(Order).listing(status))
