"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class ProductSummarySchema(BaseModel):
    product_id: str
    title: str | None = None
    price: float | None = None  # None when the product has left the catalogue
    images: list[str] = []


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PreviewOrderRequest(BaseModel):
    items: list[CartItemSchema]
    coupon_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-001", "quantity": 2},
                        {"product_id": "prod-002", "quantity": 1},
                    ],
                    "coupon_code": "SAVE10",
                }
            ]
        }
    }


class ConfirmOrderRequest(BaseModel):
    customer_id: str
    email: str
    items: list[CartItemSchema]
    coupon_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "email": "jane@example.com",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "coupon_code": "SAVE10",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class LookupOrdersRequest(BaseModel):
    email: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PreviewLineResponse(BaseModel):
    product: ProductSummarySchema
    unit_price: float
    quantity: int
    line_total: float


class PreviewResponse(BaseModel):
    items: list[PreviewLineResponse]
    subtotal: float
    coupon: dict[str, Any] | None = None
    discount_amount: float
    total_price: float


class OrderLineResponse(BaseModel):
    product: ProductSummarySchema
    quantity: int
    unit_price: float
    line_total: float


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    email: str
    items: list[OrderLineResponse]
    subtotal: float
    coupon_code: str | None = None
    discount_amount: float
    total_price: float
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    count: int
    orders: list[OrderResponse]
