"""Request bodies for the HTTP API.

Field names are camelCase on the wire, as the storefront sends them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemIn(CamelModel):
    product_id: str
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None


class OrderCreateRequest(CamelModel):
    user_id: Optional[str] = None
    user_email: str
    user_name: str = ""
    user_phone: str = ""
    items: List[OrderItemIn]
    subtotal: Optional[Decimal] = None
    shipping: Decimal = Decimal("0")
    discount: Optional[Decimal] = None
    total: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    payment_method: str = "cod"
    payment_screenshot: Optional[str] = None
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    notes: str = ""


class StatusRequest(CamelModel):
    status: str
    tracking_number: Optional[str] = None


class ShippingRequest(CamelModel):
    order_id: int
    status: str
    tracking_number: Optional[str] = None


class OrderUpdateRequest(CamelModel):
    """Admin edit. Unknown keys are kept so the handler can reject them by name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    notes: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    payment_screenshot: Optional[str] = None
    tracking_number: Optional[str] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None


class CouponCreateRequest(CamelModel):
    code: str
    type: str
    value: Decimal
    min_order_amount: Decimal = Decimal("0")
    max_uses: int = 0
    expires_at: Optional[datetime] = None


class CouponUpdateRequest(CamelModel):
    """Either ``{action: "use", code}`` or an admin edit keyed by ``id``."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )

    action: Optional[str] = None
    code: Optional[str] = None
    id: Optional[str] = None
    is_active: Optional[bool] = None
    max_uses: Optional[int] = None
    expires_at: Optional[datetime] = None
    min_order_amount: Optional[Decimal] = None


class ReviewCreateRequest(CamelModel):
    product_id: str
    user_id: str
    rating: int
    title: str = ""
    comment: str = ""
    user_name: Optional[str] = None


class ReviewActionRequest(CamelModel):
    review_id: str
    action: str


class InventoryCheckRequest(CamelModel):
    threshold: Optional[int] = None


class ProductCreateRequest(CamelModel):
    name: str
    price: Decimal
    stock: int = 0
    slug: Optional[str] = None
    status: str = "active"
    compare_at_price: Optional[Decimal] = None
    low_stock_threshold: Optional[int] = None
    images: List[str] = Field(default_factory=list)


class WishlistRequest(CamelModel):
    user_id: str
    product_id: str


class SendCodeRequest(CamelModel):
    email: str
    user_id: str


class VerifyCodeRequest(CamelModel):
    user_id: str
    code: str


class AdminSessionRequest(CamelModel):
    secret: str
