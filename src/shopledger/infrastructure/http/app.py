"""HTTP/JSON API (FastAPI).

Thin adapter: each route parses its body, calls one application handler
and renders the DTO. Every error body is ``{"error": "<message>"}``.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from shopledger.application.add_product import AddProductHandler
from shopledger.application.advance_order_status import (
    AdvanceOrderStatusHandler,
    ShippingUpdateHandler,
)
from shopledger.application.check_low_stock import (
    CheckLowStockHandler,
    ListInventoryAlertsHandler,
)
from shopledger.application.create_coupon import CreateCouponHandler
from shopledger.application.create_order import CreateOrderHandler
from shopledger.application.dto import OrderInput, OrderItemSpec
from shopledger.application.list_reviews import ListReviewsHandler
from shopledger.application.mark_review_helpful import MarkReviewHelpfulHandler
from shopledger.application.redeem_coupon import RedeemCouponHandler
from shopledger.application.show_inventory import ShowInventoryHandler
from shopledger.application.show_order import ListOrdersHandler
from shopledger.application.submit_review import SubmitReviewHandler
from shopledger.application.track_order import TrackOrderHandler
from shopledger.application.update_coupon import ListCouponsHandler, UpdateCouponHandler
from shopledger.application.update_order import UpdateOrderHandler
from shopledger.application.validate_coupon import ValidateCouponHandler
from shopledger.application.verification_code import (
    SendVerificationCodeHandler,
    VerifyCodeHandler,
)
from shopledger.application.wishlist import (
    AddToWishlistHandler,
    RemoveFromWishlistHandler,
    ShowWishlistHandler,
)
from shopledger.domain.exceptions import (
    ConflictError,
    DependencyError,
    DomainException,
    InvalidStateTransition,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from shopledger.infrastructure.bootstrap import Container
from shopledger.infrastructure.http.schemas import (
    AdminSessionRequest,
    CouponCreateRequest,
    CouponUpdateRequest,
    InventoryCheckRequest,
    OrderCreateRequest,
    OrderUpdateRequest,
    ProductCreateRequest,
    ReviewActionRequest,
    ReviewCreateRequest,
    SendCodeRequest,
    ShippingRequest,
    StatusRequest,
    VerifyCodeRequest,
    WishlistRequest,
)

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[DomainException], int]] = [
    (ValidationError, 400),
    (InvalidStateTransition, 400),
    (UnauthorizedError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DependencyError, 500),
]

# Request field names -> UpdateOrderHandler names; anything else passes through
ORDER_FIELDS = {
    "user_email": "email",
    "user_name": "name",
    "user_phone": "phone",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def to_json(value: Any) -> Any:
    """Render DTOs with camelCase keys; plain dicts pass through untouched."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(f.name): to_json(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, list):
        return [to_json(v) for v in value]
    return value


def status_code_for(exc: DomainException) -> int:
    for cls, code in STATUS_CODES:
        if isinstance(exc, cls):
            return code
    return 500


def _rename(body: dict, names: dict[str, str]) -> dict:
    return {names.get(key, key): value for key, value in body.items()}


def create_app(c: Container) -> FastAPI:
    app = FastAPI(title="shopledger", version="0.1.0")

    # --- Errors ---------------------------------------------------------------

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        code = status_code_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{where}: {first.get('msg', 'invalid request')}" if where else "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:].strip()
        c.admin_sessions.validate(token)

    def advance_handler() -> AdvanceOrderStatusHandler:
        return AdvanceOrderStatusHandler(c.orders, c.products, c.notifier)

    # --- Orders ---------------------------------------------------------------

    @app.post("/orders", status_code=201)
    def create_order(body: OrderCreateRequest) -> dict:
        handler = CreateOrderHandler(c.orders, c.products, c.coupons, c.customers, c.notifier)
        dto = handler.handle(OrderInput(
            email=body.user_email,
            name=body.user_name,
            phone=body.user_phone,
            user_id=body.user_id,
            items=[
                OrderItemSpec(i.product_id, i.quantity, i.size, i.color) for i in body.items
            ],
            shipping=str(body.shipping),
            subtotal=None if body.subtotal is None else str(body.subtotal),
            discount=None if body.discount is None else str(body.discount),
            total=None if body.total is None else str(body.total),
            coupon_code=body.coupon_code,
            payment_method=body.payment_method,
            payment_screenshot=body.payment_screenshot,
            shipping_address=body.shipping_address,
            notes=body.notes,
        ))
        return {"success": True, "message": "Order created successfully", **to_json(dto)}

    @app.get("/orders", dependencies=[Depends(require_admin)])
    def list_orders(userId: Optional[str] = None) -> dict:
        return {"orders": to_json(ListOrdersHandler(c.orders).handle(userId))}

    @app.put("/orders", dependencies=[Depends(require_admin)])
    def update_order(body: OrderUpdateRequest) -> dict:
        fields = body.model_dump(exclude_unset=True, exclude={"id"})
        UpdateOrderHandler(c.orders, c.products).handle(body.id, _rename(fields, ORDER_FIELDS))
        return {"success": True, "message": "Order updated successfully"}

    @app.get("/orders/track")
    def track_order(orderNumber: Optional[str] = None, email: Optional[str] = None) -> dict:
        if not orderNumber:
            raise ValidationError("Order number is required")
        return {"order": to_json(TrackOrderHandler(c.orders).handle(orderNumber, email))}

    @app.post("/orders/{order_id}/status", dependencies=[Depends(require_admin)])
    def advance_order(order_id: int, body: StatusRequest) -> dict:
        dto = advance_handler().handle(order_id, body.status, body.tracking_number)
        return {"success": True, **to_json(dto)}

    # --- Coupons --------------------------------------------------------------

    @app.get("/coupons")
    def coupons(
        code: Optional[str] = None,
        orderAmount: str = "0",
        authorization: Optional[str] = Header(default=None),
    ) -> dict:
        if code:
            return to_json(ValidateCouponHandler(c.coupons).handle(code, orderAmount))
        require_admin(authorization)
        return {"coupons": to_json(ListCouponsHandler(c.coupons).handle())}

    @app.post("/coupons", status_code=201, dependencies=[Depends(require_admin)])
    def create_coupon(body: CouponCreateRequest) -> dict:
        dto = CreateCouponHandler(c.coupons).handle(
            code=body.code,
            type=body.type,
            value=str(body.value),
            min_order_amount=str(body.min_order_amount),
            max_uses=body.max_uses,
            expires_at=body.expires_at,
        )
        return {"success": True, "id": dto.id}

    @app.put("/coupons")
    def update_coupon(
        body: CouponUpdateRequest,
        authorization: Optional[str] = Header(default=None),
    ) -> dict:
        if body.action == "use":
            dto = RedeemCouponHandler(c.coupons).handle(body.code or "")
            return {"success": True, "usedCount": dto.used_count}

        require_admin(authorization)
        if not body.id:
            raise ValidationError("id is required")
        fields = body.model_dump(exclude_unset=True, exclude={"id", "action"})
        dto = UpdateCouponHandler(c.coupons).handle(body.id, fields)
        return {"success": True, "coupon": to_json(dto)}

    # --- Reviews --------------------------------------------------------------

    @app.get("/reviews")
    def list_reviews(productId: Optional[str] = None) -> dict:
        return to_json(ListReviewsHandler(c.reviews).handle(productId or ""))

    @app.post("/reviews", status_code=201)
    def create_review(body: ReviewCreateRequest) -> dict:
        dto = SubmitReviewHandler(c.reviews, c.products).handle(
            product_id=body.product_id,
            user_id=body.user_id,
            rating=body.rating,
            title=body.title,
            comment=body.comment,
            user_name=body.user_name,
        )
        return {"success": True, "id": dto.id}

    @app.put("/reviews")
    def review_action(body: ReviewActionRequest) -> dict:
        if body.action != "helpful":
            raise ValidationError("reviewId and action are required")
        helpful = MarkReviewHelpfulHandler(c.reviews).handle(body.review_id)
        return {"success": True, "helpful": helpful}

    # --- Notifications --------------------------------------------------------

    @app.post("/notifications/inventory", dependencies=[Depends(require_admin)])
    def check_inventory(body: InventoryCheckRequest) -> dict:
        threshold = c.settings.low_stock_threshold if body.threshold is None else body.threshold
        handler = CheckLowStockHandler(c.products, c.alerts, c.notifier)
        return to_json(handler.handle(threshold))

    @app.get("/notifications/inventory", dependencies=[Depends(require_admin)])
    def inventory_alerts() -> dict:
        return {"alerts": to_json(ListInventoryAlertsHandler(c.alerts).handle())}

    @app.post("/notifications/shipping", dependencies=[Depends(require_admin)])
    def shipping_update(body: ShippingRequest):
        dto = ShippingUpdateHandler(advance_handler()).handle(
            body.order_id, body.status, body.tracking_number
        )
        if not dto.notification_sent:
            return JSONResponse(status_code=500, content={"error": dto.warning})
        return {
            "message": "Shipping update sent successfully",
            "status": dto.status,
            "email": dto.email,
        }

    # --- Catalog --------------------------------------------------------------

    @app.get("/products")
    def list_products() -> dict:
        inventory = ShowInventoryHandler(c.products).handle(c.settings.low_stock_threshold)
        return {"products": to_json(inventory)}

    @app.post("/products", status_code=201, dependencies=[Depends(require_admin)])
    def create_product(body: ProductCreateRequest) -> dict:
        product = AddProductHandler(c.products).handle(
            name=body.name,
            price=str(body.price),
            stock=body.stock,
            slug=body.slug,
            status=body.status,
            compare_at_price=None if body.compare_at_price is None else str(body.compare_at_price),
            low_stock_threshold=body.low_stock_threshold,
            images=body.images,
        )
        return {"success": True, "id": product.id, "slug": product.slug}

    # --- Wishlist -------------------------------------------------------------

    @app.get("/wishlist")
    def show_wishlist(userId: Optional[str] = None) -> dict:
        return {"items": to_json(ShowWishlistHandler(c.wishlists).handle(userId or ""))}

    @app.post("/wishlist")
    def add_to_wishlist(body: WishlistRequest) -> dict:
        added = AddToWishlistHandler(c.wishlists, c.products).handle(body.user_id, body.product_id)
        return {"success": True, "added": added}

    @app.delete("/wishlist")
    def remove_from_wishlist(userId: Optional[str] = None, productId: Optional[str] = None) -> dict:
        removed = RemoveFromWishlistHandler(c.wishlists).handle(userId or "", productId or "")
        return {"success": True, "removed": removed}

    # --- Auth -----------------------------------------------------------------

    @app.post("/auth/2fa/send")
    def send_code(body: SendCodeRequest) -> dict:
        SendVerificationCodeHandler(c.store, c.notifier).handle(body.user_id, body.email)
        return {"success": True, "message": "Verification code sent"}

    @app.post("/auth/2fa/verify")
    def verify_code(body: VerifyCodeRequest) -> dict:
        VerifyCodeHandler(c.store).handle(body.user_id, body.code)
        return {"success": True, "message": "Verification successful"}

    @app.post("/admin/sessions", status_code=201)
    def admin_session(body: AdminSessionRequest) -> dict:
        return {"token": c.admin_sessions.issue(body.secret)}

    return app
