"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from shopledger.application.admin_session import AdminSessionService
from shopledger.domain.repository.coupon_repository import CouponRepository
from shopledger.domain.repository.customer_repository import CustomerRepository
from shopledger.domain.repository.inventory_alert_repository import InventoryAlertRepository
from shopledger.domain.repository.key_value_store import KeyValueStore
from shopledger.domain.repository.order_repository import OrderRepository
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.repository.review_repository import ReviewRepository
from shopledger.domain.repository.wishlist_repository import WishlistRepository
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher
from shopledger.infrastructure.config import Settings
from shopledger.infrastructure.kv.memory_store import InMemoryKeyValueStore
from shopledger.infrastructure.notifications.logging_dispatcher import LoggingDispatcher
from shopledger.infrastructure.notifications.sendgrid_dispatcher import SendGridDispatcher
from shopledger.infrastructure.persistence.json_coupon_repository import JsonCouponRepository
from shopledger.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from shopledger.infrastructure.persistence.json_inventory_alert_repository import (
    JsonInventoryAlertRepository,
)
from shopledger.infrastructure.persistence.json_order_repository import JsonOrderRepository
from shopledger.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from shopledger.infrastructure.persistence.json_review_repository import JsonReviewRepository
from shopledger.infrastructure.persistence.json_wishlist_repository import (
    JsonWishlistRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    products: ProductRepository
    orders: OrderRepository
    coupons: CouponRepository
    reviews: ReviewRepository
    customers: CustomerRepository
    wishlists: WishlistRepository
    alerts: InventoryAlertRepository
    notifier: NotificationDispatcher
    store: KeyValueStore
    admin_sessions: AdminSessionService


def notification_dispatcher(settings: Settings) -> NotificationDispatcher:
    if not settings.sendgrid_api_key:
        logger.info("No SendGrid API key configured; emails are only logged")
        return LoggingDispatcher(settings.admin_email)
    return SendGridDispatcher(
        api_key=settings.sendgrid_api_key,
        from_email=settings.from_email,
        from_name=settings.from_name,
        admin_email=settings.admin_email,
        timeout=settings.email_timeout,
    )


def build_container(settings: Settings) -> Container:
    data_dir = settings.data_dir
    timeout = settings.store_timeout
    store = InMemoryKeyValueStore()
    return Container(
        settings=settings,
        products=JsonProductRepository(data_dir / "products.json", timeout),
        orders=JsonOrderRepository(
            data_dir / "orders.json", data_dir / "sequences.json", timeout
        ),
        coupons=JsonCouponRepository(data_dir / "coupons.json", timeout),
        reviews=JsonReviewRepository(data_dir / "reviews.json", timeout),
        customers=JsonCustomerRepository(data_dir / "customers.json", timeout),
        wishlists=JsonWishlistRepository(data_dir / "wishlists.json", timeout),
        alerts=JsonInventoryAlertRepository(data_dir / "inventory_alerts.json", timeout),
        notifier=notification_dispatcher(settings),
        store=store,
        admin_sessions=AdminSessionService(
            store, settings.admin_secret, settings.admin_session_ttl
        ),
    )


@lru_cache(maxsize=1)
def container() -> Container:
    return build_container(Settings.from_env())
