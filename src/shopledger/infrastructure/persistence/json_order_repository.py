"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from shopledger.domain.model.order import (
    ContactInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    format_order_number,
)
from shopledger.domain.model.value_objects import Money, Quantity
from shopledger.domain.repository.order_repository import OrderRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
    next_numeric_id,
)

ORDER_NUMBER_SEQUENCE = "order_number"


class JsonOrderRepository(OrderRepository):

    def __init__(
        self,
        file_path: Path,
        sequence_path: Path | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._collection = JsonCollection(file_path, timeout)
        self._sequences = JsonCollection(
            sequence_path or file_path.with_name("sequences.json"), timeout
        )

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        return next_numeric_id(self._collection.read())

    def next_order_number(self) -> str:
        with self._sequences.transaction() as records:
            for raw in records:
                if raw["name"] == ORDER_NUMBER_SEQUENCE:
                    raw["value"] += 1
                    return format_order_number(raw["value"])
            records.append({"name": ORDER_NUMBER_SEQUENCE, "value": 1})
            return format_order_number(1)

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._collection.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._collection.read():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_all(self, user_id: str | None = None) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._collection.read()
            if user_id is None or raw["user_id"] == user_id
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def save(self, order: Order) -> None:
        with self._collection.transaction() as records:
            if order.id is None:
                order.id = next_numeric_id(records)

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == order.id:
                    records[i] = self._to_raw(order)
                    break
            else:
                records.append(self._to_raw(order))

    def save_if_status(self, order: Order, expected: OrderStatus) -> bool:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == order.id:
                    if raw["status"] != expected.value:
                        return False
                    records[i] = self._to_raw(order)
                    return True
        return False

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "email": order.contact.email,
            "name": order.contact.name,
            "phone": order.contact.phone,
            "status": order.status.value,
            "payment_method": order.payment_method.value,
            "payment_status": order.payment_status.value,
            "payment_screenshot": order.payment_screenshot,
            "currency": order.total.currency,
            "subtotal": str(order.subtotal.amount),
            "shipping": str(order.shipping.amount),
            "discount": str(order.discount.amount),
            "total": str(order.total.amount),
            "coupon_code": order.coupon_code,
            "shipping_address": order.shipping_address,
            "tracking_number": order.tracking_number,
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "size": item.size,
                    "color": item.color,
                    "image": item.image,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "EGP")

        def money(key: str) -> Money:
            return Money(Decimal(raw[key]), currency)

        items = [
            OrderLineItem(
                product_id=i["product_id"],
                name=i["name"],
                unit_price=Money(Decimal(i["unit_price"]), currency),
                quantity=Quantity(i["quantity"]),
                size=i.get("size"),
                color=i.get("color"),
                image=i.get("image"),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            contact=ContactInfo(email=raw["email"], name=raw.get("name", ""), phone=raw.get("phone", "")),
            items=items,
            subtotal=money("subtotal"),
            shipping=money("shipping"),
            discount=money("discount"),
            total=money("total"),
            payment_method=PaymentMethod(raw["payment_method"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            status=OrderStatus(raw["status"]),
            coupon_code=raw.get("coupon_code"),
            payment_screenshot=raw.get("payment_screenshot"),
            shipping_address=raw.get("shipping_address") or {},
            tracking_number=raw.get("tracking_number"),
            notes=raw.get("notes", ""),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
