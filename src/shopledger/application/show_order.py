"""Application service: Show Order / List Orders use cases (queries)."""

from __future__ import annotations

from shopledger.application.dto import OrderDTO, to_order_dto
from shopledger.domain.exceptions import NotFoundError
from shopledger.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")
        return to_order_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, user_id: str | None = None) -> list[OrderDTO]:
        return [to_order_dto(order) for order in self._order_repo.list_all(user_id)]
