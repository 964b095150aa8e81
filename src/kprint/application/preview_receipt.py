"""Application service: Preview Receipt use case.

Renders an order's receipt as text without touching the queue or the
printer; the same output the print-dialog fallback shows.
"""

from __future__ import annotations

from kprint.domain.exceptions import EntityNotFoundError
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.repository.order_repository import OrderRepository
from kprint.domain.service.receipt_formatter import ReceiptFormatter


class PreviewReceiptHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        formatter: ReceiptFormatter,
        renderer: ReceiptRenderer,
    ) -> None:
        self._order_repo = order_repo
        self._formatter = formatter
        self._renderer = renderer

    def handle(self, order_id: int) -> str:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        receipt = self._formatter.format(order)
        return self._renderer.render(receipt).decode("utf-8")
