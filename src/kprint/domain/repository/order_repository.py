"""Abstract repository for Order records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kprint.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist an updated order."""
