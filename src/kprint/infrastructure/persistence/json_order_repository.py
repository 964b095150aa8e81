"""JSON-file-backed implementation of OrderRepository.

Reads order records in the checkout system's own shape (snake_case keys,
amounts as numbers or strings) and writes back only what changed.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from kprint.domain.model.order import (
    Order,
    OrderItem,
    OrderType,
    PrintStatus,
    SelectedAddon,
    SelectedVariation,
)
from kprint.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from kprint.domain.repository.order_repository import OrderRepository
from kprint.infrastructure.persistence.json_store import JsonFileStore


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path, currency: str = DEFAULT_CURRENCY) -> None:
        self._store = JsonFileStore(file_path)
        self._currency = currency

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> None:
        with self._store.update() as orders:
            # Update in place so fields this codebase does not model survive
            for raw in orders:
                if raw["id"] == order.id:
                    raw["print_status"] = order.print_status.value
                    raw["print_attempts"] = order.print_attempts
                    break
            else:
                orders.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    def _money(self, value) -> Money | None:
        if value is None:
            return None
        return Money(Decimal(str(value)), self._currency)

    def _to_domain(self, raw: dict) -> Order:
        items = [
            OrderItem(
                item_name=i["item_name"],
                quantity=Quantity(int(i["quantity"])),
                subtotal=self._money(i.get("subtotal")),
                unit_price=self._money(i.get("unit_price")),
                selected_variation=(
                    SelectedVariation(
                        name=i["selected_variation"].get("name", ""),
                        option=i["selected_variation"].get("option", ""),
                        price_adjustment=self._money(
                            i["selected_variation"].get("price_adjustment")
                        ),
                    )
                    if i.get("selected_variation")
                    else None
                ),
                selected_addons=[
                    SelectedAddon(name=a["name"], price=self._money(a.get("price")))
                    for a in i.get("selected_addons") or []
                ],
                special_instructions=i.get("special_instructions"),
            )
            for i in raw.get("items") or []
        ]
        created_at = raw.get("created_at")
        order_type = raw.get("order_type")
        return Order(
            id=raw["id"],
            order_number=raw.get("order_number"),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            order_type=OrderType(order_type) if order_type else None,
            customer_name=raw.get("customer_name"),
            customer_phone=raw.get("customer_phone"),
            customer_phone_alt=raw.get("customer_phone_alt"),
            items=items,
            total=self._money(raw.get("total")),
            subtotal=self._money(raw.get("subtotal")),
            delivery_fee=self._money(raw.get("delivery_fee")),
            tax=self._money(raw.get("tax")),
            discount=self._money(raw.get("discount")),
            delivery_city=raw.get("delivery_city"),
            delivery_address=raw.get("delivery_address"),
            address_type=raw.get("address_type"),
            unit_number=raw.get("unit_number"),
            delivery_instructions=raw.get("delivery_instructions"),
            payment_status=raw.get("payment_status"),
            payment_method=raw.get("payment_method"),
            estimated_prep_time=raw.get("estimated_prep_time"),
            print_status=PrintStatus(raw.get("print_status") or "pending"),
            print_attempts=raw.get("print_attempts") or 0,
        )

    @staticmethod
    def _to_raw(order: Order) -> dict:
        def amount(m: Money | None) -> str | None:
            return str(m.amount) if m is not None else None

        return {
            "id": order.id,
            "order_number": order.order_number,
            "created_at": order.created_at.isoformat() if order.created_at else None,
            "order_type": order.order_type.value if order.order_type else None,
            "customer_name": order.customer_name,
            "customer_phone": order.customer_phone,
            "customer_phone_alt": order.customer_phone_alt,
            "delivery_city": order.delivery_city,
            "delivery_address": order.delivery_address,
            "address_type": order.address_type,
            "unit_number": order.unit_number,
            "delivery_instructions": order.delivery_instructions,
            "subtotal": amount(order.subtotal),
            "delivery_fee": amount(order.delivery_fee),
            "tax": amount(order.tax),
            "discount": amount(order.discount),
            "total": amount(order.total),
            "payment_status": order.payment_status,
            "payment_method": order.payment_method,
            "estimated_prep_time": order.estimated_prep_time,
            "print_status": order.print_status.value,
            "print_attempts": order.print_attempts,
            "items": [
                {
                    "item_name": item.item_name,
                    "quantity": item.quantity.value,
                    "unit_price": amount(item.unit_price),
                    "subtotal": amount(item.subtotal),
                    "selected_variation": (
                        {
                            "name": item.selected_variation.name,
                            "option": item.selected_variation.option,
                            "price_adjustment": amount(
                                item.selected_variation.price_adjustment
                            ),
                        }
                        if item.selected_variation
                        else None
                    ),
                    "selected_addons": [
                        {"name": a.name, "price": amount(a.price)}
                        for a in item.selected_addons
                    ],
                    "special_instructions": item.special_instructions,
                }
                for item in order.items
            ],
        }

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._store.load()
