"""Receipt snapshot: everything a renderer needs, nothing more.

Built once per print request by the receipt formatter, embedded in a
print job, and discarded after rendering.  Never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from kprint.domain.model.order import OrderType
from kprint.domain.model.value_objects import Money


@dataclass(frozen=True)
class ReceiptItem:
    quantity: int
    name: str
    price: Money  # line price, quantity already applied
    variation: str | None = None
    addons: tuple[str, ...] = ()
    special_instructions: str | None = None


@dataclass(frozen=True)
class ReceiptData:
    """Immutable receipt model.

    ``total`` is authoritative even when it disagrees with
    ``subtotal + delivery_fee + tax - discount``; see
    :attr:`pricing_mismatch`.
    """

    order_number: str
    order_date: str
    order_time: str
    order_type: OrderType
    customer_name: str
    customer_phone: str
    items: tuple[ReceiptItem, ...]
    subtotal: Money
    delivery_fee: Money
    tax: Money
    discount: Money
    total: Money
    payment_status: str
    payment_method: str
    order_id: int | None = None
    customer_phone_alt: str | None = None
    delivery_address: str | None = None
    delivery_city: str | None = None
    address_type: str | None = None
    unit_number: str | None = None
    delivery_instructions: str | None = None
    estimated_prep_time: int | None = None
    special_instructions: tuple[str, ...] = field(default_factory=tuple)

    @property
    def currency(self) -> str:
        return self.total.currency

    @property
    def expected_total(self) -> Decimal:
        """``subtotal + delivery_fee + tax - discount`` as a Decimal."""
        return (
            self.subtotal.amount
            + self.delivery_fee.amount
            + self.tax.amount
            - self.discount.amount
        )

    @property
    def pricing_mismatch(self) -> bool:
        return self.expected_total != self.total.amount

    @property
    def shows_delivery_block(self) -> bool:
        return self.order_type == OrderType.DELIVERY and bool(self.delivery_address)


@dataclass(frozen=True)
class ReceiptBranding:
    """Fixed header and footer text printed on every receipt."""

    header: str = "JOLLOF EXPRESS"
    thank_you: str = "Thank You!"
    messages: tuple[str, ...] = (
        "We appreciate your order!",
        "Enjoy authentic Nigerian flavors",
        "made with love.",
    )
    footer: tuple[str, ...] = (
        "Order again: www.jollofexpress.ng",
        "Follow us @jollofexpress",
    )
    promo: str | None = "REFER A FRIEND & GET 10% OFF!"
