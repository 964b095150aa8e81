"""Order record as produced by the checkout workflow.

The order lifecycle lives elsewhere; this module only models what the
printing pipeline reads (everything needed for a receipt) and the two
fields it writes back (``print_status`` and ``print_attempts``).

Fields are optional on purpose: the repository reconstitutes whatever
the store holds, and the receipt formatter decides which gaps are fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from kprint.domain.exceptions import ValidationError
from kprint.domain.model.value_objects import Money, Quantity


class OrderType(Enum):
    DELIVERY = "delivery"
    CARRYOUT = "carryout"


class PrintStatus(Enum):
    PENDING = "pending"
    PRINTED = "printed"
    FAILED = "failed"


@dataclass(frozen=True)
class SelectedVariation:
    name: str
    option: str
    price_adjustment: Money | None = None


@dataclass(frozen=True)
class SelectedAddon:
    name: str
    price: Money | None = None


@dataclass
class OrderItem:
    """A single line of an order, priced at checkout time."""

    item_name: str
    quantity: Quantity
    subtotal: Money | None  # line price, quantity applied
    unit_price: Money | None = None
    selected_variation: SelectedVariation | None = None
    selected_addons: list[SelectedAddon] = field(default_factory=list)
    special_instructions: str | None = None


@dataclass
class Order:
    """Aggregate root for a customer order, as far as printing cares."""

    id: int | None
    order_number: str | None
    created_at: datetime | None
    order_type: OrderType | None
    customer_name: str | None
    customer_phone: str | None
    items: list[OrderItem] = field(default_factory=list)
    total: Money | None = None
    subtotal: Money | None = None
    delivery_fee: Money | None = None
    tax: Money | None = None
    discount: Money | None = None
    customer_phone_alt: str | None = None
    delivery_city: str | None = None
    delivery_address: str | None = None
    address_type: str | None = None
    unit_number: str | None = None
    delivery_instructions: str | None = None
    payment_status: str | None = None
    payment_method: str | None = None
    estimated_prep_time: int | None = None
    print_status: PrintStatus = PrintStatus.PENDING
    print_attempts: int = 0

    # --- Print mirror ---------------------------------------------------------

    def record_print_outcome(self, status: PrintStatus, attempts: int) -> None:
        """Mirror the outcome of a print job onto the order.

        Only terminal outcomes are mirrored; a retry in progress leaves
        the order untouched.
        """
        if status == PrintStatus.PENDING:
            raise ValidationError("Only printed/failed outcomes are mirrored")
        if attempts < 0:
            raise ValidationError("Print attempts cannot be negative")
        self.print_status = status
        self.print_attempts = attempts
