"""Domain service: Receipt Formatter.

Turns an order record into an immutable ReceiptData snapshot.  Pure and
deterministic for a given order and timezone; the only side effect is a
diagnostic log line when the order's pricing does not add up.
"""

from __future__ import annotations

import logging
import re
from datetime import tzinfo

from kprint.domain.exceptions import MissingFieldError
from kprint.domain.model.order import Order, OrderItem
from kprint.domain.model.receipt import ReceiptData, ReceiptItem
from kprint.domain.model.value_objects import Money

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "Paystack"
DEFAULT_PREP_TIME = 25

_REQUIRED_FIELDS = (
    "order_number",
    "created_at",
    "order_type",
    "customer_name",
    "customer_phone",
    "total",
    "payment_status",
)


def format_phone_number(phone: str) -> str:
    """Group Nigerian numbers for print; leave anything else untouched."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 11 and digits.startswith("0"):
        return f"{digits[:4]} {digits[4:7]} {digits[7:]}"
    if len(digits) == 13 and digits.startswith("234"):
        return f"+{digits[:3]} {digits[3:6]} {digits[6:9]} {digits[9:]}"
    return phone


def format_payment_status(status: str) -> str:
    return "PAID" if status == "success" else status.upper()


class ReceiptFormatter:

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def format(self, order: Order) -> ReceiptData:
        """Build the receipt for *order*.

        Raises MissingFieldError when a required order field is absent;
        a receipt is never built from a partial record.
        """
        for name in _REQUIRED_FIELDS:
            value = getattr(order, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise MissingFieldError(name, order.id)
        for n, item in enumerate(order.items):
            if item.subtotal is None:
                raise MissingFieldError(f"items[{n}].subtotal", order.id)

        currency = order.total.currency
        created = order.created_at
        if self._tz is not None and created.tzinfo is not None:
            created = created.astimezone(self._tz)

        items = tuple(self._format_item(item) for item in order.items)
        special = tuple(
            f"{item.item_name}: {item.special_instructions}"
            for item in order.items
            if item.special_instructions
        )

        subtotal = order.subtotal
        if subtotal is None:
            subtotal = sum((i.price for i in items), Money.zero(currency))

        receipt = ReceiptData(
            order_id=order.id,
            order_number=order.order_number,
            order_date=created.strftime("%d %b %Y"),
            order_time=created.strftime("%I:%M %p").lower(),
            order_type=order.order_type,
            customer_name=order.customer_name,
            customer_phone=format_phone_number(order.customer_phone),
            customer_phone_alt=(
                format_phone_number(order.customer_phone_alt)
                if order.customer_phone_alt
                else None
            ),
            delivery_address=order.delivery_address or None,
            delivery_city=order.delivery_city or None,
            address_type=order.address_type or None,
            unit_number=order.unit_number or None,
            delivery_instructions=order.delivery_instructions or None,
            items=items,
            subtotal=subtotal,
            delivery_fee=order.delivery_fee or Money.zero(currency),
            tax=order.tax or Money.zero(currency),
            discount=order.discount or Money.zero(currency),
            total=order.total,
            payment_status=format_payment_status(order.payment_status),
            payment_method=order.payment_method or DEFAULT_PAYMENT_METHOD,
            estimated_prep_time=order.estimated_prep_time or DEFAULT_PREP_TIME,
            special_instructions=special,
        )

        if receipt.pricing_mismatch:
            logger.warning(
                "Order %s pricing mismatch: subtotal+fee+tax-discount=%s, total=%s "
                "(printing total as given)",
                order.order_number,
                receipt.expected_total,
                order.total.amount,
            )
        return receipt

    @staticmethod
    def _format_item(item: OrderItem) -> ReceiptItem:
        variation = item.selected_variation.option if item.selected_variation else None
        return ReceiptItem(
            quantity=item.quantity.value,
            name=item.item_name,
            variation=variation or None,
            addons=tuple(a.name for a in item.selected_addons),
            special_instructions=item.special_instructions or None,
            price=item.subtotal,
        )
