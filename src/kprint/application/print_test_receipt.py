"""Application service: Print Test Receipt use case.

Sends a fixed carry-out receipt straight to the printer, bypassing the
queue, so staff can check the whole path from encoder to paper.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo

from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.order import OrderType
from kprint.domain.model.printer import PrinterConfig, PrintResult
from kprint.domain.model.receipt import ReceiptData, ReceiptItem
from kprint.domain.model.value_objects import DEFAULT_CURRENCY, Money

logger = logging.getLogger(__name__)

TEST_INSTRUCTION = "This is a test print from the admin panel"


def build_test_receipt(
    now: datetime | None = None,
    currency: str = DEFAULT_CURRENCY,
    tz: tzinfo | None = None,
) -> ReceiptData:
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(tz) if tz is not None else now
    zero = Money.zero(currency)
    return ReceiptData(
        order_number=f"TEST-{int(now.timestamp() * 1000)}",
        order_date=local.strftime("%d %b %Y"),
        order_time=local.strftime("%I:%M %p").lower(),
        order_type=OrderType.CARRYOUT,
        customer_name="System Test",
        customer_phone="000-000-0000",
        items=(ReceiptItem(quantity=1, name="Test Print Item", price=zero),),
        subtotal=zero,
        delivery_fee=zero,
        tax=zero,
        discount=zero,
        total=zero,
        payment_status="TEST",
        payment_method="test",
        special_instructions=(TEST_INSTRUCTION,),
    )


class PrintTestReceiptHandler:

    def __init__(
        self,
        renderer: ReceiptRenderer,
        printer: PrinterGateway,
        currency: str = DEFAULT_CURRENCY,
        tz: tzinfo | None = None,
    ) -> None:
        self._renderer = renderer
        self._printer = printer
        self._currency = currency
        self._tz = tz

    def handle(self, config: PrinterConfig) -> PrintResult:
        receipt = build_test_receipt(currency=self._currency, tz=self._tz)
        payload = self._renderer.render(receipt)
        logger.info(
            "Sending test receipt %s (%d bytes) to %s",
            receipt.order_number,
            len(payload),
            config.address,
        )
        return self._printer.send(payload, config)
