"""Plain-text receipt renderer.

Same ReceiptData, same 48-column layout as the thermal receipt, but no
control codes: used by the browser print-dialog fallback and by
``kprint receipt preview``.
"""

from __future__ import annotations

from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.receipt import ReceiptBranding, ReceiptData
from kprint.infrastructure.printer.escpos import LINE_WIDTH, line, pad_right

BULLET = "•"
WARNING_LABEL = "⚠️  SPECIAL INSTRUCTIONS:"


class PlainTextRenderer(ReceiptRenderer):

    def __init__(
        self, branding: ReceiptBranding | None = None, width: int = LINE_WIDTH
    ) -> None:
        self._branding = branding or ReceiptBranding()
        self._width = width

    def render(self, receipt: ReceiptData) -> bytes:
        return self.render_text(receipt).encode("utf-8")

    def render_text(self, receipt: ReceiptData) -> str:
        w = self._width
        branding = self._branding
        lines: list[str] = []

        def center(text: str) -> str:
            return " " * max(0, (w - len(text)) // 2) + text

        lines += [line("=", w), center(branding.header), line("=", w), ""]
        lines += [center(f"ORDER #{receipt.order_number}"), ""]
        lines += [f"Date: {receipt.order_date} {receipt.order_time}", line("-", w), ""]

        lines.append("CUSTOMER DETAILS")
        lines.append(f"Name: {receipt.customer_name}")
        lines.append(f"Phone: {receipt.customer_phone}")
        if receipt.customer_phone_alt:
            lines.append(f"Alt: {receipt.customer_phone_alt}")
        lines += [f"Type: {receipt.order_type.value.upper()}", ""]

        if receipt.shows_delivery_block:
            lines.append("DELIVERY ADDRESS")
            if receipt.delivery_city:
                lines.append(receipt.delivery_city)
            lines.append(receipt.delivery_address)
            if receipt.address_type:
                lines.append(f"Type: {receipt.address_type}")
            if receipt.unit_number:
                lines.append(f"Unit: {receipt.unit_number}")
            if receipt.delivery_instructions:
                lines += ["", "Delivery Instructions:", receipt.delivery_instructions]
            lines.append("")

        lines += [line("-", w), "ITEMS", line("-", w)]
        for item in receipt.items:
            lines.append(f"{item.quantity}x {item.name}")
            if item.variation:
                lines.append(f"   {BULLET} {item.variation}")
            if item.addons:
                lines.append(f"   {BULLET} Add-ons: {', '.join(item.addons)}")
            lines += [pad_right("", str(item.price), w), ""]

        if receipt.special_instructions:
            lines += [line("-", w), WARNING_LABEL]
            lines += [f"   {BULLET} {s}" for s in receipt.special_instructions]
            lines.append("")

        lines.append(line("-", w))
        lines.append(pad_right("Subtotal:", str(receipt.subtotal), w))
        if not receipt.delivery_fee.is_zero:
            lines.append(pad_right("Delivery Fee:", str(receipt.delivery_fee), w))
        if not receipt.tax.is_zero:
            lines.append(pad_right("Tax:", str(receipt.tax), w))
        if not receipt.discount.is_zero:
            lines.append(pad_right("Discount:", f"-{receipt.discount}", w))
        lines += [line("=", w), pad_right("TOTAL:", str(receipt.total), w), line("=", w), ""]
        lines += [f"Payment: {receipt.payment_status} ({receipt.payment_method})", ""]

        lines.append(line("-", w))
        if receipt.estimated_prep_time:
            lines.append(center(f"Prep Time: ~{receipt.estimated_prep_time} min"))
        lines += [line("-", w), ""]

        lines += [center(branding.thank_you), ""]
        lines += [center(m) for m in branding.messages]
        lines += ["", line("-", w)]
        lines += [center(f) for f in branding.footer]
        if branding.promo:
            lines += ["", center(branding.promo)]
        lines.append(line("=", w))

        return "\n".join(lines)
