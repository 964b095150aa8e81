"""ESC/POS command set and receipt encoder for 80 mm thermal printers.

Everything here is pure: the encoder turns a ReceiptData into the exact
byte stream the printer expects, and the status helpers decode the single
byte a printer returns to a DLE EOT query.  No sockets, no logging.

Printers from another vendor need another command table, not another
pipeline: swap this module, keep the renderer interface.
"""

from __future__ import annotations

from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.printer import PaperStatus, PrinterStatus
from kprint.domain.model.receipt import ReceiptBranding, ReceiptData, ReceiptItem
from kprint.domain.model.value_objects import Money, format_currency

ESC = b"\x1b"
GS = b"\x1d"
DLE = b"\x10"
EOT = b"\x04"
LF = b"\n"

# --- Setup --------------------------------------------------------------------
INITIALIZE = ESC + b"@"
CHARSET_USA = ESC + b"R\x00"
LINE_SPACING_DEFAULT = ESC + b"2"
LINE_SPACING_NARROW = ESC + b"3\x10"

# --- Alignment ----------------------------------------------------------------
ALIGN_LEFT = ESC + b"a\x00"
ALIGN_CENTER = ESC + b"a\x01"
ALIGN_RIGHT = ESC + b"a\x02"

# --- Text size (ESC ! n) ------------------------------------------------------
SIZE_NORMAL = ESC + b"!\x00"
SIZE_DOUBLE_HEIGHT = ESC + b"!\x10"
SIZE_DOUBLE_WIDTH = ESC + b"!\x20"
SIZE_LARGE = ESC + b"!\x30"

# --- Emphasis -----------------------------------------------------------------
BOLD_ON = ESC + b"E\x01"
BOLD_OFF = ESC + b"E\x00"
UNDERLINE_ON = ESC + b"-\x01"
UNDERLINE_OFF = ESC + b"-\x00"
INVERT_ON = GS + b"B\x01"
INVERT_OFF = GS + b"B\x00"

# --- Paper --------------------------------------------------------------------
CUT = GS + b"V\x41\x00"  # feed 0 lines, full cut

# --- Real-time status queries (DLE EOT n) -------------------------------------
STATUS_PRINTER = DLE + EOT + b"\x01"
STATUS_PAPER = DLE + EOT + b"\x04"

# Printer status byte
OFFLINE_BIT = 0x08
COVER_OPEN_BIT = 0x20
ERROR_BIT = 0x40
# Paper status byte
PAPER_ABSENT_MASK = 0x60
PAPER_NEAR_END_MASK = 0x0C

LINE_WIDTH = 48
BULLET = "-"
WARNING_PREFIX = "!!"


def pad_right(left: str, right: str, width: int = LINE_WIDTH) -> str:
    """Push *right* against the right margin, never truncating.

    At least one space always separates the two parts, so overlong lines
    simply wrap on paper instead of fusing label and value.
    """
    spacing = max(1, width - len(left) - len(right))
    return left + " " * spacing + right


def line(char: str, width: int = LINE_WIDTH) -> str:
    return char * width


def decode_printer_status(status_byte: int) -> PrinterStatus:
    return PrinterStatus(
        connected=True,
        online=not status_byte & OFFLINE_BIT,
        cover_closed=not status_byte & COVER_OPEN_BIT,
        has_error=bool(status_byte & ERROR_BIT),
        raw=status_byte,
    )


def decode_paper_status(status_byte: int) -> PaperStatus:
    return PaperStatus(
        connected=True,
        paper_present=not status_byte & PAPER_ABSENT_MASK,
        paper_near_end=bool(status_byte & PAPER_NEAR_END_MASK),
        raw=status_byte,
    )


class EscPosEncoder(ReceiptRenderer):
    """Receipt renderer for ESC/POS thermal printers.

    ``currency_marker`` replaces the receipt's own marker on every pricing
    line; the printer's code page rarely has currency glyphs.
    """

    def __init__(
        self,
        branding: ReceiptBranding | None = None,
        width: int = LINE_WIDTH,
        encoding: str = "cp437",
        currency_marker: str | None = None,
    ) -> None:
        self._branding = branding or ReceiptBranding()
        self._width = width
        self._encoding = encoding
        self._currency_marker = currency_marker

    def render(self, receipt: ReceiptData) -> bytes:
        out = _Writer(self._width, self._encoding)
        out.emit(INITIALIZE, CHARSET_USA, LINE_SPACING_NARROW)
        self._header(out, receipt)
        self._customer(out, receipt)
        if receipt.shows_delivery_block:
            self._delivery(out, receipt)
        self._items(out, receipt)
        if receipt.special_instructions:
            self._special_instructions(out, receipt)
        self._totals(out, receipt)
        self._footer(out, receipt)
        out.emit(LF * 3, CUT)
        return out.getvalue()

    # --- Sections -------------------------------------------------------------

    def _header(self, out: _Writer, receipt: ReceiptData) -> None:
        out.emit(ALIGN_CENTER, SIZE_LARGE)
        out.text(self._branding.header)
        out.emit(SIZE_NORMAL)
        out.rule("=")
        out.emit(BOLD_ON, SIZE_LARGE)
        out.text(f"ORDER #{receipt.order_number}")
        out.emit(SIZE_NORMAL, BOLD_OFF, ALIGN_LEFT)
        out.text(f"Date: {receipt.order_date} {receipt.order_time}")
        out.rule("-")

    def _customer(self, out: _Writer, receipt: ReceiptData) -> None:
        out.bold_text("CUSTOMER DETAILS")
        out.labelled("Name:", receipt.customer_name)
        out.labelled("Phone:", receipt.customer_phone)
        if receipt.customer_phone_alt:
            out.labelled("Alt:", receipt.customer_phone_alt)
        out.labelled("Type:", receipt.order_type.value.upper())
        out.emit(LF)

    def _delivery(self, out: _Writer, receipt: ReceiptData) -> None:
        out.bold_text("DELIVERY ADDRESS")
        if receipt.delivery_city:
            out.text(receipt.delivery_city)
        out.text(receipt.delivery_address)
        if receipt.address_type:
            out.labelled("Type:", receipt.address_type)
        if receipt.unit_number:
            out.labelled("Unit:", receipt.unit_number)
        if receipt.delivery_instructions:
            out.emit(LF)
            out.bold_text("Delivery Instructions:")
            out.text(receipt.delivery_instructions)
        out.emit(LF)

    def _items(self, out: _Writer, receipt: ReceiptData) -> None:
        out.rule("-")
        out.bold_text("ITEMS")
        out.rule("-")
        for item in receipt.items:
            self._item(out, item)

    def _item(self, out: _Writer, item: ReceiptItem) -> None:
        out.text(f"{item.quantity}x {item.name}")
        if item.variation:
            out.text(f"   {BULLET} {item.variation}")
        if item.addons:
            out.text(f"   {BULLET} Add-ons: {', '.join(item.addons)}")
        out.text(pad_right("", self._price(item.price), out.width))
        out.emit(LF)

    def _special_instructions(self, out: _Writer, receipt: ReceiptData) -> None:
        out.rule("-")
        out.bold_text(f"{WARNING_PREFIX} SPECIAL INSTRUCTIONS:")
        for instruction in receipt.special_instructions:
            out.text(f"   {BULLET} {instruction}")
        out.emit(LF)

    def _totals(self, out: _Writer, receipt: ReceiptData) -> None:
        out.rule("-")
        out.amount("Subtotal:", self._price(receipt.subtotal))
        if not receipt.delivery_fee.is_zero:
            out.amount("Delivery Fee:", self._price(receipt.delivery_fee))
        if not receipt.tax.is_zero:
            out.amount("Tax:", self._price(receipt.tax))
        if not receipt.discount.is_zero:
            out.amount("Discount:", f"-{self._price(receipt.discount)}")
        out.rule("=")
        out.emit(BOLD_ON, SIZE_DOUBLE_HEIGHT)
        out.amount("TOTAL:", self._price(receipt.total))
        out.emit(SIZE_NORMAL, BOLD_OFF)
        out.rule("=")
        out.emit(LF)
        out.text(f"Payment: {receipt.payment_status} ({receipt.payment_method})")
        out.emit(LF)

    def _footer(self, out: _Writer, receipt: ReceiptData) -> None:
        branding = self._branding
        out.rule("-")
        out.emit(ALIGN_CENTER)
        if receipt.estimated_prep_time:
            out.text(f"Prep Time: ~{receipt.estimated_prep_time} min")
        out.rule("-")
        out.emit(LF, BOLD_ON, SIZE_DOUBLE_HEIGHT)
        out.text(branding.thank_you)
        out.emit(SIZE_NORMAL, BOLD_OFF, LF)
        for message in branding.messages:
            out.text(message)
        out.emit(LF)
        out.rule("-")
        for footer in branding.footer:
            out.text(footer)
        if branding.promo:
            out.emit(LF, BOLD_ON)
            out.text(branding.promo)
            out.emit(BOLD_OFF)
        out.rule("=")
        out.emit(ALIGN_LEFT)

    def _price(self, money: Money) -> str:
        return format_currency(money.amount, self._currency_marker or money.currency)


class _Writer:
    """Accumulates commands and encoded text for one receipt."""

    def __init__(self, width: int, encoding: str) -> None:
        self.width = width
        self._encoding = encoding
        self._buf = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def emit(self, *chunks: bytes) -> None:
        for chunk in chunks:
            self._buf += chunk

    def text(self, text: str) -> None:
        self._buf += self._encode(text) + LF

    def bold_text(self, text: str) -> None:
        self._buf += BOLD_ON + self._encode(text) + BOLD_OFF + LF

    def labelled(self, label: str, value: str) -> None:
        self._buf += BOLD_ON + self._encode(label) + BOLD_OFF
        self.text(f" {value}")

    def amount(self, label: str, value: str) -> None:
        self.text(pad_right(label, value, self.width))

    def rule(self, char: str) -> None:
        self.text(line(char, self.width))

    def _encode(self, text: str) -> bytes:
        return text.encode(self._encoding, errors="replace")
