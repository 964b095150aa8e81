"""Printer-side values: where the printer is and what it reports.

Status values are derived on demand from a single status byte and are
never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_PORT = 9100
DEFAULT_SEND_TIMEOUT = 5.0
DEFAULT_PROBE_TIMEOUT = 3.0


@dataclass(frozen=True)
class PrinterConfig:
    host: str
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_SEND_TIMEOUT  # seconds

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class PrintResult:
    """Outcome of a single transport operation."""

    success: bool
    message: str
    error: BaseException | None = None

    @staticmethod
    def ok(message: str) -> PrintResult:
        return PrintResult(True, message)

    @staticmethod
    def failed(message: str, error: BaseException | None = None) -> PrintResult:
        return PrintResult(False, message, error)


@dataclass(frozen=True)
class PrinterStatus:
    connected: bool
    online: bool = False
    cover_closed: bool = False
    has_error: bool = False
    raw: int | None = None
    error_message: str | None = None

    @staticmethod
    def unreachable(message: str) -> PrinterStatus:
        return PrinterStatus(connected=False, error_message=message)


@dataclass(frozen=True)
class PaperStatus:
    connected: bool
    paper_present: bool = False
    paper_near_end: bool = False
    raw: int | None = None
    error_message: str | None = None

    @staticmethod
    def unreachable(message: str) -> PaperStatus:
        return PaperStatus(connected=False, error_message=message)


@dataclass(frozen=True)
class ReadinessReport:
    """Combined view of printer and paper status."""

    printer: PrinterStatus
    paper: PaperStatus
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ready(self) -> bool:
        return not self.blocking_reasons

    @property
    def blocking_reasons(self) -> list[str]:
        reasons: list[str] = []
        if not self.printer.connected:
            reasons.append("printer not connected")
        else:
            if not self.printer.online:
                reasons.append("printer offline")
            if not self.printer.cover_closed:
                reasons.append("cover open")
        if not self.paper.connected:
            if self.printer.connected:
                reasons.append("paper sensor not responding")
        elif not self.paper.paper_present:
            reasons.append("no paper")
        return reasons

    @property
    def details(self) -> dict[str, object]:
        return {
            "connected": self.printer.connected,
            "online": self.printer.online,
            "cover_closed": self.printer.cover_closed,
            "has_error": self.printer.has_error,
            "paper_connected": self.paper.connected,
            "paper_present": self.paper.paper_present,
            "paper_near_end": self.paper.paper_near_end,
            "error": self.printer.error_message or self.paper.error_message,
        }
