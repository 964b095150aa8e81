"""Abstract printer transport.

Every operation is a single, stateless round trip bounded by the
configured timeout.  Failures are returned, never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kprint.domain.model.printer import (
    PaperStatus,
    PrintResult,
    PrinterConfig,
    PrinterStatus,
    ReadinessReport,
)


class PrinterGateway(ABC):

    @abstractmethod
    def send(self, data: bytes, config: PrinterConfig) -> PrintResult:
        """Write *data* to the printer without checking its status first."""

    @abstractmethod
    def test_connection(self, config: PrinterConfig) -> PrintResult:
        """Connect-only probe, no payload."""

    @abstractmethod
    def get_printer_status(self, config: PrinterConfig) -> PrinterStatus:
        """Query and decode the real-time printer status byte."""

    @abstractmethod
    def get_paper_status(self, config: PrinterConfig) -> PaperStatus:
        """Query and decode the paper sensor status byte."""

    def is_ready(self, config: PrinterConfig) -> ReadinessReport:
        """Run both status queries, one after the other."""
        printer = self.get_printer_status(config)
        paper = self.get_paper_status(config)
        warnings: list[str] = []
        if paper.connected and paper.paper_near_end:
            warnings.append("Paper is running low")
        if printer.connected and printer.has_error:
            warnings.append("Printer reports an error condition")
        return ReadinessReport(printer=printer, paper=paper, warnings=tuple(warnings))

    def send_verified(self, data: bytes, config: PrinterConfig) -> PrintResult:
        """Check readiness first; only send to a ready printer."""
        report = self.is_ready(config)
        if not report.ready:
            return PrintResult.failed(
                "Printer not ready: " + ", ".join(report.blocking_reasons)
            )
        return self.send(data, config)
