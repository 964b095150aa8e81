"""Application service: Check Printer use cases (status report and probe)."""

from __future__ import annotations

from kprint.application.dto import PrinterReportDTO
from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.model.printer import PrinterConfig, PrintResult


class CheckPrinterHandler:

    def __init__(self, printer: PrinterGateway) -> None:
        self._printer = printer

    def handle(self, config: PrinterConfig) -> PrinterReportDTO:
        """Query printer and paper status and summarise readiness."""
        report = self._printer.is_ready(config)
        return PrinterReportDTO(
            address=config.address,
            ready=report.ready,
            blocking_reasons=report.blocking_reasons,
            warnings=list(report.warnings),
            details=report.details,
        )

    def ping(self, config: PrinterConfig) -> PrintResult:
        return self._printer.test_connection(config)
