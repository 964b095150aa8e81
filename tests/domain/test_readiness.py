"""Unit tests for printer readiness and verified sends."""

from kprint.domain.model.printer import PaperStatus, PrinterStatus, ReadinessReport
from tests.fakes import PRINTER, FakePrinter

ONLINE = PrinterStatus(connected=True, online=True, cover_closed=True)
PAPER_OK = PaperStatus(connected=True, paper_present=True)


class TestReadinessReport:

    def test_ready_when_online_with_paper(self):
        report = ReadinessReport(ONLINE, PAPER_OK)
        assert report.ready
        assert report.blocking_reasons == []

    def test_cover_open_blocks_regardless_of_paper(self):
        cover_open = PrinterStatus(connected=True, online=True, cover_closed=False)
        report = ReadinessReport(cover_open, PAPER_OK)
        assert not report.ready
        assert report.details["cover_closed"] is False
        assert "cover open" in report.blocking_reasons

    def test_offline_blocks(self):
        offline = PrinterStatus(connected=True, online=False, cover_closed=True)
        assert ReadinessReport(offline, PAPER_OK).blocking_reasons == ["printer offline"]

    def test_no_paper_blocks(self):
        empty = PaperStatus(connected=True, paper_present=False)
        assert ReadinessReport(ONLINE, empty).blocking_reasons == ["no paper"]

    def test_unreachable_printer_reports_one_reason(self):
        report = ReadinessReport(
            PrinterStatus.unreachable("Cannot reach printer: refused"),
            PaperStatus.unreachable("Cannot reach printer: refused"),
        )
        assert report.blocking_reasons == ["printer not connected"]
        assert report.details["error"] == "Cannot reach printer: refused"

    def test_silent_paper_sensor_blocks(self):
        report = ReadinessReport(ONLINE, PaperStatus.unreachable("No response to status query"))
        assert report.blocking_reasons == ["paper sensor not responding"]

    def test_error_bit_does_not_block(self):
        erroring = PrinterStatus(connected=True, online=True, cover_closed=True, has_error=True)
        report = ReadinessReport(erroring, PAPER_OK)
        assert report.ready
        assert report.details["has_error"] is True


class TestGatewayReadiness:

    def test_near_end_paper_is_ready_with_warning(self):
        printer = FakePrinter(
            paper_status=PaperStatus(connected=True, paper_present=True, paper_near_end=True)
        )
        report = printer.is_ready(PRINTER)
        assert report.ready
        assert report.warnings == ("Paper is running low",)

    def test_verified_send_refuses_when_not_ready(self):
        printer = FakePrinter(
            printer_status=PrinterStatus(connected=True, online=True, cover_closed=False)
        )
        result = printer.send_verified(b"data", PRINTER)
        assert not result.success
        assert result.message == "Printer not ready: cover open"
        assert printer.sent == []

    def test_verified_send_sends_when_ready(self):
        printer = FakePrinter()
        result = printer.send_verified(b"data", PRINTER)
        assert result.success
        assert printer.sent == [b"data"]
