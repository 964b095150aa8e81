"""Integration tests for the ImmediatePrint fast path."""

from kprint.application.immediate_print import ImmediatePrintHandler
from kprint.application.process_queue import ProcessQueueHandler
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.order import PrintStatus
from kprint.domain.model.print_job import JobStatus
from kprint.infrastructure.printer.escpos import EscPosEncoder
from tests.fakes import (
    PRINTER,
    FakeOrderRepository,
    FakePrinter,
    FakePrintJobRepository,
    make_job,
    make_order,
    refused,
)


class BrokenRenderer(ReceiptRenderer):

    def render(self, receipt):
        raise ValueError("unsupported glyph")


def _setup(printer=None, renderer=None):
    job_repo = FakePrintJobRepository()
    order_repo = FakeOrderRepository([make_order(1)])
    printer = printer or FakePrinter()
    handler = ImmediatePrintHandler(job_repo, order_repo, renderer or EscPosEncoder(), printer)
    return handler, job_repo, order_repo, printer


class TestImmediatePrint:

    def test_success_marks_printed_once(self):
        handler, job_repo, order_repo, printer = _setup()
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(1, PRINTER)

        assert result.success
        assert result.job_id == job.id
        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PRINTED
        assert saved.attempts == 1
        assert order_repo.get_by_id(1).print_status == PrintStatus.PRINTED

    def test_printed_job_never_reselected_by_batch(self):
        handler, job_repo, order_repo, printer = _setup()
        make_job(job_repo, order_repo.get_by_id(1))
        handler.handle(1, PRINTER)

        batch = ProcessQueueHandler(job_repo, order_repo, EscPosEncoder(), printer, sleep=lambda s: None)
        assert batch.handle(PRINTER).processed == 0
        assert len(printer.sent) == 1

    def test_failure_leaves_job_pending_for_batch(self):
        handler, job_repo, order_repo, _ = _setup(FakePrinter([refused()]))
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(1, PRINTER)

        assert not result.success
        assert result.configured
        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PENDING
        assert saved.attempts == 1
        assert "Connection refused" in saved.error_message
        assert order_repo.get_by_id(1).print_status == PrintStatus.PENDING

    def test_encoding_error_left_for_batch(self):
        handler, job_repo, order_repo, printer = _setup(renderer=BrokenRenderer())
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(1, PRINTER)

        assert not result.success
        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PENDING
        assert saved.error_message == "Receipt encoding failed: unsupported glyph"
        assert printer.sent == []

    def test_printer_not_configured(self):
        handler, job_repo, order_repo, printer = _setup()
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(1, None)

        assert not result.configured
        assert result.message == "Printer not configured"
        assert job_repo.get_by_id(job.id).attempts == 0
        assert printer.sent == []

    def test_no_pending_job(self):
        handler, _, _, printer = _setup()
        result = handler.handle(1, PRINTER)
        assert not result.success
        assert not result.configured
        assert printer.sent == []
