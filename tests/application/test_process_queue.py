"""Integration tests for the ProcessQueue use case.

Uses in-memory fakes and an injected sleep; no file I/O or sockets.
"""

import pytest

from kprint.application.process_queue import ProcessQueueHandler
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.order import PrintStatus
from kprint.domain.model.print_job import JobStatus
from kprint.infrastructure.printer.escpos import CUT, INITIALIZE, EscPosEncoder
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


def _setup(printer=None, renderer=None, orders=(1,), **kwargs):
    job_repo = FakePrintJobRepository()
    order_repo = FakeOrderRepository([make_order(i) for i in orders])
    printer = printer or FakePrinter()
    sleeps: list[float] = []
    handler = ProcessQueueHandler(
        job_repo,
        order_repo,
        renderer or EscPosEncoder(),
        printer,
        sleep=sleeps.append,
        **kwargs,
    )
    return handler, job_repo, order_repo, printer, sleeps


class TestProcessQueueHappyPath:

    def test_empty_queue(self):
        handler, _, _, printer, _ = _setup()
        result = handler.handle(PRINTER)
        assert result.processed == 0
        assert printer.sent == []

    def test_prints_and_mirrors_order(self):
        handler, job_repo, order_repo, printer, _ = _setup()
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(PRINTER)

        assert (result.processed, result.succeeded, result.failed) == (1, 1, 0)
        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PRINTED
        assert saved.attempts == 1
        assert saved.processed_at is not None
        order = order_repo.get_by_id(1)
        assert order.print_status == PrintStatus.PRINTED
        assert order.print_attempts == 1

    def test_sends_encoded_receipt(self):
        handler, job_repo, order_repo, printer, _ = _setup()
        make_job(job_repo, order_repo.get_by_id(1))
        handler.handle(PRINTER)
        (payload,) = printer.sent
        assert payload.startswith(INITIALIZE)
        assert payload.endswith(CUT)


class TestProcessQueueRetries:

    def test_failure_below_max_stays_pending(self):
        handler, job_repo, order_repo, _, _ = _setup(FakePrinter([refused()]))
        job = make_job(job_repo, order_repo.get_by_id(1), attempts=1)

        result = handler.handle(PRINTER)

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PENDING
        assert saved.attempts == 2
        assert (result.succeeded, result.failed) == (0, 0)
        assert order_repo.get_by_id(1).print_status == PrintStatus.PENDING

    def test_failure_at_max_becomes_failed(self):
        handler, job_repo, order_repo, _, _ = _setup(FakePrinter([refused()]))
        job = make_job(job_repo, order_repo.get_by_id(1), attempts=2)

        result = handler.handle(PRINTER)

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.FAILED
        assert saved.attempts == 3
        assert result.failed == 1
        assert result.errors[0].job_id == job.id

    def test_three_refusals_fail_the_job(self):
        printer = FakePrinter([refused(), refused(), refused()])
        handler, job_repo, order_repo, _, _ = _setup(printer)
        job = make_job(job_repo, order_repo.get_by_id(1))

        for _ in range(3):
            handler.handle(PRINTER)
        assert handler.handle(PRINTER).processed == 0  # never selected again

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.FAILED
        assert saved.attempts == 3
        assert "Connection refused" in saved.error_message
        order = order_repo.get_by_id(1)
        assert order.print_status == PrintStatus.FAILED
        assert order.print_attempts == 3

    def test_recovers_after_transient_failure(self):
        handler, job_repo, order_repo, _, _ = _setup(FakePrinter([refused()]))
        job = make_job(job_repo, order_repo.get_by_id(1))

        handler.handle(PRINTER)
        handler.handle(PRINTER)

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.PRINTED
        assert saved.attempts == 2

    def test_encoding_error_fails_immediately(self):
        handler, job_repo, order_repo, printer, _ = _setup(renderer=BrokenRenderer())
        job = make_job(job_repo, order_repo.get_by_id(1))

        result = handler.handle(PRINTER)

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.FAILED
        assert saved.attempts == 1
        assert saved.error_message == "Receipt encoding failed: unsupported glyph"
        assert printer.sent == []
        assert result.failed == 1
        assert order_repo.get_by_id(1).print_status == PrintStatus.FAILED

    def test_missing_order_does_not_break_batch(self):
        handler, job_repo, _, _, _ = _setup(orders=())
        job = make_job(job_repo, make_order(42))
        result = handler.handle(PRINTER)
        assert result.succeeded == 1
        assert job_repo.get_by_id(job.id).status == JobStatus.PRINTED


class TestProcessQueueBatching:

    def test_oldest_first_up_to_batch_size(self):
        handler, job_repo, order_repo, printer, _ = _setup(orders=(1, 2, 3), batch_size=2)
        newest = make_job(job_repo, order_repo.get_by_id(1), age_minutes=0)
        oldest = make_job(job_repo, order_repo.get_by_id(2), age_minutes=20)
        middle = make_job(job_repo, order_repo.get_by_id(3), age_minutes=10)

        result = handler.handle(PRINTER)

        assert result.processed == 2
        assert job_repo.get_by_id(oldest.id).status == JobStatus.PRINTED
        assert job_repo.get_by_id(middle.id).status == JobStatus.PRINTED
        assert job_repo.get_by_id(newest.id).status == JobStatus.PENDING

    def test_delay_between_jobs_only(self):
        handler, job_repo, order_repo, _, sleeps = _setup(orders=(1, 2, 3), job_delay=0.5)
        for i in (1, 2, 3):
            make_job(job_repo, order_repo.get_by_id(i), age_minutes=i)

        handler.handle(PRINTER)

        assert sleeps == [0.5, 0.5]

    def test_skips_job_printed_by_fast_path_mid_batch(self):
        job_repo = FakePrintJobRepository()
        order_repo = FakeOrderRepository([make_order(1), make_order(2)])
        printer = FakePrinter()
        first = make_job(job_repo, order_repo.get_by_id(1), age_minutes=10)
        second = make_job(job_repo, order_repo.get_by_id(2), age_minutes=5)

        def print_second_now(_seconds):
            job = job_repo.get_by_id(second.id)
            job.start_attempt()
            job.mark_printed()
            job_repo.save(job)

        handler = ProcessQueueHandler(
            job_repo, order_repo, EscPosEncoder(), printer, sleep=print_second_now
        )
        result = handler.handle(PRINTER)

        assert result.processed == 1
        assert len(printer.sent) == 1
        assert job_repo.get_by_id(first.id).status == JobStatus.PRINTED
        assert job_repo.get_by_id(second.id).attempts == 1

    def test_exhausted_jobs_not_selected(self):
        handler, job_repo, order_repo, printer, _ = _setup()
        make_job(job_repo, order_repo.get_by_id(1), attempts=3)
        assert handler.handle(PRINTER).processed == 0
        assert printer.sent == []

    @pytest.mark.parametrize("max_attempts", [1, 5])
    def test_max_attempts_configurable(self, max_attempts):
        printer = FakePrinter([refused()] * max_attempts)
        handler, job_repo, order_repo, _, _ = _setup(printer, max_attempts=max_attempts)
        job = make_job(job_repo, order_repo.get_by_id(1))

        for _ in range(max_attempts):
            handler.handle(PRINTER)

        saved = job_repo.get_by_id(job.id)
        assert saved.status == JobStatus.FAILED
        assert saved.attempts == max_attempts
