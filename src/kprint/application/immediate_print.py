"""Application service: Immediate Print use case (the fast path).

Called right after a job is enqueued to print without waiting for the
next batch.  One attempt only: on any failure the job stays ``pending``
and the batch processor takes over, so the fast path never fails a job
on its own.

Nothing stops a batch run from picking up the same job at the same
moment; the worst case is a duplicate receipt.
"""

from __future__ import annotations

import logging

from kprint.application.dto import ImmediatePrintResult
from kprint.application.order_mirror import mirror_print_outcome
from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.printer import PrinterConfig
from kprint.domain.repository.order_repository import OrderRepository
from kprint.domain.repository.print_job_repository import PrintJobRepository

logger = logging.getLogger(__name__)


class ImmediatePrintHandler:

    def __init__(
        self,
        job_repo: PrintJobRepository,
        order_repo: OrderRepository,
        renderer: ReceiptRenderer,
        printer: PrinterGateway,
    ) -> None:
        self._job_repo = job_repo
        self._order_repo = order_repo
        self._renderer = renderer
        self._printer = printer

    def handle(
        self, order_id: int, config: PrinterConfig | None
    ) -> ImmediatePrintResult:
        if config is None:
            return ImmediatePrintResult(
                False, "Printer not configured", configured=False
            )
        job = self._job_repo.find_pending_for_order(order_id)
        if job is None:
            return ImmediatePrintResult(
                False, f"No pending print job for order #{order_id}", configured=False
            )

        job.start_attempt()
        try:
            payload = self._renderer.render(job.print_data)
        except Exception as exc:
            logger.exception("Print job #%s could not be encoded", job.id)
            job.defer(f"Receipt encoding failed: {exc}")
            self._job_repo.save(job)
            return ImmediatePrintResult(False, job.error_message, job.id)

        outcome = self._printer.send(payload, config)
        if outcome.success:
            job.mark_printed()
            self._job_repo.save(job)
            mirror_print_outcome(self._order_repo, job)
            logger.info("Order #%s printed immediately (job #%s)", order_id, job.id)
        else:
            job.defer(outcome.message)
            self._job_repo.save(job)
            logger.warning(
                "Immediate print of order #%s failed, left for the queue: %s",
                order_id,
                outcome.message,
            )
        return ImmediatePrintResult(outcome.success, outcome.message, job.id)
