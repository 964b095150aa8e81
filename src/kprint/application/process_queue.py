"""Application service: Process Queue use case (the batch processor).

Fetches the oldest due jobs and prints them strictly one after another,
pausing between jobs so the printer's input buffer is never flooded.

Transport failures are retried up to ``max_attempts``.  An encoder
exception fails the job at once: rendering is deterministic, so a retry
would fail the same way.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from kprint.application.dto import JobErrorDTO, ProcessResult
from kprint.application.order_mirror import mirror_print_outcome
from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.gateway.receipt_renderer import ReceiptRenderer
from kprint.domain.model.print_job import JobStatus, PrintJob
from kprint.domain.model.printer import PrinterConfig
from kprint.domain.repository.order_repository import OrderRepository
from kprint.domain.repository.print_job_repository import PrintJobRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BATCH_SIZE = 5
DEFAULT_JOB_DELAY = 0.5  # seconds


class ProcessQueueHandler:

    def __init__(
        self,
        job_repo: PrintJobRepository,
        order_repo: OrderRepository,
        renderer: ReceiptRenderer,
        printer: PrinterGateway,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        job_delay: float = DEFAULT_JOB_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._job_repo = job_repo
        self._order_repo = order_repo
        self._renderer = renderer
        self._printer = printer
        self._max_attempts = max_attempts
        self._batch_size = batch_size
        self._job_delay = job_delay
        self._sleep = sleep

    def handle(self, config: PrinterConfig) -> ProcessResult:
        jobs = self._job_repo.find_by_status(
            JobStatus.PENDING,
            max_attempts=self._max_attempts,
            limit=self._batch_size,
        )
        result = ProcessResult()
        if not jobs:
            logger.debug("No pending print jobs")
            return result

        logger.info("Processing %d print job(s) on %s", len(jobs), config.address)
        for n, job in enumerate(jobs):
            if n:
                self._sleep(self._job_delay)
            # The fast path may have settled this job since the batch was fetched
            job = self._job_repo.get_by_id(job.id)
            if job is None or not job.is_due(self._max_attempts):
                continue
            self._process(job, config)
            result.processed += 1
            if job.status == JobStatus.PRINTED:
                result.succeeded += 1
            elif job.status == JobStatus.FAILED:
                result.failed += 1
                result.errors.append(JobErrorDTO(job.id, job.error_message or ""))

        logger.info(
            "Batch done: %d processed, %d printed, %d failed",
            result.processed,
            result.succeeded,
            result.failed,
        )
        return result

    # --- Internal helpers -----------------------------------------------------

    def _process(self, job: PrintJob, config: PrinterConfig) -> None:
        attempt = job.start_attempt()

        try:
            payload = self._renderer.render(job.print_data)
        except Exception as exc:
            logger.exception("Print job #%s could not be encoded", job.id)
            job.fail(f"Receipt encoding failed: {exc}")
            self._finish(job)
            return

        outcome = self._printer.send(payload, config)
        if outcome.success:
            job.mark_printed()
            logger.info(
                "Print job #%s (order #%s) printed on attempt %d",
                job.id,
                job.print_data.order_number,
                attempt,
            )
        elif job.record_failure(outcome.message, self._max_attempts) == JobStatus.FAILED:
            logger.error(
                "Print job #%s failed after %d attempts: %s",
                job.id,
                attempt,
                outcome.message,
            )
        else:
            logger.warning(
                "Print job #%s attempt %d/%d failed, will retry: %s",
                job.id,
                attempt,
                self._max_attempts,
                outcome.message,
            )
        self._finish(job)

    def _finish(self, job: PrintJob) -> None:
        self._job_repo.save(job)
        mirror_print_outcome(self._order_repo, job)
