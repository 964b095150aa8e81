"""Application service: Enqueue Print Job use case.

Builds the receipt snapshot for an order and inserts a ``pending`` job.
Used when a new order comes in and, unchanged, for a manual reprint.
A receipt that cannot be built raises and nothing is enqueued.
"""

from __future__ import annotations

from kprint.application.dto import PrintJobDTO
from kprint.domain.exceptions import EntityNotFoundError
from kprint.domain.model.print_job import PrintJob
from kprint.domain.repository.order_repository import OrderRepository
from kprint.domain.repository.print_job_repository import PrintJobRepository
from kprint.domain.service.receipt_formatter import ReceiptFormatter


class EnqueuePrintJobHandler:

    def __init__(
        self,
        job_repo: PrintJobRepository,
        order_repo: OrderRepository,
        formatter: ReceiptFormatter,
    ) -> None:
        self._job_repo = job_repo
        self._order_repo = order_repo
        self._formatter = formatter

    def handle(self, order_id: int) -> PrintJobDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        receipt = self._formatter.format(order)
        job = PrintJob.create(order_id=order_id, print_data=receipt)
        self._job_repo.save(job)
        return to_job_dto(job)


def to_job_dto(job: PrintJob) -> PrintJobDTO:
    return PrintJobDTO(
        id=job.id,  # type: ignore[arg-type]
        order_id=job.order_id,
        order_number=job.print_data.order_number,
        status=job.status.value,
        attempts=job.attempts,
        error_message=job.error_message,
        created_at=job.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
