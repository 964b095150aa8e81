"""Copy a finished print job's outcome onto its order."""

from __future__ import annotations

import logging

from kprint.domain.model.order import PrintStatus
from kprint.domain.model.print_job import PrintJob
from kprint.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def mirror_print_outcome(order_repo: OrderRepository, job: PrintJob) -> None:
    """Write ``print_status``/``print_attempts`` for a terminal job.

    A missing order is logged and ignored: the job's own record already
    holds the outcome.
    """
    if not job.is_terminal:
        return
    order = order_repo.get_by_id(job.order_id)
    if order is None:
        logger.warning(
            "Order #%s for print job #%s not found; print status not mirrored",
            job.order_id,
            job.id,
        )
        return
    order.record_print_outcome(PrintStatus(job.status.value), job.attempts)
    order_repo.save(order)
