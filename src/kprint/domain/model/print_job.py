"""PrintJob aggregate: one persisted, retryable "print this receipt".

State machine::

    pending --success-------------------------> printed   (terminal)
    pending --failure, attempts < max---------> pending
    pending --failure, attempts reached max---> failed    (terminal)
    pending --encoding error------------------> failed    (terminal)

``attempts`` only ever grows, and a terminal job refuses further attempts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kprint.domain.exceptions import ValidationError
from kprint.domain.model.receipt import ReceiptData


class JobStatus(Enum):
    PENDING = "pending"
    PRINTED = "printed"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PrintJob:
    """Aggregate root for the print queue.

    Use ``PrintJob.create()`` for new jobs.  The ``__init__`` stays simple
    so the repository can reconstitute persisted jobs without
    re-validating.
    """

    id: int | None
    order_id: int
    print_data: ReceiptData
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    error_message: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    processed_at: datetime | None = None

    # --- Factory (used for NEW jobs only) -------------------------------------

    @staticmethod
    def create(order_id: int, print_data: ReceiptData) -> PrintJob:
        if order_id is None:
            raise ValidationError("A print job needs an order reference")
        return PrintJob(id=None, order_id=order_id, print_data=print_data)

    # --- State transitions ----------------------------------------------------

    def start_attempt(self) -> int:
        """Count a new delivery attempt and return the new total."""
        if self.is_terminal:
            raise ValidationError(
                f"Print job #{self.id} is already {self.status.value}"
            )
        self.attempts += 1
        return self.attempts

    def mark_printed(self, at: datetime | None = None) -> None:
        self._assert_pending()
        self.status = JobStatus.PRINTED
        self.error_message = None
        self.processed_at = at or _utcnow()

    def record_failure(self, message: str, max_attempts: int) -> JobStatus:
        """Record a retryable failure.

        Stays ``pending`` while attempts remain, otherwise becomes
        ``failed``.  Returns the resulting status.
        """
        self._assert_pending()
        self.error_message = message
        if self.attempts >= max_attempts:
            self.status = JobStatus.FAILED
            self.processed_at = _utcnow()
        return self.status

    def defer(self, message: str) -> None:
        """Record a failure but leave the job for the batch processor."""
        self._assert_pending()
        self.error_message = message

    def fail(self, message: str) -> None:
        """Fail immediately, regardless of attempts left."""
        self._assert_pending()
        self.status = JobStatus.FAILED
        self.error_message = message
        self.processed_at = _utcnow()

    # --- Queries --------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.PRINTED, JobStatus.FAILED)

    def is_due(self, max_attempts: int) -> bool:
        return self.status == JobStatus.PENDING and self.attempts < max_attempts

    # --- Internal helpers -----------------------------------------------------

    def _assert_pending(self) -> None:
        if self.status != JobStatus.PENDING:
            raise ValidationError(
                f"Print job #{self.id} is already {self.status.value}"
            )
