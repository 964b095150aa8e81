"""Abstract repository for the PrintJob aggregate (the print queue)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kprint.domain.model.print_job import JobStatus, PrintJob


class PrintJobRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique job ID."""

    @abstractmethod
    def get_by_id(self, job_id: int) -> PrintJob | None:
        """Return a job by its ID, or None if not found."""

    @abstractmethod
    def find_by_status(
        self,
        status: JobStatus,
        *,
        max_attempts: int | None = None,
        limit: int | None = None,
        oldest_first: bool = True,
    ) -> list[PrintJob]:
        """Return jobs with *status*, ordered by ``created_at``.

        When *max_attempts* is given only jobs with fewer attempts are
        returned.
        """

    @abstractmethod
    def find_pending_for_order(self, order_id: int) -> PrintJob | None:
        """Return the oldest pending job for an order, or None."""

    @abstractmethod
    def save(self, job: PrintJob) -> None:
        """Insert a new job or update an existing one by ID."""
