"""Application service: Queue Status use case."""

from __future__ import annotations

from kprint.application.dto import PendingJobDTO, QueueStatusDTO
from kprint.domain.model.print_job import JobStatus
from kprint.domain.repository.print_job_repository import PrintJobRepository

RECENT_PENDING_LIMIT = 10


class QueueStatusHandler:

    def __init__(self, job_repo: PrintJobRepository) -> None:
        self._job_repo = job_repo

    def handle(self) -> QueueStatusDTO:
        """Count jobs per status and list the newest pending ones."""
        pending = self._job_repo.find_by_status(JobStatus.PENDING, oldest_first=False)
        printed = self._job_repo.find_by_status(JobStatus.PRINTED)
        failed = self._job_repo.find_by_status(JobStatus.FAILED)

        return QueueStatusDTO(
            pending=len(pending),
            printed=len(printed),
            failed=len(failed),
            total=len(pending) + len(printed) + len(failed),
            recent_pending=[
                PendingJobDTO(
                    id=job.id,  # type: ignore[arg-type]
                    order_id=job.order_id,
                    attempts=job.attempts,
                    created_at=job.created_at.strftime("%Y-%m-%d %H:%M UTC"),
                )
                for job in pending[:RECENT_PENDING_LIMIT]
            ],
        )
