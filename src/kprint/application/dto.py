"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry results from the application layer to the CLI (and any other
staff-facing surface) without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class JobErrorDTO:
    """A job that reached a terminal failure during a batch."""

    job_id: int
    error: str


@dataclass
class ProcessResult:
    """Output of one ``processQueue`` batch."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: list[JobErrorDTO] = field(default_factory=list)


@dataclass(frozen=True)
class ImmediatePrintResult:
    """Output of the fast path.  ``configured`` is False when nothing was tried."""

    success: bool
    message: str
    job_id: int | None = None
    configured: bool = True


@dataclass(frozen=True)
class PrintJobDTO:
    id: int
    order_id: int
    order_number: str
    status: str
    attempts: int
    error_message: str | None
    created_at: str  # formatted, e.g. "2026-10-19 14:05 UTC"


@dataclass(frozen=True)
class PendingJobDTO:
    id: int
    order_id: int
    attempts: int
    created_at: str


@dataclass(frozen=True)
class QueueStatusDTO:
    pending: int
    printed: int
    failed: int
    total: int
    recent_pending: list[PendingJobDTO]


@dataclass(frozen=True)
class PrinterReportDTO:
    """Combined status, paper and readiness report for one printer."""

    address: str
    ready: bool
    blocking_reasons: list[str]
    warnings: list[str]
    details: dict
