"""JSON-file-backed implementation of PrintJobRepository.

Each record mirrors the ``print_queue`` row: id, order_id, print_data,
status, attempts, error_message, created_at, processed_at.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from kprint.domain.model.order import OrderType
from kprint.domain.model.print_job import JobStatus, PrintJob
from kprint.domain.model.receipt import ReceiptData, ReceiptItem
from kprint.domain.model.value_objects import Money
from kprint.domain.repository.print_job_repository import PrintJobRepository
from kprint.infrastructure.persistence.json_store import JsonFileStore


class JsonPrintJobRepository(PrintJobRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- PrintJobRepository interface -----------------------------------------

    def next_id(self) -> int:
        return self._next_id(self._load_raw())

    def get_by_id(self, job_id: int) -> PrintJob | None:
        for raw in self._load_raw():
            if raw["id"] == job_id:
                return self._to_domain(raw)
        return None

    def find_by_status(
        self,
        status: JobStatus,
        *,
        max_attempts: int | None = None,
        limit: int | None = None,
        oldest_first: bool = True,
    ) -> list[PrintJob]:
        rows = [r for r in self._load_raw() if r["status"] == status.value]
        if max_attempts is not None:
            rows = [r for r in rows if r["attempts"] < max_attempts]
        rows.sort(
            key=lambda r: (datetime.fromisoformat(r["created_at"]), r["id"]),
            reverse=not oldest_first,
        )
        if limit is not None:
            rows = rows[:limit]
        return [self._to_domain(r) for r in rows]

    def find_pending_for_order(self, order_id: int) -> PrintJob | None:
        for job in self.find_by_status(JobStatus.PENDING):
            if job.order_id == order_id:
                return job
        return None

    def save(self, job: PrintJob) -> None:
        # Id assignment and upsert see the same snapshot, under the file lock
        with self._store.update() as jobs:
            if job.id is None:
                job.id = self._next_id(jobs)

            for i, raw in enumerate(jobs):
                if raw["id"] == job.id:
                    jobs[i] = self._to_raw(job)
                    break
            else:
                jobs.append(self._to_raw(job))

    @staticmethod
    def _next_id(jobs: list[dict]) -> int:
        return max((j["id"] for j in jobs), default=0) + 1

    # --- Serialization --------------------------------------------------------

    @classmethod
    def _to_raw(cls, job: PrintJob) -> dict:
        return {
            "id": job.id,
            "order_id": job.order_id,
            "print_data": cls._receipt_to_raw(job.print_data),
            "status": job.status.value,
            "attempts": job.attempts,
            "error_message": job.error_message,
            "created_at": job.created_at.isoformat(),
            "processed_at": job.processed_at.isoformat() if job.processed_at else None,
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> PrintJob:
        processed_at = raw.get("processed_at")
        return PrintJob(
            id=raw["id"],
            order_id=raw["order_id"],
            print_data=cls._receipt_to_domain(raw["print_data"]),
            status=JobStatus(raw["status"]),
            attempts=raw["attempts"],
            error_message=raw.get("error_message"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            processed_at=datetime.fromisoformat(processed_at) if processed_at else None,
        )

    @staticmethod
    def _receipt_to_raw(receipt: ReceiptData) -> dict:
        return {
            "order_id": receipt.order_id,
            "order_number": receipt.order_number,
            "order_date": receipt.order_date,
            "order_time": receipt.order_time,
            "order_type": receipt.order_type.value,
            "customer_name": receipt.customer_name,
            "customer_phone": receipt.customer_phone,
            "customer_phone_alt": receipt.customer_phone_alt,
            "delivery_address": receipt.delivery_address,
            "delivery_city": receipt.delivery_city,
            "address_type": receipt.address_type,
            "unit_number": receipt.unit_number,
            "delivery_instructions": receipt.delivery_instructions,
            "items": [
                {
                    "quantity": item.quantity,
                    "name": item.name,
                    "variation": item.variation,
                    "addons": list(item.addons),
                    "special_instructions": item.special_instructions,
                    "price": str(item.price.amount),
                }
                for item in receipt.items
            ],
            "currency": receipt.currency,
            "subtotal": str(receipt.subtotal.amount),
            "delivery_fee": str(receipt.delivery_fee.amount),
            "tax": str(receipt.tax.amount),
            "discount": str(receipt.discount.amount),
            "total": str(receipt.total.amount),
            "payment_status": receipt.payment_status,
            "payment_method": receipt.payment_method,
            "estimated_prep_time": receipt.estimated_prep_time,
            "special_instructions": list(receipt.special_instructions),
        }

    @staticmethod
    def _receipt_to_domain(raw: dict) -> ReceiptData:
        currency = raw["currency"]

        def money(key: str, source: dict = raw) -> Money:
            return Money(Decimal(source[key]), currency)

        return ReceiptData(
            order_id=raw.get("order_id"),
            order_number=raw["order_number"],
            order_date=raw["order_date"],
            order_time=raw["order_time"],
            order_type=OrderType(raw["order_type"]),
            customer_name=raw["customer_name"],
            customer_phone=raw["customer_phone"],
            customer_phone_alt=raw.get("customer_phone_alt"),
            delivery_address=raw.get("delivery_address"),
            delivery_city=raw.get("delivery_city"),
            address_type=raw.get("address_type"),
            unit_number=raw.get("unit_number"),
            delivery_instructions=raw.get("delivery_instructions"),
            items=tuple(
                ReceiptItem(
                    quantity=i["quantity"],
                    name=i["name"],
                    variation=i.get("variation"),
                    addons=tuple(i.get("addons") or ()),
                    special_instructions=i.get("special_instructions"),
                    price=money("price", i),
                )
                for i in raw["items"]
            ),
            subtotal=money("subtotal"),
            delivery_fee=money("delivery_fee"),
            tax=money("tax"),
            discount=money("discount"),
            total=money("total"),
            payment_status=raw["payment_status"],
            payment_method=raw["payment_method"],
            estimated_prep_time=raw.get("estimated_prep_time"),
            special_instructions=tuple(raw.get("special_instructions") or ()),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return self._store.load()
