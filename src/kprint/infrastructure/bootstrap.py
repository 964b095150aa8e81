"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from kprint.application.check_printer import CheckPrinterHandler
from kprint.application.enqueue_print_job import EnqueuePrintJobHandler
from kprint.application.immediate_print import ImmediatePrintHandler
from kprint.application.preview_receipt import PreviewReceiptHandler
from kprint.application.print_test_receipt import PrintTestReceiptHandler
from kprint.application.print_worker import PrintQueueWorker
from kprint.application.process_queue import ProcessQueueHandler
from kprint.application.queue_status import QueueStatusHandler
from kprint.domain.service.receipt_formatter import ReceiptFormatter
from kprint.infrastructure.config import PRINTER_ENCODING, Settings
from kprint.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from kprint.infrastructure.persistence.json_print_job_repository import (
    JsonPrintJobRepository,
)
from kprint.infrastructure.printer.escpos import EscPosEncoder
from kprint.infrastructure.printer.network_printer import NetworkPrinter
from kprint.infrastructure.printer.text_receipt import PlainTextRenderer


def settings() -> Settings:
    return Settings.from_env()


# --- Collaborators ------------------------------------------------------------


def order_repository(cfg: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(cfg.data_dir / "orders.json", currency=cfg.currency)


def print_job_repository(cfg: Settings) -> JsonPrintJobRepository:
    return JsonPrintJobRepository(cfg.data_dir / "print_queue.json")


def receipt_formatter(cfg: Settings) -> ReceiptFormatter:
    return ReceiptFormatter(tz=cfg.tzinfo())


def escpos_encoder(cfg: Settings) -> EscPosEncoder:
    return EscPosEncoder(encoding=PRINTER_ENCODING, currency_marker=cfg.thermal_currency)


def text_renderer() -> PlainTextRenderer:
    return PlainTextRenderer()


def network_printer() -> NetworkPrinter:
    return NetworkPrinter()


# --- Use cases ----------------------------------------------------------------


def enqueue_handler(cfg: Settings) -> EnqueuePrintJobHandler:
    return EnqueuePrintJobHandler(
        job_repo=print_job_repository(cfg),
        order_repo=order_repository(cfg),
        formatter=receipt_formatter(cfg),
    )


def immediate_print_handler(cfg: Settings) -> ImmediatePrintHandler:
    return ImmediatePrintHandler(
        job_repo=print_job_repository(cfg),
        order_repo=order_repository(cfg),
        renderer=escpos_encoder(cfg),
        printer=network_printer(),
    )


def process_queue_handler(cfg: Settings) -> ProcessQueueHandler:
    return ProcessQueueHandler(
        job_repo=print_job_repository(cfg),
        order_repo=order_repository(cfg),
        renderer=escpos_encoder(cfg),
        printer=network_printer(),
        max_attempts=cfg.max_attempts,
        batch_size=cfg.batch_size,
        job_delay=cfg.job_delay,
    )


def queue_status_handler(cfg: Settings) -> QueueStatusHandler:
    return QueueStatusHandler(job_repo=print_job_repository(cfg))


def check_printer_handler() -> CheckPrinterHandler:
    return CheckPrinterHandler(printer=network_printer())


def print_test_receipt_handler(cfg: Settings) -> PrintTestReceiptHandler:
    return PrintTestReceiptHandler(
        renderer=escpos_encoder(cfg),
        printer=network_printer(),
        currency=cfg.currency,
        tz=cfg.tzinfo(),
    )


def print_worker(cfg: Settings) -> PrintQueueWorker:
    return PrintQueueWorker(
        processor=process_queue_handler(cfg),
        printer=network_printer(),
        config=cfg.require_printer(),
        interval=cfg.process_interval,
    )


def preview_receipt_handler(cfg: Settings) -> PreviewReceiptHandler:
    return PreviewReceiptHandler(
        order_repo=order_repository(cfg),
        formatter=receipt_formatter(cfg),
        renderer=text_renderer(),
    )
