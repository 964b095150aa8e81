"""CLI commands for the print queue."""

from __future__ import annotations

import click

from kprint.domain.exceptions import DomainException
from kprint.infrastructure.bootstrap import (
    enqueue_handler,
    immediate_print_handler,
    print_worker,
    process_queue_handler,
    queue_status_handler,
)
from kprint.infrastructure.config import Settings


def _enqueue(cfg: Settings, order_id: int, print_now: bool) -> None:
    try:
        dto = enqueue_handler(cfg).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Print job #{dto.id} queued for order {dto.order_number}  (status={dto.status})")

    if print_now:
        result = immediate_print_handler(cfg).handle(order_id, cfg.printer_config())
        if not result.configured:
            click.echo(f"Not printed now: {result.message}")
        elif result.success:
            click.echo(f"Printed: {result.message}")
        else:
            click.echo(f"Print failed, left in queue: {result.message}")


@click.command("add")
@click.option("--order", "order_id", required=True, type=int, help="Order ID to print.")
@click.option("--print-now", is_flag=True, default=False, help="Try the printer immediately.")
@click.pass_obj
def queue_add(cfg: Settings, order_id: int, print_now: bool) -> None:
    """Queue a receipt for a new order."""
    _enqueue(cfg, order_id, print_now)


@click.command("reprint")
@click.option("--order", "order_id", required=True, type=int, help="Order ID to reprint.")
@click.option("--print-now", is_flag=True, default=False, help="Try the printer immediately.")
@click.pass_obj
def queue_reprint(cfg: Settings, order_id: int, print_now: bool) -> None:
    """Queue another copy of an order's receipt."""
    _enqueue(cfg, order_id, print_now)


@click.command("process")
@click.pass_obj
def queue_process(cfg: Settings) -> None:
    """Run one batch of pending print jobs."""
    try:
        config = cfg.require_printer()
        result = process_queue_handler(cfg).handle(config)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Processed {result.processed} job(s): "
        f"{result.succeeded} printed, {result.failed} failed"
    )
    for err in result.errors:
        click.echo(f"  Job #{err.job_id}: {err.error}")


@click.command("status")
@click.pass_obj
def queue_status(cfg: Settings) -> None:
    """Show queue counts and the newest pending jobs."""
    dto = queue_status_handler(cfg).handle()

    click.echo(f"Pending: {dto.pending}  Printed: {dto.printed}  Failed: {dto.failed}  Total: {dto.total}")
    if not dto.recent_pending:
        return
    click.echo()
    click.echo(f"  {'Job':>5} {'Order':>7} {'Attempts':>9}  {'Created':<20}")
    click.echo(f"  {'-'*44}")
    for job in dto.recent_pending:
        click.echo(f"  {job.id:>5} {job.order_id:>7} {job.attempts:>9}  {job.created_at:<20}")


@click.command("worker")
@click.option("--cycles", type=int, default=None, help="Stop after this many batches.")
@click.pass_obj
def queue_worker(cfg: Settings, cycles: int | None) -> None:
    """Process the queue on an interval until interrupted."""
    try:
        worker = print_worker(cfg)
        worker.run(max_cycles=cycles)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except KeyboardInterrupt:
        click.echo("Print worker stopped.")
