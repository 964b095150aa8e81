import click

from kprint.domain.exceptions import ConfigurationError
from kprint.infrastructure.bootstrap import settings
from kprint.infrastructure.cli.printer_commands import (
    printer_ping,
    printer_status,
    printer_test,
)
from kprint.infrastructure.cli.queue_commands import (
    queue_add,
    queue_process,
    queue_reprint,
    queue_status,
    queue_worker,
)
from kprint.infrastructure.cli.receipt_commands import receipt_preview
from kprint.infrastructure.logging_config import setup_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """kprint: kitchen receipt printing over the network."""
    try:
        cfg = settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    setup_logging("DEBUG" if verbose else cfg.log_level, cfg.log_dir)
    ctx.obj = cfg


@cli.group()
def queue() -> None:
    """Manage the print queue."""


@cli.group()
def printer() -> None:
    """Check and test the printer."""


@cli.group()
def receipt() -> None:
    """Render receipts."""


# Register subcommands
queue.add_command(queue_add)
queue.add_command(queue_process)
queue.add_command(queue_reprint)
queue.add_command(queue_status)
queue.add_command(queue_worker)
printer.add_command(printer_ping)
printer.add_command(printer_status)
printer.add_command(printer_test)
receipt.add_command(receipt_preview)
