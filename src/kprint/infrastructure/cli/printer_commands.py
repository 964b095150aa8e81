"""CLI commands for the printer itself."""

from __future__ import annotations

import click

from kprint.domain.exceptions import DomainException
from kprint.infrastructure.bootstrap import (
    check_printer_handler,
    print_test_receipt_handler,
)
from kprint.infrastructure.config import Settings


def _require_printer(cfg: Settings):
    try:
        return cfg.require_printer()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("status")
@click.pass_obj
def printer_status(cfg: Settings) -> None:
    """Query printer and paper status."""
    config = _require_printer(cfg)
    dto = check_printer_handler().handle(config)

    click.echo(f"Printer {dto.address}: {'READY' if dto.ready else 'NOT READY'}")
    for key, value in dto.details.items():
        if value is not None:
            click.echo(f"  {key:<15} {value}")
    for reason in dto.blocking_reasons:
        click.echo(f"  blocked: {reason}")
    for warning in dto.warnings:
        click.echo(f"  warning: {warning}")
    if not dto.ready:
        raise click.exceptions.Exit(1)


@click.command("ping")
@click.pass_obj
def printer_ping(cfg: Settings) -> None:
    """Check that the printer accepts connections."""
    config = _require_printer(cfg)
    result = check_printer_handler().ping(config)
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(result.message)


@click.command("test")
@click.pass_obj
def printer_test(cfg: Settings) -> None:
    """Print a test receipt, bypassing the queue."""
    config = _require_printer(cfg)
    result = print_test_receipt_handler(cfg).handle(config)
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(f"Test print sent: {result.message}")
