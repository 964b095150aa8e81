"""CLI commands for receipt rendering."""

from __future__ import annotations

import click

from kprint.domain.exceptions import DomainException
from kprint.infrastructure.bootstrap import preview_receipt_handler
from kprint.infrastructure.config import Settings


@click.command("preview")
@click.option("--order", "order_id", required=True, type=int, help="Order ID to render.")
@click.pass_obj
def receipt_preview(cfg: Settings, order_id: int) -> None:
    """Print an order's receipt as plain text."""
    try:
        text = preview_receipt_handler(cfg).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(text)
