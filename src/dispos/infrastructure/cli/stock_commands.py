"""CLI commands for inventory batches."""

from __future__ import annotations

import click

from dispos.application.receive_batch import ReceiveBatchHandler
from dispos.application.show_stock import ShowStockHandler
from dispos.domain.exceptions import DomainException
from dispos.infrastructure.bootstrap import batch_repository, product_repository


@click.command("receive")
@click.option("--sku", required=True, help="Product SKU.")
@click.option("--batch", "batch_number", required=True, help="Supplier batch number.")
@click.option("--quantity", required=True, help="Quantity received.")
@click.option("--cost", required=True, help="Cost per unit.")
@click.option(
    "--received-at",
    type=click.DateTime(),
    default=None,
    help="Receipt time (UTC). Defaults to now.",
)
def stock_receive(sku: str, batch_number: str, quantity: str, cost: str, received_at) -> None:
    """Book a delivered batch into stock."""
    handler = ReceiveBatchHandler(
        batch_repo=batch_repository(),
        product_repo=product_repository(),
    )

    try:
        batch = handler.handle(
            sku=sku,
            batch_number=batch_number,
            quantity=quantity,
            cost_per_unit=cost,
            received_at=received_at,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Batch {batch.batch_number} received: {batch.quantity_received} "
        f"at {batch.cost_per_unit} each"
    )


@click.command("show")
def stock_show() -> None:
    """Show available stock per product."""
    handler = ShowStockHandler(
        product_repo=product_repository(),
        batch_repo=batch_repository(),
    )

    try:
        lines = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<10} {'Product':<24} {'Available':>10} {'Unit':<8} {'Batches':>8}")
    click.echo("-" * 64)
    for line in lines:
        flag = "  REORDER" if line.needs_reorder else ""
        click.echo(
            f"{line.sku:<10} {line.product_name:<24} {line.available:>10} "
            f"{line.unit:<8} {line.active_batches:>8}{flag}"
        )
