"""CLI commands for completing and inspecting sales."""

from __future__ import annotations

import click

from dispos.application.checkout import describe_failure
from dispos.application.dto import CashierSession
from dispos.application.show_transaction import ShowTransactionHandler
from dispos.domain.exceptions import DomainException
from dispos.domain.model.transaction import PaymentMethod
from dispos.infrastructure.bootstrap import (
    checkout_handler,
    product_repository,
    settings,
    transaction_repository,
)


@click.command("checkout")
@click.option("--user", "user_id", envvar="DISPOS_USER_ID", help="Cashier user ID.")
@click.option("--location", "location_id", envvar="DISPOS_LOCATION_ID", help="Store location ID.")
@click.option("--shift", "shift_id", envvar="DISPOS_SHIFT_ID", help="Open shift ID.")
@click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default=PaymentMethod.CASH.value,
    show_default=True,
)
def checkout(user_id: str | None, location_id: str | None, shift_id: str | None, payment: str) -> None:
    """Complete the sale in the cart."""
    session = None
    if user_id and shift_id:
        session = CashierSession(user_id=user_id, location_id=location_id, shift_id=shift_id)

    method = next(m for m in PaymentMethod if m.value.lower() == payment.lower())
    attempts = settings().checkout_attempts

    def on_retry(attempt: int, error: Exception) -> None:
        click.echo(f"Network error. Retrying... (attempt {attempt + 1}/{attempts})", err=True)

    try:
        result = checkout_handler().handle(session, payment_method=method, on_retry=on_retry)
    except DomainException as exc:
        title, message = describe_failure(exc)
        raise click.ClickException(f"{title}: {message}")

    click.echo(f"Transaction completed: {result.transaction.total_amount}")
    click.echo(f"Transaction ID: {result.transaction.id}")


@click.command("show")
@click.option("--id", "transaction_id", required=True, help="Transaction ID to display.")
def transaction_show(transaction_id: str) -> None:
    """Show a recorded sale with its batch allocations."""
    handler = ShowTransactionHandler(
        transaction_repo=transaction_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(transaction_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transaction {dto.id}  ({dto.payment_method})")
    click.echo(f"Cashier:  {dto.user_id}  Location: {dto.location_id}  Shift: {dto.shift_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>6} {'Price':>10} {'Total':>10} {'COGS':>10}")
    click.echo(f"  {'-'*64}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>6} {item.unit_price:>10} "
            f"{item.line_total:>10} {item.cost_of_goods:>10}"
        )
        for allocation in item.allocations:
            click.echo(
                f"      batch {allocation.batch_id[:8]}  {allocation.quantity} @ {allocation.cost_per_unit}"
            )
    click.echo(f"  {'-'*64}")
    click.echo(f"  {'Total':<31} {dto.total:>33}")
