"""CLI commands for the register's cart."""

from __future__ import annotations

import click

from dispos.application.add_to_cart import AddToCartHandler
from dispos.application.remove_from_cart import RemoveFromCartHandler
from dispos.application.update_cart_quantity import UpdateCartQuantityHandler
from dispos.domain.exceptions import DomainException, EntityNotFoundError
from dispos.infrastructure.bootstrap import (
    cart_repository,
    inventory_ledger,
    inventory_validator,
    product_repository,
)


def _product_id_for(sku: str) -> str:
    product = product_repository().get_by_sku(sku)
    if product is None:
        raise EntityNotFoundError(f"Product not found: '{sku}'")
    return product.id


@click.command("add")
@click.option("--sku", required=True, help="Product SKU.")
@click.option("--quantity", default="1", show_default=True, help="Quantity to add.")
def cart_add(sku: str, quantity: str) -> None:
    """Add a product to the cart."""
    handler = AddToCartHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        ledger=inventory_ledger(),
    )

    try:
        line = handler.handle(sku=sku, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{line.product.name}: {line.quantity} {line.product.unit.value} in cart")


@click.command("update")
@click.option("--sku", required=True, help="Product SKU.")
@click.option("--quantity", required=True, help="New quantity.")
def cart_update(sku: str, quantity: str) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartQuantityHandler(
        cart_repo=cart_repository(),
        validator=inventory_validator(),
    )

    try:
        check = handler.handle(_product_id_for(sku), quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if check is None:
        raise click.ClickException("Quantity must be at least 1")
    if not check.valid:
        click.echo(f"Warning: {check.error}", err=True)
    click.echo(f"Quantity for {sku.upper()} updated")


@click.command("remove")
@click.option("--sku", required=True, help="Product SKU.")
def cart_remove(sku: str) -> None:
    """Remove a product from the cart."""
    handler = RemoveFromCartHandler(cart_repo=cart_repository())

    try:
        handler.handle(_product_id_for(sku))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{sku.upper()} removed from cart")


@click.command("show")
def cart_show() -> None:
    """Show the cart contents and subtotal."""
    try:
        cart = cart_repository().load()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if cart.is_empty:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Product':<24} {'Qty':>6} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*53}")
    for line in cart.lines:
        click.echo(
            f"  {line.product.name:<24} {str(line.quantity):>6} "
            f"{str(line.unit_price):>10} {str(line.line_total):>10}"
        )
        error = cart.validation_errors.get(line.product_id)
        if error:
            click.echo(f"    ! {error}")
    click.echo(f"  {'-'*53}")
    click.echo(f"  {'Items':<31} {str(cart.item_count):>22}")
    click.echo(f"  {'Subtotal':<31} {str(cart.subtotal):>22}")


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""
    repo = cart_repository()
    try:
        cart = repo.load()
        cart.clear()
        repo.save(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Cart cleared.")
