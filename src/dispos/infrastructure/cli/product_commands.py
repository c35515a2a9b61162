"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from dispos.application.add_product import AddProductHandler
from dispos.domain.exceptions import DomainException
from dispos.domain.model.product import ProductCategory, UnitOfMeasure
from dispos.infrastructure.bootstrap import product_repository, settings


@click.command("add")
@click.option("--sku", required=True, help="Stock keeping unit, e.g. FL-001.")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--category",
    required=True,
    type=click.Choice([c.value for c in ProductCategory], case_sensitive=False),
)
@click.option(
    "--unit",
    required=True,
    type=click.Choice([u.value for u in UnitOfMeasure], case_sensitive=False),
)
@click.option("--price", required=True, help="Base price per unit.")
@click.option("--fractional", is_flag=True, help="Sold by weight in tenths.")
@click.option("--reorder-threshold", default="0", show_default=True)
def product_add(
    sku: str,
    name: str,
    category: str,
    unit: str,
    price: str,
    fractional: bool,
    reorder_threshold: str,
) -> None:
    """Add a product to the catalog."""
    handler = AddProductHandler(
        product_repo=product_repository(),
        currency=settings().currency,
    )

    try:
        product = handler.handle(
            sku=sku,
            name=name,
            category=category,
            unit=unit,
            price=price,
            fractional=fractional,
            reorder_threshold=reorder_threshold,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} added: {product.name} at {product.base_price}/{product.unit.value}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    try:
        products = product_repository().list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<10} {'Name':<24} {'Category':<12} {'Unit':<8} {'Price':>10}")
    click.echo("-" * 68)
    for p in products:
        click.echo(
            f"{p.sku:<10} {p.name:<24} {p.category.value:<12} "
            f"{p.unit.value:<8} {str(p.base_price):>10}"
        )
