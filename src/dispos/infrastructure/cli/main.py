import click

from dispos.infrastructure.bootstrap import settings
from dispos.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from dispos.infrastructure.cli.product_commands import product_add, product_list
from dispos.infrastructure.cli.sale_commands import checkout, transaction_show
from dispos.infrastructure.cli.stock_commands import stock_receive, stock_show
from dispos.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """DisPOS — dispensary point of sale"""
    try:
        configure_logging(settings().log_level)
    except ValueError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def stock() -> None:
    """Receive and inspect inventory batches."""


@cli.group()
def cart() -> None:
    """Build the pending sale."""


@cli.group()
def transaction() -> None:
    """Inspect recorded sales."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
stock.add_command(stock_receive)
stock.add_command(stock_show)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_clear)
transaction.add_command(transaction_show)
cli.add_command(checkout)
