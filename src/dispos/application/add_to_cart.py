"""Application service: Add to Cart use case."""

from __future__ import annotations

from decimal import Decimal

from dispos.domain.exceptions import EntityNotFoundError, ValidationError
from dispos.domain.model.cart import CartLine
from dispos.domain.repository.cart_repository import CartRepository
from dispos.domain.repository.product_repository import ProductRepository
from dispos.domain.service.inventory_ledger import InventoryLedger


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(self, sku: str, quantity: Decimal | int | float | str = 1) -> CartLine:
        """Add a product to the cart by SKU.

        Out-of-stock products are refused outright.  Whether the combined
        quantity fits the stock is left to the interactive check and to
        the whole-cart validation at checkout.
        """
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{sku}'")

        if self._ledger.available_quantity(product.id) <= 0:
            raise ValidationError(f"{product.name} is out of stock")

        cart = self._cart_repo.load()
        line = cart.add_item(product, quantity)
        self._cart_repo.save(cart)
        return line
