"""Application service: Update Cart Quantity use case.

Applies the cart's own quantity rules first.  If the new quantity is
accepted, it is checked against stock and any shortfall is recorded on
the cart as an inline validation error rather than raised.
"""

from __future__ import annotations

from decimal import Decimal

from dispos.domain.exceptions import EntityNotFoundError
from dispos.domain.repository.cart_repository import CartRepository
from dispos.domain.service.inventory_validator import InventoryValidator, QuantityCheck


class UpdateCartQuantityHandler:

    def __init__(self, cart_repo: CartRepository, validator: InventoryValidator) -> None:
        self._cart_repo = cart_repo
        self._validator = validator

    def handle(self, product_id: str, quantity: Decimal | int | float | str) -> QuantityCheck | None:
        """Return the stock check, or None if the cart rejected the quantity."""
        cart = self._cart_repo.load()
        line = cart.get_line(product_id)
        if line is None:
            raise EntityNotFoundError(f"Product '{product_id}' is not in the cart")

        applied = cart.update_quantity(product_id, quantity)
        check = None
        if applied:
            check = self._validator.validate_single_quantity(
                product_id, line.quantity.value, line.product
            )
            cart.set_validation_error(product_id, check.error)

        self._cart_repo.save(cart)
        return check
