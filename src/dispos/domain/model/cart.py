"""Cart aggregate: the pending sale at the register.

The Cart owns its lines until checkout succeeds.  All mutation goes
through the methods below; callers never edit ``lines`` directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from dispos.domain.exceptions import ValidationError
from dispos.domain.model.product import Product
from dispos.domain.model.value_objects import (
    DEFAULT_CURRENCY,
    Money,
    Quantity,
    normalize_quantity,
)

MIN_QUANTITY_MESSAGE = "Quantity must be at least 1"


@dataclass
class CartLine:
    """One product in the cart with the price captured when it was added."""

    product: Product
    quantity: Quantity
    unit_price: Money  # locked at add time

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Cart:
    """Aggregate root for the pending sale.

    Invariants:
    - at most one line per product id
    - every line quantity is positive and respects the product's
      rounding rule (tenths for fractional products, whole units otherwise)

    ``validation_errors`` is a side channel keyed by product id.  It holds
    both the synchronous quantity-rule errors raised here and the
    inventory-check errors the validator reports afterwards.
    """

    lines: list[CartLine] = field(default_factory=list)
    validation_errors: dict[str, str | None] = field(default_factory=dict)
    currency: str = DEFAULT_CURRENCY

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: Product, quantity: Decimal | int | float | str = 1) -> CartLine:
        """Add a product, merging into its existing line if there is one.

        When merging, the combined quantity is priced at the unit price
        captured by the first add, not the product's current base price.
        """
        added = self._normalize(quantity, product)
        if added is None:
            raise ValidationError(MIN_QUANTITY_MESSAGE)

        existing = self.get_line(product.id)
        if existing is not None:
            existing.quantity = existing.quantity + added
            return existing

        line = CartLine(product=product, quantity=added, unit_price=product.base_price)
        self.lines.append(line)
        return line

    def remove_item(self, product_id: str) -> None:
        self.lines = [line for line in self.lines if line.product_id != product_id]
        self.validation_errors.pop(product_id, None)

    def update_quantity(self, product_id: str, new_quantity: Decimal | int | float | str) -> bool:
        """Replace a line's quantity.

        Quantities that are (or round to) zero or less are rejected: the
        line keeps its quantity and a validation error is recorded.  Going
        to zero has to be an explicit ``remove_item``.

        Returns True if the quantity was applied.
        """
        line = self.get_line(product_id)
        if line is None:
            return False

        quantity = self._normalize(new_quantity, line.product)
        if quantity is None:
            self.set_validation_error(product_id, MIN_QUANTITY_MESSAGE)
            return False

        self.set_validation_error(product_id, None)
        line.quantity = quantity
        return True

    def clear(self) -> None:
        self.lines = []
        self.validation_errors = {}

    def set_validation_error(self, product_id: str, error: str | None) -> None:
        self.validation_errors[product_id] = error

    # --- Queries --------------------------------------------------------------

    def get_line(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def item_count(self) -> Decimal:
        return sum((line.quantity.value for line in self.lines), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _normalize(value: Decimal | int | float | str, product: Product) -> Quantity | None:
        """Apply the product's rounding rule; None if the result is not positive."""
        rounded = normalize_quantity(value, product.requires_fractional_quantity)
        if rounded <= 0:
            return None
        return Quantity(rounded)
