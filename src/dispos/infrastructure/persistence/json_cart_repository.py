"""JSON-file-backed implementation of CartRepository.

Keeps the register's cart across restarts.  Each line embeds a snapshot
of its product, so a cart reloads with the prices it was built with.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from dispos.domain.model.cart import Cart, CartLine
from dispos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from dispos.domain.repository.cart_repository import CartRepository
from dispos.infrastructure.persistence.json_file import JsonFile
from dispos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path, currency: str = DEFAULT_CURRENCY) -> None:
        self._currency = currency
        self._file = JsonFile(file_path, empty=self._to_raw(Cart(currency=currency)))

    def load(self) -> Cart:
        return self._to_domain(self._file.load())

    def save(self, cart: Cart) -> None:
        self._file.persist(self._to_raw(cart))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "currency": cart.currency,
            "items": [
                {
                    "product": JsonProductRepository.to_raw(line.product),
                    "quantity": str(line.quantity.value),
                    "unit_price": str(line.unit_price.amount),
                }
                for line in cart.lines
            ],
            "validation_errors": dict(cart.validation_errors),
        }

    def _to_domain(self, raw: dict) -> Cart:
        currency = raw.get("currency", self._currency)
        lines = [
            CartLine(
                product=JsonProductRepository.to_domain(i["product"]),
                quantity=Quantity(Decimal(i["quantity"])),
                unit_price=Money(Decimal(i["unit_price"]), currency),
            )
            for i in raw.get("items", [])
        ]
        return Cart(
            lines=lines,
            validation_errors=dict(raw.get("validation_errors", {})),
            currency=currency,
        )
