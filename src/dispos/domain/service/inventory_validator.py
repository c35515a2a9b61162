"""Domain service: Inventory Validator.

Read-only checks of cart quantities against batch stock.  The whole-cart
check runs before the committer writes anything, so a cart with any
short line is rejected with every batch untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from dispos.domain.exceptions import (
    InsufficientInventoryError,
    PersistenceError,
    TransientError,
)
from dispos.domain.model.cart import CartLine
from dispos.domain.model.product import Product
from dispos.domain.repository.batch_repository import BatchRepository

logger = structlog.get_logger()


@dataclass(frozen=True)
class QuantityCheck:
    """Outcome of an interactive single-line check."""

    valid: bool
    available_quantity: Decimal
    error: str | None = None


class InventoryValidator:

    def __init__(self, batch_repo: BatchRepository) -> None:
        self._batch_repo = batch_repo

    def validate_availability(self, lines: list[CartLine]) -> None:
        """Ensure every line's quantity is covered by Active batch stock.

        Stops at the first short line.  Performs no writes.

        Raises:
            InsufficientInventoryError: with the product name, available
                and requested quantities and unit of the short line.
        """
        for line in lines:
            available = self._batch_repo.sum_remaining(line.product_id)
            requested = line.quantity.value
            if requested > available:
                raise InsufficientInventoryError(
                    product_name=line.product.name,
                    available_quantity=available,
                    requested_quantity=requested,
                    unit=line.product.unit.value,
                )

    def validate_single_quantity(
        self,
        product_id: str,
        quantity: Decimal,
        product: Product | None = None,
    ) -> QuantityCheck:
        """Check one quantity while the cashier is still editing it.

        Never raises: store failures and unexpected errors come back as
        an invalid result with an inline message.
        """
        try:
            available = self._batch_repo.sum_remaining(product_id)
        except (PersistenceError, TransientError) as exc:
            logger.warning("inventory_check_failed", product_id=product_id, error=str(exc))
            return QuantityCheck(
                valid=False,
                available_quantity=Decimal("0"),
                error="Unable to check inventory availability",
            )
        except Exception as exc:
            logger.error(
                "inventory_check_crashed",
                product_id=product_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return QuantityCheck(
                valid=False,
                available_quantity=Decimal("0"),
                error="Unexpected error checking inventory",
            )

        if quantity > available:
            unit = product.unit.value if product is not None else "units"
            return QuantityCheck(
                valid=False,
                available_quantity=available,
                error=f"Only {available} {unit} available",
            )
        return QuantityCheck(valid=True, available_quantity=available)
