"""Domain service: Inventory Ledger.

Owns every batch mutation.  Stock is drawn newest-batch-first (LIFO):
the most recently received lot is sold before older ones.  This is a
product decision, kept as-is until the business moves to FIFO.

Each batch decrement is written as soon as it is computed, not at the
end of the walk.  If the product turns out to be short halfway
through, the decrements already written stay in place; the committer
reports that case as a partial commit.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from dispos.domain.exceptions import (
    EntityNotFoundError,
    InsufficientInventoryError,
    ValidationError,
)
from dispos.domain.model.batch import Allocation, Batch
from dispos.domain.model.product import Product
from dispos.domain.repository.batch_repository import BatchRepository

logger = structlog.get_logger()


class InventoryLedger:

    def __init__(self, batch_repo: BatchRepository) -> None:
        self._batch_repo = batch_repo

    def available_quantity(self, product_id: str) -> Decimal:
        return self._batch_repo.sum_remaining(product_id)

    def allocate(
        self,
        product_id: str,
        quantity_needed: Decimal,
        product: Product | None = None,
    ) -> list[Allocation]:
        """Draw ``quantity_needed`` from the product's batches, newest first.

        Returns one Allocation per batch touched, in the order drawn.
        ``product``, when given, names the product and its unit in the
        shortfall error.

        Raises:
            ValidationError: quantity_needed is not positive.
            EntityNotFoundError: the product has no batch with stock left.
            InsufficientInventoryError: all batches together fall short
                (decrements made before the shortfall are kept).
        """
        if quantity_needed <= 0:
            raise ValidationError("Allocation quantity must be positive")

        batches = self._candidate_batches(product_id)
        if not batches:
            raise EntityNotFoundError(f"No active batches found for product {product_id}")

        log = logger.bind(product_id=product_id, quantity_needed=str(quantity_needed))
        still_needed = quantity_needed
        allocations: list[Allocation] = []

        for batch in batches:
            if still_needed <= 0:
                break

            take = min(batch.quantity_remaining, still_needed)
            new_remaining = batch.quantity_remaining - take

            self._batch_repo.decrement(
                batch.id, new_remaining, expected_remaining=batch.quantity_remaining
            )
            allocations.append(
                Allocation(
                    batch_id=batch.id,
                    quantity_allocated=take,
                    cost_per_unit=batch.cost_per_unit,
                )
            )
            still_needed -= take
            log.debug(
                "batch_allocated",
                batch_id=batch.id,
                quantity_allocated=str(take),
                quantity_remaining=str(new_remaining),
            )

        if still_needed > 0:
            allocated = quantity_needed - still_needed
            log.warning("allocation_short", allocated=str(allocated))
            raise InsufficientInventoryError(
                product_name=product.name if product is not None else f"product {product_id}",
                available_quantity=allocated,
                requested_quantity=quantity_needed,
                unit=product.unit.value if product is not None else "units",
            )

        return allocations

    # --- Internal helpers -----------------------------------------------------

    def _candidate_batches(self, product_id: str) -> list[Batch]:
        """Active batches with stock, newest received first."""
        batches = [
            b for b in self._batch_repo.list_active(product_id)
            if b.is_active and b.quantity_remaining > 0
        ]
        batches.sort(key=lambda b: (b.received_at, b.batch_number), reverse=True)
        return batches
