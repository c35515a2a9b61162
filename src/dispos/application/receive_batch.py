"""Application service: Receive Batch use case.

Books a newly delivered lot into stock.  The lot starts full and Active.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from dispos.domain.exceptions import EntityNotFoundError, ValidationError
from dispos.domain.model.batch import Batch
from dispos.domain.model.value_objects import Money, to_decimal
from dispos.domain.repository.batch_repository import BatchRepository
from dispos.domain.repository.product_repository import ProductRepository


class ReceiveBatchHandler:

    def __init__(
        self,
        batch_repo: BatchRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._batch_repo = batch_repo
        self._product_repo = product_repo

    def handle(
        self,
        sku: str,
        batch_number: str,
        quantity: str | int,
        cost_per_unit: str,
        received_at: datetime | None = None,
    ) -> Batch:
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{sku}'")

        for existing in self._batch_repo.list_for_product(product.id):
            if existing.batch_number.lower() == batch_number.strip().lower():
                raise ValidationError(
                    f"Batch '{batch_number}' already received for {product.name}"
                )

        received = to_decimal(quantity)
        if not product.requires_fractional_quantity and received != received.to_integral_value():
            raise ValidationError(f"{product.name} is received in whole {product.unit.value}s")

        if received_at is not None and received_at.tzinfo is None:
            received_at = received_at.replace(tzinfo=timezone.utc)

        batch = Batch.receive(
            id=str(uuid.uuid4()),
            product_id=product.id,
            batch_number=batch_number,
            quantity=received,
            cost_per_unit=Money.of(cost_per_unit, product.base_price.currency),
            received_at=received_at,
        )
        self._batch_repo.save(batch)
        return batch
