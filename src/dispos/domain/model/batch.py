"""Batch entity and the Allocation record drawn from it.

A batch is one received lot of a product with its own cost.  Only the
inventory ledger mutates batches, and only downwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from dispos.domain.exceptions import ValidationError
from dispos.domain.model.value_objects import Money


class BatchStatus(Enum):
    ACTIVE = "Active"
    DEPLETED = "Depleted"


@dataclass
class Batch:
    """A received lot of one product.

    Invariants:
    - ``0 <= quantity_remaining <= quantity_received``
    - ``quantity_remaining`` never increases
    - status becomes DEPLETED exactly when ``quantity_remaining`` hits 0

    Use ``Batch.receive()`` for new lots; ``__init__`` stays simple so
    repositories can reconstitute stored batches as-is.
    """

    id: str
    product_id: str
    batch_number: str
    quantity_received: Decimal
    quantity_remaining: Decimal
    cost_per_unit: Money
    received_at: datetime
    status: BatchStatus = BatchStatus.ACTIVE
    depleted_at: datetime | None = None

    @staticmethod
    def receive(
        id: str,
        product_id: str,
        batch_number: str,
        quantity: Decimal,
        cost_per_unit: Money,
        received_at: datetime | None = None,
    ) -> Batch:
        """Create a new, full, Active batch."""
        if not batch_number or not batch_number.strip():
            raise ValidationError("Batch number is required")
        if quantity <= 0:
            raise ValidationError("Received quantity must be positive")
        return Batch(
            id=id,
            product_id=product_id,
            batch_number=batch_number.strip(),
            quantity_received=quantity,
            quantity_remaining=quantity,
            cost_per_unit=cost_per_unit,
            received_at=received_at or datetime.now(timezone.utc),
        )

    @property
    def is_active(self) -> bool:
        return self.status == BatchStatus.ACTIVE

    def set_remaining(self, new_remaining: Decimal) -> None:
        """Apply a decrement computed by the ledger."""
        if new_remaining < 0:
            raise ValidationError(
                f"Batch {self.batch_number} cannot go below zero (got {new_remaining})"
            )
        if new_remaining > self.quantity_remaining:
            raise ValidationError(
                f"Batch {self.batch_number} remaining quantity cannot increase "
                f"({self.quantity_remaining} -> {new_remaining})"
            )
        self.quantity_remaining = new_remaining
        if new_remaining == 0 and self.status == BatchStatus.ACTIVE:
            self.status = BatchStatus.DEPLETED
            self.depleted_at = datetime.now(timezone.utc)


@dataclass(frozen=True)
class Allocation:
    """How much of one sale line was drawn from one batch, at its cost.

    Keeping the batch's own cost preserves historical cost of goods even
    when newer lots were bought at a different price.
    """

    batch_id: str
    quantity_allocated: Decimal
    cost_per_unit: Money

    @property
    def cost(self) -> Money:
        return self.cost_per_unit * self.quantity_allocated
