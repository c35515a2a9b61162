"""Transaction records: the committed facts of a sale.

Both records are created once by the committer and never updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from dispos.domain.model.batch import Allocation
from dispos.domain.model.value_objects import Money


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    QR_CODE = "QR Code"


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    location_id: str
    shift_id: str
    total_amount: Money
    payment_method: PaymentMethod
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class TransactionLineItem:
    """One sold product with the batches that satisfied it."""

    id: str
    transaction_id: str
    product_id: str
    quantity: Decimal
    unit_price: Money
    line_total: Money
    allocations: tuple[Allocation, ...] = ()

    @property
    def cost_of_goods(self) -> Money:
        result = Money.zero(self.unit_price.currency)
        for allocation in self.allocations:
            result = result + allocation.cost
        return result
