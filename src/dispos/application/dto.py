"""Data Transfer Objects — plain containers that cross layer boundaries.

Inputs carry what the register knows about the sale; outputs are
formatted for display so the CLI never touches domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass

from dispos.domain.model.transaction import (
    PaymentMethod,
    Transaction,
    TransactionLineItem,
)
from dispos.domain.model.value_objects import Money


@dataclass(frozen=True)
class CashierSession:
    """Input: the signed-in cashier and the shift they are selling on."""

    user_id: str
    location_id: str | None
    shift_id: str


@dataclass(frozen=True)
class TransactionRequest:
    """Input: the header fields of a sale."""

    user_id: str
    location_id: str
    shift_id: str
    total_amount: Money
    payment_method: PaymentMethod = PaymentMethod.CASH


@dataclass(frozen=True)
class TransactionResult:
    """Output of a successful commit: the records exactly as stored."""

    transaction: Transaction
    line_items: list[TransactionLineItem]


@dataclass(frozen=True)
class AllocationDTO:
    batch_id: str
    quantity: str
    cost_per_unit: str  # formatted, e.g. "฿220.00"


@dataclass(frozen=True)
class TransactionLineDTO:
    product_name: str
    quantity: str
    unit_price: str
    line_total: str
    cost_of_goods: str
    allocations: list[AllocationDTO]


@dataclass(frozen=True)
class TransactionDTO:
    """Output: a recorded sale as displayed to the user."""

    id: str
    user_id: str
    location_id: str
    shift_id: str
    payment_method: str
    total: str
    created_at: str
    items: list[TransactionLineDTO]


@dataclass(frozen=True)
class StockLineDTO:
    sku: str
    product_name: str
    unit: str
    available: str
    active_batches: int
    needs_reorder: bool
