"""Abstract repository for Transaction records.

Inserts return the stored record, with the id and timestamp assigned
by the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from dispos.domain.model.batch import Allocation
from dispos.domain.model.transaction import (
    PaymentMethod,
    Transaction,
    TransactionLineItem,
)
from dispos.domain.model.value_objects import Money


class TransactionRepository(ABC):

    @abstractmethod
    def insert_transaction(
        self,
        user_id: str,
        location_id: str,
        shift_id: str,
        total_amount: Money,
        payment_method: PaymentMethod,
    ) -> Transaction:
        """Create a transaction record."""

    @abstractmethod
    def insert_line_item(
        self,
        transaction_id: str,
        product_id: str,
        quantity: Decimal,
        unit_price: Money,
        line_total: Money,
        allocations: list[Allocation],
    ) -> TransactionLineItem:
        """Create a line item with its batch allocations."""

    @abstractmethod
    def get_by_id(self, transaction_id: str) -> Transaction | None:
        """Return a transaction by its ID, or None if not found."""

    @abstractmethod
    def list_line_items(self, transaction_id: str) -> list[TransactionLineItem]:
        """Return a transaction's line items in insertion order."""
