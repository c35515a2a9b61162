"""JSON-file-backed implementation of TransactionRepository.

Line items are stored nested under their transaction.  Allocations are
kept as ``{"batch_id", "quantity_allocated", "cost_per_unit"}`` records,
the cost-of-goods audit trail; decimals are written as strings so they
read back exactly.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from dispos.domain.exceptions import EntityNotFoundError
from dispos.domain.model.batch import Allocation
from dispos.domain.model.transaction import (
    PaymentMethod,
    Transaction,
    TransactionLineItem,
)
from dispos.domain.model.value_objects import DEFAULT_CURRENCY, Money
from dispos.domain.repository.transaction_repository import TransactionRepository
from dispos.infrastructure.persistence.json_file import JsonFile


class JsonTransactionRepository(TransactionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- TransactionRepository interface --------------------------------------

    def insert_transaction(
        self,
        user_id: str,
        location_id: str,
        shift_id: str,
        total_amount: Money,
        payment_method: PaymentMethod,
    ) -> Transaction:
        transaction = Transaction(
            id=str(uuid.uuid4()),
            user_id=user_id,
            location_id=location_id,
            shift_id=shift_id,
            total_amount=total_amount,
            payment_method=payment_method,
            created_at=datetime.now(timezone.utc),
        )
        records = self._file.load()
        records.append(self._transaction_to_raw(transaction))
        self._file.persist(records)
        return transaction

    def insert_line_item(
        self,
        transaction_id: str,
        product_id: str,
        quantity: Decimal,
        unit_price: Money,
        line_total: Money,
        allocations: list[Allocation],
    ) -> TransactionLineItem:
        records = self._file.load()
        for raw in records:
            if raw["id"] == transaction_id:
                break
        else:
            raise EntityNotFoundError(f"Transaction not found: {transaction_id}")

        item = TransactionLineItem(
            id=str(uuid.uuid4()),
            transaction_id=transaction_id,
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total,
            allocations=tuple(allocations),
        )
        raw["items"].append(self._item_to_raw(item))
        self._file.persist(records)
        return item

    def get_by_id(self, transaction_id: str) -> Transaction | None:
        for raw in self._file.load():
            if raw["id"] == transaction_id:
                return self._transaction_to_domain(raw)
        return None

    def list_line_items(self, transaction_id: str) -> list[TransactionLineItem]:
        for raw in self._file.load():
            if raw["id"] == transaction_id:
                return [self._item_to_domain(i, transaction_id) for i in raw["items"]]
        return []

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def allocation_to_raw(allocation: Allocation) -> dict:
        return {
            "batch_id": allocation.batch_id,
            "quantity_allocated": str(allocation.quantity_allocated),
            "cost_per_unit": str(allocation.cost_per_unit.amount),
        }

    @staticmethod
    def allocation_from_raw(raw: dict, currency: str = DEFAULT_CURRENCY) -> Allocation:
        return Allocation(
            batch_id=raw["batch_id"],
            quantity_allocated=Decimal(str(raw["quantity_allocated"])),
            cost_per_unit=Money(Decimal(str(raw["cost_per_unit"])), currency),
        )

    @staticmethod
    def _transaction_to_raw(transaction: Transaction) -> dict:
        return {
            "id": transaction.id,
            "user_id": transaction.user_id,
            "location_id": transaction.location_id,
            "shift_id": transaction.shift_id,
            "total_amount": str(transaction.total_amount.amount),
            "currency": transaction.total_amount.currency,
            "payment_method": transaction.payment_method.value,
            "created_at": transaction.created_at.isoformat(),
            "items": [],
        }

    @staticmethod
    def _transaction_to_domain(raw: dict) -> Transaction:
        return Transaction(
            id=raw["id"],
            user_id=raw["user_id"],
            location_id=raw["location_id"],
            shift_id=raw["shift_id"],
            total_amount=Money(
                Decimal(raw["total_amount"]), raw.get("currency", DEFAULT_CURRENCY)
            ),
            payment_method=PaymentMethod(raw["payment_method"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    @classmethod
    def _item_to_raw(cls, item: TransactionLineItem) -> dict:
        return {
            "id": item.id,
            "product_id": item.product_id,
            "quantity": str(item.quantity),
            "unit_price": str(item.unit_price.amount),
            "line_total": str(item.line_total.amount),
            "currency": item.unit_price.currency,
            "batch_allocations": [cls.allocation_to_raw(a) for a in item.allocations],
        }

    @classmethod
    def _item_to_domain(cls, raw: dict, transaction_id: str) -> TransactionLineItem:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        return TransactionLineItem(
            id=raw["id"],
            transaction_id=transaction_id,
            product_id=raw["product_id"],
            quantity=Decimal(raw["quantity"]),
            unit_price=Money(Decimal(raw["unit_price"]), currency),
            line_total=Money(Decimal(raw["line_total"]), currency),
            allocations=tuple(
                cls.allocation_from_raw(a, currency) for a in raw["batch_allocations"]
            ),
        )
