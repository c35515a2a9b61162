"""JSON-file-backed implementation of BatchRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from dispos.domain.exceptions import EntityNotFoundError, StaleBatchError
from dispos.domain.model.batch import Batch, BatchStatus
from dispos.domain.model.value_objects import DEFAULT_CURRENCY, Money
from dispos.domain.repository.batch_repository import BatchRepository
from dispos.infrastructure.persistence.json_file import JsonFile


class JsonBatchRepository(BatchRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- BatchRepository interface --------------------------------------------

    def get_by_id(self, batch_id: str) -> Batch | None:
        for raw in self._file.load():
            if raw["id"] == batch_id:
                return self._to_domain(raw)
        return None

    def list_for_product(self, product_id: str) -> list[Batch]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["product_id"] == product_id
        ]

    def list_active(self, product_id: str) -> list[Batch]:
        return [b for b in self.list_for_product(product_id) if b.is_active]

    def sum_remaining(self, product_id: str) -> Decimal:
        return sum(
            (b.quantity_remaining for b in self.list_active(product_id)),
            Decimal("0"),
        )

    def decrement(
        self,
        batch_id: str,
        new_quantity_remaining: Decimal,
        expected_remaining: Decimal | None = None,
    ) -> None:
        # Read, compare and write happen in one call, like a conditional
        # UPDATE ... WHERE quantity_remaining = :expected on a SQL store.
        records = self._file.load()
        for i, raw in enumerate(records):
            if raw["id"] != batch_id:
                continue
            batch = self._to_domain(raw)
            if expected_remaining is not None and batch.quantity_remaining != expected_remaining:
                raise StaleBatchError(
                    f"Batch {batch.batch_number} changed during checkout "
                    f"(expected {expected_remaining}, found {batch.quantity_remaining})"
                )
            batch.set_remaining(new_quantity_remaining)
            records[i] = self._to_raw(batch)
            self._file.persist(records)
            return
        raise EntityNotFoundError(f"Batch not found: {batch_id}")

    def save(self, batch: Batch) -> None:
        records = self._file.load()
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == batch.id:
                records[i] = self._to_raw(batch)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(batch))
        self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(batch: Batch) -> dict:
        return {
            "id": batch.id,
            "product_id": batch.product_id,
            "batch_number": batch.batch_number,
            "quantity_received": str(batch.quantity_received),
            "quantity_remaining": str(batch.quantity_remaining),
            "cost_per_unit": str(batch.cost_per_unit.amount),
            "currency": batch.cost_per_unit.currency,
            "received_at": batch.received_at.isoformat(),
            "status": batch.status.value,
            "depleted_at": batch.depleted_at.isoformat() if batch.depleted_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Batch:
        depleted_at = raw.get("depleted_at")
        return Batch(
            id=raw["id"],
            product_id=raw["product_id"],
            batch_number=raw["batch_number"],
            quantity_received=Decimal(str(raw["quantity_received"])),
            quantity_remaining=Decimal(str(raw["quantity_remaining"])),
            cost_per_unit=Money(
                Decimal(str(raw["cost_per_unit"])), raw.get("currency", DEFAULT_CURRENCY)
            ),
            received_at=datetime.fromisoformat(raw["received_at"]),
            status=BatchStatus(raw.get("status", BatchStatus.ACTIVE.value)),
            depleted_at=datetime.fromisoformat(depleted_at) if depleted_at else None,
        )
