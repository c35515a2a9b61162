"""Abstract repository for Batch entities.

Mirrors the operations the remote store offers.  Each call is atomic on
its own; nothing here spans several calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from dispos.domain.model.batch import Batch


class BatchRepository(ABC):

    @abstractmethod
    def get_by_id(self, batch_id: str) -> Batch | None:
        """Return a batch by its ID, or None if not found."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[Batch]:
        """Return every batch of a product, in any status."""

    @abstractmethod
    def list_active(self, product_id: str) -> list[Batch]:
        """Return the product's Active batches, in no particular order."""

    @abstractmethod
    def sum_remaining(self, product_id: str) -> Decimal:
        """Total ``quantity_remaining`` across the product's Active batches."""

    @abstractmethod
    def decrement(
        self,
        batch_id: str,
        new_quantity_remaining: Decimal,
        expected_remaining: Decimal | None = None,
    ) -> None:
        """Write a batch's new remaining quantity.

        When ``expected_remaining`` is given the write only happens if the
        stored value still equals it; otherwise ``StaleBatchError`` is
        raised.  Raises ``EntityNotFoundError`` for an unknown batch.
        """

    @abstractmethod
    def save(self, batch: Batch) -> None:
        """Persist a new or updated batch."""
