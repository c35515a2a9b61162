"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from dispos.application.dto import StockLineDTO
from dispos.domain.repository.batch_repository import BatchRepository
from dispos.domain.repository.product_repository import ProductRepository


class ShowStockHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        batch_repo: BatchRepository,
    ) -> None:
        self._product_repo = product_repo
        self._batch_repo = batch_repo

    def handle(self) -> list[StockLineDTO]:
        lines: list[StockLineDTO] = []
        for product in self._product_repo.list_all():
            active = [
                b for b in self._batch_repo.list_active(product.id)
                if b.quantity_remaining > 0
            ]
            available = self._batch_repo.sum_remaining(product.id)
            lines.append(
                StockLineDTO(
                    sku=product.sku,
                    product_name=product.name,
                    unit=product.unit.value,
                    available=str(available),
                    active_batches=len(active),
                    needs_reorder=available <= product.reorder_threshold,
                )
            )
        return lines
