"""Application service: Show Transaction use case (query)."""

from __future__ import annotations

from dispos.application.dto import AllocationDTO, TransactionDTO, TransactionLineDTO
from dispos.domain.exceptions import EntityNotFoundError
from dispos.domain.repository.product_repository import ProductRepository
from dispos.domain.repository.transaction_repository import TransactionRepository


class ShowTransactionHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._product_repo = product_repo

    def handle(self, transaction_id: str) -> TransactionDTO:
        transaction = self._transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise EntityNotFoundError(f"Transaction not found: {transaction_id}")

        items = []
        for item in self._transaction_repo.list_line_items(transaction.id):
            product = self._product_repo.get_by_id(item.product_id)
            items.append(
                TransactionLineDTO(
                    product_name=product.name if product is not None else item.product_id,
                    quantity=str(item.quantity),
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                    cost_of_goods=str(item.cost_of_goods),
                    allocations=[
                        AllocationDTO(
                            batch_id=a.batch_id,
                            quantity=str(a.quantity_allocated),
                            cost_per_unit=str(a.cost_per_unit),
                        )
                        for a in item.allocations
                    ],
                )
            )

        return TransactionDTO(
            id=transaction.id,
            user_id=transaction.user_id,
            location_id=transaction.location_id,
            shift_id=transaction.shift_id,
            payment_method=transaction.payment_method.value,
            total=str(transaction.total_amount),
            created_at=transaction.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            items=items,
        )
