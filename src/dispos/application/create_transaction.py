"""Application service: Create Transaction use case (the committer).

Records a sale against the store, which offers no multi-statement
transaction.  The steps run strictly in this order:

1. validate the whole cart against stock (no writes yet)
2. insert the transaction record
3. per cart line: allocate stock (batch writes), then insert the line item
4. return everything that was stored

A failure in steps 1-2 leaves nothing behind; the caller can simply try
again.  Any failure in step 3, of whatever type, leaves the transaction
row and some batch decrements in place.  That case is logged and raised as
PartialCommitError so it can be reconciled instead of retried.
"""

from __future__ import annotations

import structlog

from dispos.application.dto import TransactionRequest, TransactionResult
from dispos.domain.exceptions import PartialCommitError, ValidationError
from dispos.domain.model.cart import CartLine
from dispos.domain.model.transaction import TransactionLineItem
from dispos.domain.repository.transaction_repository import TransactionRepository
from dispos.domain.service.inventory_ledger import InventoryLedger
from dispos.domain.service.inventory_validator import InventoryValidator

logger = structlog.get_logger()


class CreateTransactionHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        validator: InventoryValidator,
        ledger: InventoryLedger,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._validator = validator
        self._ledger = ledger

    def handle(self, request: TransactionRequest, lines: list[CartLine]) -> TransactionResult:
        """Commit a sale.  The cart itself is left for the caller to clear."""
        if not lines:
            raise ValidationError("Transaction must contain at least one item")

        # Step 1: nothing has been written if this raises
        self._validator.validate_availability(lines)

        # Step 2
        transaction = self._transaction_repo.insert_transaction(
            user_id=request.user_id,
            location_id=request.location_id,
            shift_id=request.shift_id,
            total_amount=request.total_amount,
            payment_method=request.payment_method,
        )
        log = logger.bind(transaction_id=transaction.id)

        # Step 3: line items follow cart order
        line_items: list[TransactionLineItem] = []
        for line in lines:
            try:
                allocations = self._ledger.allocate(
                    line.product_id, line.quantity.value, product=line.product
                )
                item = self._transaction_repo.insert_line_item(
                    transaction_id=transaction.id,
                    product_id=line.product_id,
                    quantity=line.quantity.value,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                    allocations=allocations,
                )
            except Exception as exc:
                # the transaction row already exists
                log.error(
                    "partial_commit",
                    failed_product_id=line.product_id,
                    committed_lines=len(line_items),
                    total_lines=len(lines),
                    error=str(exc),
                )
                raise PartialCommitError(
                    f"Sale {transaction.id} was only partly recorded "
                    f"({len(line_items)} of {len(lines)} items): {exc}",
                    transaction=transaction,
                    committed_items=list(line_items),
                ) from exc
            line_items.append(item)

        log.info(
            "transaction_created",
            total=str(transaction.total_amount),
            lines=len(line_items),
        )
        return TransactionResult(transaction=transaction, line_items=line_items)
