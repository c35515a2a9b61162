"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Settings are read on
each call so the environment in effect when a command runs is the one
that counts.
"""

from __future__ import annotations

from dispos.application.checkout import CheckoutHandler
from dispos.application.create_transaction import CreateTransactionHandler
from dispos.application.retry import RetryPolicy
from dispos.domain.service.inventory_ledger import InventoryLedger
from dispos.domain.service.inventory_validator import InventoryValidator
from dispos.infrastructure.config import Settings
from dispos.infrastructure.persistence.json_batch_repository import (
    JsonBatchRepository,
)
from dispos.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from dispos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from dispos.infrastructure.persistence.json_transaction_repository import (
    JsonTransactionRepository,
)


def settings() -> Settings:
    return Settings()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json")


def batch_repository() -> JsonBatchRepository:
    return JsonBatchRepository(settings().data_dir / "batches.json")


def transaction_repository() -> JsonTransactionRepository:
    return JsonTransactionRepository(settings().data_dir / "transactions.json")


def cart_repository() -> JsonCartRepository:
    config = settings()
    return JsonCartRepository(config.data_dir / "cart.json", currency=config.currency)


def inventory_ledger() -> InventoryLedger:
    return InventoryLedger(batch_repository())


def inventory_validator() -> InventoryValidator:
    return InventoryValidator(batch_repository())


def checkout_handler() -> CheckoutHandler:
    config = settings()
    batches = batch_repository()
    committer = CreateTransactionHandler(
        transaction_repo=transaction_repository(),
        validator=InventoryValidator(batches),
        ledger=InventoryLedger(batches),
    )
    return CheckoutHandler(
        cart_repo=cart_repository(),
        committer=committer,
        retry_policy=RetryPolicy(
            max_attempts=config.checkout_attempts,
            base_delay=config.retry_base_delay,
        ),
    )
