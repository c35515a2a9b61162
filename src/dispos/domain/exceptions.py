"""Domain-level exceptions.

Every failure the checkout core can report is a subclass of DomainException,
so callers (the checkout flow, the CLI) can catch them uniformly.  The
subclasses carry the distinctions the retry policy and the user-facing
messages depend on:

- ValidationError: a business rule failed.  Deterministic, never retried.
- EntityNotFoundError: something required is missing.  Terminal.
- PersistenceError: the store rejected a write for a non-network reason.
- TransientError: network/transport trouble.  Safe to retry.
- PartialCommitError: the sale row exists but a later step failed, so
  inventory may already reflect part of the sale.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dispos.domain.model.transaction import Transaction, TransactionLineItem


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InsufficientInventoryError(ValidationError):
    """Requested quantity exceeds what the batches hold."""

    def __init__(
        self,
        product_name: str,
        available_quantity: Decimal,
        requested_quantity: Decimal,
        unit: str,
    ) -> None:
        super().__init__(
            f"Insufficient inventory for {product_name}. "
            f"Only {available_quantity} {unit} available."
        )
        self.product_name = product_name
        self.available_quantity = available_quantity
        self.requested_quantity = requested_quantity
        self.unit = unit


class EmptyCartError(ValidationError):
    """Checkout was attempted with nothing in the cart."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AuthenticationRequiredError(DomainException):
    """No signed-in cashier (or one without a location) tried to sell."""


class PersistenceError(DomainException):
    """The store failed or rejected an operation for a non-network reason."""


class StaleBatchError(PersistenceError):
    """A conditional batch decrement found a different remaining quantity."""


class TransientError(DomainException):
    """A network or transport failure; the same call may succeed later."""


class PartialCommitError(DomainException):
    """A failure after the transaction record was written.

    Batches already drawn for the committed lines stay decremented and the
    transaction row exists, so this needs reconciliation rather than a
    blind retry.  The original error is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        transaction: Transaction,
        committed_items: list[TransactionLineItem],
    ) -> None:
        super().__init__(message)
        self.transaction = transaction
        self.committed_items = committed_items
