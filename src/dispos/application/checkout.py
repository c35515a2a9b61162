"""Application service: Checkout use case ("Complete Sale").

The register-side flow around the committer:

- refuse without a signed-in cashier that belongs to a location
- refuse an empty cart
- commit, retrying transient failures with backoff
- clear the cart only after a successful commit; on any failure the
  cart is kept so the cashier can adjust it and try again
- once the sale is recorded, a failure to save the cleared cart is
  logged but does not fail the checkout
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

from dispos.application.create_transaction import CreateTransactionHandler
from dispos.application.dto import CashierSession, TransactionRequest, TransactionResult
from dispos.application.retry import RetryPolicy, retry_with_backoff
from dispos.domain.exceptions import (
    AuthenticationRequiredError,
    DomainException,
    EmptyCartError,
    InsufficientInventoryError,
    PartialCommitError,
)
from dispos.domain.model.transaction import PaymentMethod
from dispos.domain.repository.cart_repository import CartRepository

logger = structlog.get_logger()


class CheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        committer: CreateTransactionHandler,
        retry_policy: RetryPolicy = RetryPolicy(),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cart_repo = cart_repo
        self._committer = committer
        self._retry_policy = retry_policy
        self._sleep = sleep

    def handle(
        self,
        session: CashierSession | None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        on_retry: Callable[[int, Exception], None] | None = None,
        is_active: Callable[[], bool] | None = None,
    ) -> TransactionResult:
        """Complete the sale in the current cart.

        Args:
            session: The signed-in cashier, or None.
            payment_method: How the customer paid.
            on_retry: Progress hook, called before each retry wait.
            is_active: Returns False once the caller's view is gone;
                progress notifications stop from then on.  Writes
                already sent to the store are not affected.
        """
        if session is None:
            raise AuthenticationRequiredError("Please sign in to complete a transaction.")
        if not session.location_id:
            raise AuthenticationRequiredError(
                "User must have a location to complete transactions."
            )

        cart = self._cart_repo.load()
        if cart.is_empty:
            raise EmptyCartError("Add products to cart before completing a sale.")

        request = TransactionRequest(
            user_id=session.user_id,
            location_id=session.location_id,
            shift_id=session.shift_id,
            total_amount=cart.subtotal,
            payment_method=payment_method,
        )
        lines = list(cart.lines)

        def notify(attempt: int, error: Exception) -> None:
            if on_retry is None:
                return
            if is_active is not None and not is_active():
                return
            on_retry(attempt, error)

        try:
            result = retry_with_backoff(
                lambda: self._committer.handle(request, lines),
                policy=self._retry_policy,
                on_retry=notify,
                sleep=self._sleep,
            )
        except Exception as exc:
            # cart stays as it was
            logger.warning("checkout_failed", error_type=type(exc).__name__, error=str(exc))
            raise

        cart.clear()
        try:
            self._cart_repo.save(cart)
        except DomainException as exc:
            # the sale is already recorded
            logger.error(
                "checkout_completed_cart_not_cleared",
                transaction_id=result.transaction.id,
                error=str(exc),
            )
            return result
        logger.info("checkout_completed", transaction_id=result.transaction.id)
        return result


def describe_failure(exc: Exception) -> tuple[str, str]:
    """Map a checkout failure to a (title, message) pair for the cashier."""
    if isinstance(exc, InsufficientInventoryError):
        return "Insufficient Inventory", str(exc)
    if isinstance(exc, AuthenticationRequiredError):
        return "Authentication Required", str(exc)
    if isinstance(exc, EmptyCartError):
        return "Cart is Empty", str(exc)
    if isinstance(exc, PartialCommitError):
        return (
            "Partial Sale Recorded",
            f"{exc} Inventory may need reconciliation by a manager.",
        )
    return "Transaction Failed", str(exc) or "Please try again or contact support."
