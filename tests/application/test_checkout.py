"""Integration tests for the Checkout use case."""

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from dispos.application.checkout import CheckoutHandler, describe_failure
from dispos.application.create_transaction import CreateTransactionHandler
from dispos.application.dto import CashierSession
from dispos.application.retry import RetryPolicy
from dispos.domain.exceptions import (
    AuthenticationRequiredError,
    EmptyCartError,
    InsufficientInventoryError,
    PartialCommitError,
    PersistenceError,
    TransientError,
)
from dispos.domain.model.cart import Cart
from dispos.domain.model.transaction import PaymentMethod
from dispos.domain.service.inventory_ledger import InventoryLedger
from dispos.domain.service.inventory_validator import InventoryValidator
from tests.fakes import (
    FakeBatchRepository,
    FakeCartRepository,
    FakeTransactionRepository,
    make_batch,
    make_product,
)

SESSION = CashierSession(user_id="u1", location_id="loc1", shift_id="s1")


def _setup(quantity=2, stock="5"):
    batch_repo = FakeBatchRepository([make_batch("b1", quantity=stock)])
    transaction_repo = FakeTransactionRepository()
    cart = Cart()
    cart.add_item(make_product(id="1", name="Gummies", price="150"), quantity)
    cart_repo = FakeCartRepository(cart)
    delays = []
    handler = CheckoutHandler(
        cart_repo=cart_repo,
        committer=CreateTransactionHandler(
            transaction_repo=transaction_repo,
            validator=InventoryValidator(batch_repo),
            ledger=InventoryLedger(batch_repo),
        ),
        retry_policy=RetryPolicy(),
        sleep=delays.append,
    )
    return handler, cart_repo, transaction_repo, batch_repo, delays


class TestCheckoutHappyPath:

    def test_commits_and_clears_cart(self):
        handler, cart_repo, transaction_repo, batch_repo, _ = _setup()

        result = handler.handle(SESSION, payment_method=PaymentMethod.QR_CODE)

        assert transaction_repo.count() == 1
        assert result.transaction.payment_method == PaymentMethod.QR_CODE
        assert result.transaction.shift_id == "s1"
        assert cart_repo.load().is_empty
        assert batch_repo.remaining("b1") == Decimal("3")

    def test_transient_failure_retried_then_succeeds(self):
        handler, cart_repo, transaction_repo, _, delays = _setup()
        transaction_repo.insert_errors.extend([
            TransientError("network unreachable"),
            TransientError("network unreachable"),
        ])
        notices = []

        handler.handle(SESSION, on_retry=lambda attempt, exc: notices.append(attempt))

        assert transaction_repo.insert_calls == 3
        assert delays == [1.0, 2.0]
        assert notices == [1, 2]
        assert cart_repo.load().is_empty

    def test_inactive_caller_gets_no_notices(self):
        handler, _, transaction_repo, _, delays = _setup()
        transaction_repo.insert_errors.append(TransientError("timeout"))
        notices = []

        handler.handle(
            SESSION,
            on_retry=lambda attempt, exc: notices.append(attempt),
            is_active=lambda: False,
        )

        assert notices == []
        assert delays == [1.0]


class TestCheckoutFailures:

    def test_no_session(self):
        handler, cart_repo, _, _, _ = _setup()
        with pytest.raises(AuthenticationRequiredError, match="sign in"):
            handler.handle(None)
        assert not cart_repo.load().is_empty

    def test_session_without_location(self):
        handler, _, _, _, _ = _setup()
        with pytest.raises(AuthenticationRequiredError, match="location"):
            handler.handle(CashierSession(user_id="u1", location_id=None, shift_id="s1"))

    def test_empty_cart(self):
        handler, cart_repo, transaction_repo, _, _ = _setup()
        cart_repo.load().clear()
        with pytest.raises(EmptyCartError):
            handler.handle(SESSION)
        assert transaction_repo.insert_calls == 0

    def test_insufficient_stock_keeps_cart_and_is_not_retried(self):
        handler, cart_repo, transaction_repo, _, delays = _setup(quantity=9)

        with pytest.raises(InsufficientInventoryError):
            handler.handle(SESSION)

        assert delays == []
        assert transaction_repo.insert_calls == 0
        assert cart_repo.load().lines[0].quantity.value == Decimal("9")

    def test_exhausted_retries_keep_cart(self):
        handler, cart_repo, transaction_repo, _, _ = _setup()
        transaction_repo.insert_errors.extend(TransientError("timeout") for _ in range(3))

        with pytest.raises(TransientError):
            handler.handle(SESSION)

        assert transaction_repo.insert_calls == 3
        assert not cart_repo.load().is_empty

    def test_partial_commit_not_retried(self):
        handler, cart_repo, transaction_repo, _, delays = _setup()
        transaction_repo.line_item_errors["1"] = TransientError("connection reset")

        with pytest.raises(PartialCommitError):
            handler.handle(SESSION)

        assert transaction_repo.insert_calls == 1
        assert delays == []
        assert not cart_repo.load().is_empty


class TestDescribeFailure:

    def test_insufficient_inventory(self):
        error = InsufficientInventoryError("Gummies", Decimal("3"), Decimal("9"), "piece")
        assert describe_failure(error) == (
            "Insufficient Inventory",
            "Insufficient inventory for Gummies. Only 3 piece available.",
        )

    def test_authentication(self):
        title, _ = describe_failure(AuthenticationRequiredError("Please sign in"))
        assert title == "Authentication Required"

    def test_empty_cart(self):
        title, _ = describe_failure(EmptyCartError("Add products"))
        assert title == "Cart is Empty"

    def test_partial_commit(self):
        title, message = describe_failure(PartialCommitError("Sale txn-1 partly recorded.", None, []))
        assert title == "Partial Sale Recorded"
        assert "reconciliation" in message

    def test_anything_else(self):
        assert describe_failure(PersistenceError("disk full")) == ("Transaction Failed", "disk full")
        assert describe_failure(RuntimeError())[1] == "Please try again or contact support."


class TestCheckoutAfterCommit:

    def test_unclassified_line_item_error_is_not_retried(self):
        handler, cart_repo, transaction_repo, batch_repo, delays = _setup(quantity=3, stock="10")
        transaction_repo.line_item_errors["1"] = RuntimeError("network request timeout")

        with pytest.raises(PartialCommitError):
            handler.handle(SESSION)

        assert transaction_repo.count() == 1
        assert delays == []
        assert batch_repo.remaining("b1") == Decimal("7")

    def test_cart_save_failure_still_returns_sale(self):
        handler, cart_repo, transaction_repo, _, _ = _setup()
        cart_repo.save_error = PersistenceError("disk full")

        with capture_logs() as logs:
            result = handler.handle(SESSION)

        assert transaction_repo.get_by_id(result.transaction.id) is not None
        assert cart_repo.saves == 0
        entry = next(e for e in logs if e["event"] == "checkout_completed_cart_not_cleared")
        assert entry["transaction_id"] == result.transaction.id
        assert entry["log_level"] == "error"
