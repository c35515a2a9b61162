"""Integration tests for the cart use cases."""

from decimal import Decimal

import pytest

from dispos.application.add_to_cart import AddToCartHandler
from dispos.application.remove_from_cart import RemoveFromCartHandler
from dispos.application.update_cart_quantity import UpdateCartQuantityHandler
from dispos.domain.exceptions import EntityNotFoundError, TransientError, ValidationError
from dispos.domain.model.product import UnitOfMeasure
from dispos.domain.service.inventory_ledger import InventoryLedger
from dispos.domain.service.inventory_validator import InventoryValidator
from tests.fakes import (
    FakeBatchRepository,
    FakeCartRepository,
    FakeProductRepository,
    make_batch,
    make_product,
)


def _setup():
    products = [
        make_product(id="1", name="OG Kush", price="400", fractional=True, unit=UnitOfMeasure.GRAM),
        make_product(id="2", name="Gummies", price="150"),
    ]
    batch_repo = FakeBatchRepository([make_batch("b1", product_id="1", quantity="7")])
    cart_repo = FakeCartRepository()
    product_repo = FakeProductRepository(products)
    return cart_repo, product_repo, batch_repo


class TestAddToCart:

    def test_adds_by_sku(self):
        cart_repo, product_repo, batch_repo = _setup()
        handler = AddToCartHandler(cart_repo, product_repo, InventoryLedger(batch_repo))

        line = handler.handle("sku-1", "1.25")

        assert line.quantity.value == Decimal("1.3")
        assert cart_repo.saves == 1

    def test_out_of_stock_refused(self):
        cart_repo, product_repo, batch_repo = _setup()
        handler = AddToCartHandler(cart_repo, product_repo, InventoryLedger(batch_repo))

        with pytest.raises(ValidationError, match="Gummies is out of stock"):
            handler.handle("SKU-2")
        assert cart_repo.load().is_empty

    def test_unknown_sku(self):
        cart_repo, product_repo, batch_repo = _setup()
        handler = AddToCartHandler(cart_repo, product_repo, InventoryLedger(batch_repo))
        with pytest.raises(EntityNotFoundError):
            handler.handle("NOPE")


class TestUpdateCartQuantity:

    def _cart_with_flower(self):
        cart_repo, product_repo, batch_repo = _setup()
        AddToCartHandler(cart_repo, product_repo, InventoryLedger(batch_repo)).handle("SKU-1", 2)
        return cart_repo, UpdateCartQuantityHandler(cart_repo, InventoryValidator(batch_repo)), batch_repo

    def test_within_stock_clears_error(self):
        cart_repo, handler, _ = self._cart_with_flower()

        check = handler.handle("1", 5)

        assert check.valid
        assert cart_repo.load().validation_errors["1"] is None
        assert cart_repo.load().get_line("1").quantity.value == Decimal("5.0")

    def test_over_stock_keeps_quantity_and_records_error(self):
        cart_repo, handler, _ = self._cart_with_flower()

        check = handler.handle("1", 9)

        assert not check.valid
        cart = cart_repo.load()
        assert cart.get_line("1").quantity.value == Decimal("9.0")
        assert cart.validation_errors["1"] == "Only 7 gram available"

    def test_zero_rejected_by_cart(self):
        cart_repo, handler, _ = self._cart_with_flower()

        assert handler.handle("1", 0) is None
        assert "at least 1" in cart_repo.load().validation_errors["1"]

    def test_stock_read_failure(self):
        cart_repo, handler, batch_repo = self._cart_with_flower()
        batch_repo.sum_error = TransientError("timeout")

        handler.handle("1", 3)

        assert cart_repo.load().validation_errors["1"] == "Unable to check inventory availability"

    def test_product_not_in_cart(self):
        _, handler, _ = self._cart_with_flower()
        with pytest.raises(EntityNotFoundError, match="not in the cart"):
            handler.handle("2", 1)


class TestRemoveFromCart:

    def test_removes_line(self):
        cart_repo, product_repo, batch_repo = _setup()
        AddToCartHandler(cart_repo, product_repo, InventoryLedger(batch_repo)).handle("SKU-1", 2)

        RemoveFromCartHandler(cart_repo).handle("1")

        assert cart_repo.load().is_empty
