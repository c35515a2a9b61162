"""Unit tests for the InventoryValidator domain service."""

from decimal import Decimal

import pytest

from dispos.domain.exceptions import InsufficientInventoryError, TransientError
from dispos.domain.model.cart import Cart
from dispos.domain.model.product import UnitOfMeasure
from dispos.domain.service.inventory_validator import InventoryValidator
from tests.fakes import FakeBatchRepository, make_batch, make_product


def _setup():
    flower = make_product(id="1", name="OG Kush", fractional=True, unit=UnitOfMeasure.GRAM)
    gummies = make_product(id="2", name="Gummies", unit=UnitOfMeasure.PACKAGE)
    repo = FakeBatchRepository([
        make_batch("f1", product_id="1", quantity="10"),
        make_batch("f2", product_id="1", quantity="4.5", days=1),
        make_batch("g1", product_id="2", quantity="3"),
    ])
    return flower, gummies, repo, InventoryValidator(repo)


class TestValidateAvailability:

    def test_sufficient_cart_passes(self):
        flower, gummies, _, validator = _setup()
        cart = Cart()
        cart.add_item(flower, "14.5")
        cart.add_item(gummies, 3)

        validator.validate_availability(cart.lines)

    def test_short_line_reports_name_quantities_and_unit(self):
        flower, gummies, _, validator = _setup()
        cart = Cart()
        cart.add_item(flower, 2)
        cart.add_item(gummies, 5)

        with pytest.raises(InsufficientInventoryError) as exc_info:
            validator.validate_availability(cart.lines)

        assert str(exc_info.value) == (
            "Insufficient inventory for Gummies. Only 3 package available."
        )
        assert exc_info.value.requested_quantity == Decimal("5")

    def test_depleted_batches_do_not_count(self):
        flower, _, repo, validator = _setup()
        repo.get_by_id("f1").set_remaining(Decimal("0"))
        cart = Cart()
        cart.add_item(flower, 5)

        with pytest.raises(InsufficientInventoryError, match="Only 4.5 gram"):
            validator.validate_availability(cart.lines)

    def test_performs_no_writes(self):
        flower, gummies, repo, validator = _setup()
        cart = Cart()
        cart.add_item(flower, 1)
        cart.add_item(gummies, 9)

        with pytest.raises(InsufficientInventoryError):
            validator.validate_availability(cart.lines)

        assert repo.journal == []


class TestValidateSingleQuantity:

    def test_within_stock(self):
        flower, _, _, validator = _setup()
        check = validator.validate_single_quantity("1", Decimal("14.5"), flower)
        assert check.valid
        assert check.available_quantity == Decimal("14.5")
        assert check.error is None

    def test_over_stock(self):
        _, gummies, _, validator = _setup()
        check = validator.validate_single_quantity("2", Decimal("4"), gummies)
        assert not check.valid
        assert check.error == "Only 3 package available"

    def test_store_failure_is_reported_not_raised(self):
        flower, _, repo, validator = _setup()
        repo.sum_error = TransientError("connection reset")

        check = validator.validate_single_quantity("1", Decimal("1"), flower)

        assert not check.valid
        assert check.available_quantity == Decimal("0")
        assert check.error == "Unable to check inventory availability"

    def test_unexpected_failure_is_reported_not_raised(self):
        flower, _, repo, validator = _setup()
        repo.sum_error = RuntimeError("boom")

        check = validator.validate_single_quantity("1", Decimal("1"), flower)

        assert not check.valid
        assert check.error == "Unexpected error checking inventory"
