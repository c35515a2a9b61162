"""Application service: Add Product use case."""

from __future__ import annotations

from dispos.domain.exceptions import ValidationError
from dispos.domain.model.product import Product, ProductCategory, UnitOfMeasure
from dispos.domain.model.value_objects import Money, to_decimal
from dispos.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository, currency: str = "THB") -> None:
        self._product_repo = product_repo
        self._currency = currency

    def handle(
        self,
        sku: str,
        name: str,
        category: str,
        unit: str,
        price: str,
        fractional: bool = False,
        reorder_threshold: str | int = 0,
    ) -> Product:
        """Add a new product to the catalog."""
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        if self._product_repo.get_by_sku(sku) is not None:
            raise ValidationError(f"Product with SKU '{sku}' already exists")

        base_price = Money.of(price, self._currency)
        if base_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        threshold = to_decimal(reorder_threshold)
        if threshold < 0:
            raise ValidationError("Reorder threshold cannot be negative")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(
            id=next_id,
            sku=sku.strip().upper(),
            name=name.strip(),
            category=_parse_enum(ProductCategory, category, "category"),
            unit=_parse_enum(UnitOfMeasure, unit, "unit"),
            base_price=base_price,
            requires_fractional_quantity=fractional,
            reorder_threshold=threshold,
        )
        self._product_repo.save(product)
        return product


def _parse_enum(enum_cls, raw: str, label: str):
    for member in enum_cls:
        if member.value.lower() == raw.strip().lower():
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"Unknown {label} '{raw}' (expected one of: {allowed})")
