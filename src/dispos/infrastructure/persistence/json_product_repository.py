"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from dispos.domain.model.product import Product, ProductCategory, UnitOfMeasure
from dispos.domain.model.value_objects import DEFAULT_CURRENCY, Money
from dispos.domain.repository.product_repository import ProductRepository
from dispos.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        for product in self._load().values():
            if product.sku.lower() == sku.strip().lower():
                return product
        return None

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._file.persist([self.to_raw(p) for p in products.values()])

    # --- Serialization --------------------------------------------------------
    # Public so the cart repository can embed product snapshots.

    @staticmethod
    def to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "category": product.category.value,
            "unit": product.unit.value,
            "base_price": str(product.base_price.amount),
            "currency": product.base_price.currency,
            "requires_fractional_quantity": product.requires_fractional_quantity,
            "reorder_threshold": str(product.reorder_threshold),
        }

    @staticmethod
    def to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            sku=raw["sku"],
            name=raw["name"],
            category=ProductCategory(raw["category"]),
            unit=UnitOfMeasure(raw["unit"]),
            base_price=Money(
                Decimal(str(raw["base_price"])), raw.get("currency", DEFAULT_CURRENCY)
            ),
            requires_fractional_quantity=raw.get("requires_fractional_quantity", False),
            reorder_threshold=Decimal(str(raw.get("reorder_threshold", "0"))),
        )

    def _load(self) -> dict[str, Product]:
        return {raw["id"]: self.to_domain(raw) for raw in self._file.load()}
