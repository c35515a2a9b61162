"""Product aggregate.

Products live independently of carts and sales.  A cart line captures
the base price at add time, so later catalog changes never reach a
pending or recorded sale.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from dispos.domain.model.value_objects import Money


class ProductCategory(Enum):
    FLOWER = "Flower"
    PRE_ROLL = "Pre-Roll"
    EDIBLE = "Edible"
    CONCENTRATE = "Concentrate"
    OTHER = "Other"


class UnitOfMeasure(Enum):
    GRAM = "gram"
    PIECE = "piece"
    BOTTLE = "bottle"
    PACKAGE = "package"


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    ``requires_fractional_quantity`` is true for goods sold by weight
    (flower by the gram) and false for discrete units.
    """

    id: str
    sku: str
    name: str
    category: ProductCategory
    unit: UnitOfMeasure
    base_price: Money
    requires_fractional_quantity: bool = False
    reorder_threshold: Decimal = Decimal("0")
