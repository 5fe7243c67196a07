"""Data models for scanned products, cart entries and shopping-list items."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

# Package measure units understood by the price comparison
MEASURE_UNITS = ("g", "kg", "ml", "l", "un")

# Large variants are normalized to the small base unit (kg → g, l → ml)
LARGE_UNIT_FACTORS: dict[str, float] = {
    "kg": 1000.0,
    "l": 1000.0,
}


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ProductRecord:
    """A product as extracted from a photo or typed in by hand."""

    name: str
    price: float
    category: str | None = None  # free text, e.g. "creme_dental", "arroz"
    measure_value: float | None = None  # e.g. 90
    measure_unit: str | None = None  # g, kg, ml, l, un


@dataclass
class CartEntry(ProductRecord):
    """A quantity-bearing product line in the cart."""

    id: str = field(default_factory=new_id)
    quantity: int = 1

    @classmethod
    def from_record(cls, record: ProductRecord, quantity: int = 1) -> CartEntry:
        return cls(
            name=record.name,
            price=record.price,
            category=record.category,
            measure_value=record.measure_value,
            measure_unit=record.measure_unit,
            quantity=quantity,
        )

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    @property
    def measure_display(self) -> str | None:
        """Package size as shown on badges, e.g. "90g"."""
        if self.measure_value and self.measure_unit:
            return f"{self.measure_value:g}{self.measure_unit}"
        return None


@dataclass
class ShoppingListEntry:
    """An item on the shopping (wish) list."""

    name: str
    id: str = field(default_factory=new_id)
    checked: bool = False
