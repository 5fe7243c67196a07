"""In-memory cart store and derived totals."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .models import CartEntry, ProductRecord

_UPDATABLE_FIELDS = frozenset(
    {"name", "price", "category", "measure_value", "measure_unit", "quantity"}
)


@dataclass
class CartTotals:
    total_cost: float
    item_count: int
    budget: float | None = None
    is_over_budget: bool = False
    usage_fraction: float = 0.0  # capped at 1.0 for display
    remaining_budget: float = 0.0  # negative when over budget

    @property
    def usage_percent(self) -> float:
        return self.usage_fraction * 100


class CartStore:
    """Ordered collection of cart entries, newest first.

    Every entry in the store has ``quantity >= 1``; decrementing a
    quantity-1 entry removes it.
    """

    def __init__(self) -> None:
        self._entries: list[CartEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CartEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> tuple[CartEntry, ...]:
        return tuple(self._entries)

    def add(self, record: ProductRecord, quantity: int = 1) -> CartEntry:
        """Add a product as a new entry at the front of the cart."""
        _check_quantity(quantity)
        entry = CartEntry.from_record(record, quantity=quantity)
        self._entries.insert(0, entry)
        return entry

    def add_many(self, records: Iterable[ProductRecord]) -> list[CartEntry]:
        """Add a batch of products, keeping batch order at the front."""
        new_entries = [CartEntry.from_record(r) for r in records]
        self._entries[:0] = new_entries
        return new_entries

    def get(self, entry_id: str) -> CartEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def update(self, entry_id: str, **fields) -> CartEntry | None:
        """Merge the given fields into an entry.

        Returns:
            The updated entry, or None if no entry has that id.

        Raises:
            TypeError: If a field name is not updatable.
            ValueError: If quantity would drop below 1.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown cart entry field(s): {sorted(unknown)}")
        if "quantity" in fields:
            _check_quantity(fields["quantity"])

        entry = self.get(entry_id)
        if entry is None:
            return None
        for key, value in fields.items():
            setattr(entry, key, value)
        return entry

    def increment(self, entry_id: str) -> CartEntry | None:
        entry = self.get(entry_id)
        if entry is None:
            return None
        entry.quantity += 1
        return entry

    def decrement(self, entry_id: str) -> CartEntry | None:
        """Reduce quantity by one, removing the entry when it reaches zero.

        Returns:
            The entry if it is still in the cart, otherwise None.
        """
        entry = self.get(entry_id)
        if entry is None:
            return None
        if entry.quantity > 1:
            entry.quantity -= 1
            return entry
        self.remove(entry_id)
        return None

    def remove(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) < before

    def clear(self) -> None:
        self._entries.clear()

    def totals(self, budget: float | None = None) -> CartTotals:
        """Compute total cost, item count and budget usage."""
        total_cost = sum(e.price * e.quantity for e in self._entries)
        item_count = sum(e.quantity for e in self._entries)

        if budget is None:
            return CartTotals(total_cost=total_cost, item_count=item_count)

        usage = min(total_cost / budget, 1.0) if budget > 0 else 0.0
        return CartTotals(
            total_cost=total_cost,
            item_count=item_count,
            budget=budget,
            is_over_budget=total_cost > budget,
            usage_fraction=usage,
            remaining_budget=budget - total_cost,
        )


def _check_quantity(quantity: int) -> None:
    if quantity < 1:
        raise ValueError(f"Quantity must be at least 1, got {quantity}")
