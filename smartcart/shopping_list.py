"""Shopping list and its fuzzy reconciliation against the cart."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import CartEntry, ShoppingListEntry


class ShoppingList:
    """Ordered wish list, independent from the cart."""

    def __init__(self) -> None:
        self._entries: list[ShoppingListEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ShoppingListEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> tuple[ShoppingListEntry, ...]:
        return tuple(self._entries)

    def add(self, name: str) -> ShoppingListEntry:
        name = name.strip()
        if not name:
            raise ValueError("Nome do item não pode ser vazio.")
        entry = ShoppingListEntry(name=name)
        self._entries.append(entry)
        return entry

    def extend(self, names: Iterable[str]) -> list[ShoppingListEntry]:
        """Append several names, skipping blank ones."""
        added = [ShoppingListEntry(name=n.strip()) for n in names if n.strip()]
        self._entries.extend(added)
        return added

    def toggle(self, entry_id: str) -> ShoppingListEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                entry.checked = not entry.checked
                return entry
        return None

    def remove(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) < before


# Substring matching, case-insensitive. Each check scans a different
# collection, so a pair may match in one direction only.


def is_fulfilled(list_item_name: str, cart_entries: Iterable[CartEntry]) -> bool:
    """True if some cart entry name contains the list item name."""
    needle = list_item_name.lower().strip()
    return any(needle in entry.name.lower() for entry in cart_entries)


def is_wished(
    cart_entry_name: str, list_entries: Iterable[ShoppingListEntry]
) -> bool:
    """True if the cart entry name contains some list item name."""
    haystack = cart_entry_name.lower()
    return any(item.name.lower().strip() in haystack for item in list_entries)


def missing_items(
    list_entries: Iterable[ShoppingListEntry], cart_entries: Iterable[CartEntry]
) -> list[ShoppingListEntry]:
    """List entries that no cart entry fulfills, in list order."""
    cart = list(cart_entries)
    return [item for item in list_entries if not is_fulfilled(item.name, cart)]
