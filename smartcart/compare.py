"""Per-unit price comparison of cart entries grouped by category."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import LARGE_UNIT_FACTORS, CartEntry

DEFAULT_CATEGORY = "outros"


def category_key(category: str | None) -> str:
    """Display key for a free-text category ("creme_dental" → "creme dental")."""
    if not category:
        return DEFAULT_CATEGORY
    return category.lower().replace("_", " ")


def is_comparable(entry: CartEntry) -> bool:
    return bool(entry.measure_value) and bool(entry.measure_unit)


def normalized_measure(entry: CartEntry) -> float:
    """Package size in the base unit (g or ml); 1 when the size is unknown."""
    value = entry.measure_value or 1
    return value * LARGE_UNIT_FACTORS.get(entry.measure_unit or "", 1.0)


def unit_price(entry: CartEntry) -> float:
    return entry.price / normalized_measure(entry)


def display_unit_price(entry: CartEntry) -> float | None:
    """Price per unit as printed on the package (R$/kg for a kg pack)."""
    if not is_comparable(entry) or entry.measure_value <= 0:
        return None
    return entry.price / entry.measure_value


def comparison_groups(entries: Iterable[CartEntry]) -> dict[str, list[CartEntry]]:
    """Group measurable entries by category, cheapest unit price first.

    Entries without both a measure value and a measure unit are left
    out. Ties keep cart order since the sort is stable.
    """
    grouped: dict[str, list[CartEntry]] = {}
    for entry in entries:
        if not is_comparable(entry):
            continue
        grouped.setdefault(category_key(entry.category), []).append(entry)

    for group in grouped.values():
        group.sort(key=unit_price)
    return grouped


def best_value_ids(
    groups: Mapping[str, list[CartEntry]] | Iterable[CartEntry],
) -> set[str]:
    """IDs of the cheapest entry in every group with at least two entries."""
    if not isinstance(groups, Mapping):
        groups = comparison_groups(groups)
    return {group[0].id for group in groups.values() if len(group) >= 2}
