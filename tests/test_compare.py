"""Tests for category grouping and unit price comparison."""

import pytest

from smartcart.compare import (
    best_value_ids,
    category_key,
    comparison_groups,
    display_unit_price,
    normalized_measure,
    unit_price,
)
from smartcart.models import CartEntry


def _entry(name, price, category=None, value=None, unit=None, quantity=1):
    return CartEntry(
        name=name,
        price=price,
        category=category,
        measure_value=value,
        measure_unit=unit,
        quantity=quantity,
    )


class TestCategoryKey:
    def test_lowercase_and_underscores(self):
        assert category_key("Creme_Dental") == "creme dental"

    def test_missing_category(self):
        assert category_key(None) == "outros"
        assert category_key("") == "outros"

    def test_no_fuzzy_merging(self):
        assert category_key("refrigerante") != category_key("refrigerantes")


class TestUnitPrice:
    def test_kg_normalized_to_grams(self):
        assert normalized_measure(_entry("a", 1, value=1, unit="kg")) == 1000

    def test_liter_normalized_to_ml(self):
        assert normalized_measure(_entry("a", 1, value=2, unit="l")) == 2000

    def test_small_units_unchanged(self):
        assert normalized_measure(_entry("a", 1, value=90, unit="g")) == 90
        assert normalized_measure(_entry("a", 1, value=350, unit="ml")) == 350
        assert normalized_measure(_entry("a", 1, value=12, unit="un")) == 12

    def test_missing_value_defaults_to_one(self):
        assert unit_price(_entry("a", 7.5)) == 7.5

    def test_rice_example(self):
        a = _entry("A", 10, "rice", 500, "g")
        b = _entry("B", 22, "rice", 1, "kg")
        assert unit_price(a) == pytest.approx(0.02)
        assert unit_price(b) == pytest.approx(0.022)

    def test_display_unit_price(self):
        assert display_unit_price(_entry("a", 9.0, value=90, unit="g")) == pytest.approx(0.1)
        assert display_unit_price(_entry("a", 9.0)) is None


class TestComparisonGroups:
    def test_rice_example_best_value(self):
        a = _entry("A", 10, "rice", 500, "g")
        b = _entry("B", 22, "rice", 1, "kg")
        groups = comparison_groups([b, a])
        assert list(groups) == ["rice"]
        assert [e.name for e in groups["rice"]] == ["A", "B"]
        assert best_value_ids(groups) == {a.id}

    def test_excludes_entries_without_measure(self):
        entries = [
            _entry("sem tamanho", 1, "arroz"),
            _entry("sem unidade", 1, "arroz", value=500),
            _entry("sem valor", 1, "arroz", unit="g"),
            _entry("ok", 1, "arroz", 500, "g"),
        ]
        groups = comparison_groups(entries)
        assert [e.name for e in groups["arroz"]] == ["ok"]
        assert all(
            e.measure_value and e.measure_unit
            for group in groups.values()
            for e in group
        )

    def test_all_unmeasured_gives_no_groups(self):
        assert comparison_groups([_entry("a", 1, "x"), _entry("b", 2, "x")]) == {}

    def test_groups_by_normalized_category(self):
        entries = [
            _entry("Colgate", 5.0, "creme_dental", 90, "g"),
            _entry("Sorriso", 3.0, "Creme Dental", 50, "g"),
            _entry("Coca", 9.0, "refrigerante", 2, "l"),
            _entry("Avulso", 1.0, None, 1, "un"),
        ]
        groups = comparison_groups(entries)
        assert set(groups) == {"creme dental", "refrigerante", "outros"}
        assert len(groups["creme dental"]) == 2

    def test_ties_keep_cart_order(self):
        first = _entry("primeiro", 10, "arroz", 1, "kg")
        second = _entry("segundo", 5, "arroz", 500, "g")
        groups = comparison_groups([first, second])
        assert [e.name for e in groups["arroz"]] == ["primeiro", "segundo"]
        assert best_value_ids(groups) == {first.id}

    def test_single_entry_group_has_no_best_value(self):
        entries = [_entry("só", 3, "sabonete", 90, "g")]
        assert best_value_ids(comparison_groups(entries)) == set()

    def test_best_value_is_minimum_in_group(self):
        entries = [
            _entry("a", 12.0, "cafe", 500, "g"),
            _entry("b", 20.0, "cafe", 1, "kg"),
            _entry("c", 7.0, "cafe", 250, "g"),
            _entry("d", 30.0, "cafe", 2, "kg"),
        ]
        groups = comparison_groups(entries)
        best = best_value_ids(groups)
        for group in groups.values():
            winner = next(e for e in group if e.id in best)
            assert all(unit_price(winner) <= unit_price(e) for e in group)
        assert best == {entries[3].id}

    def test_best_value_ids_accepts_entries(self):
        a = _entry("A", 10, "rice", 500, "g")
        b = _entry("B", 22, "rice", 1, "kg")
        assert best_value_ids([a, b]) == {a.id}
