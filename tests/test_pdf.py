"""Tests for PDF report generation."""

from datetime import datetime
from unittest.mock import patch

import pytest

from smartcart.cart import CartStore
from smartcart.models import ProductRecord, ShoppingListEntry
from smartcart.pdf import CartReport, _find_unicode_font, default_filename, generate_pdf


def _make_report(budget=None, missing=None) -> CartReport:
    cart = CartStore()
    a = cart.add(ProductRecord("Arroz Tio João", 10.0, "arroz", 500, "g"))
    cart.add(ProductRecord("Arroz Camil", 22.0, "arroz", 1, "kg"), quantity=2)
    cart.add(ProductRecord("Sabão em pó Omo", 18.9))
    return CartReport(
        entries=list(cart),
        totals=cart.totals(budget),
        best_value_ids={a.id},
        missing=missing or [],
        generated_at=datetime(2025, 1, 15, 10, 30),
    )


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import A4  # noqa: F401
    except ImportError:
        pytest.skip("reportlab not installed")


def test_default_filename():
    assert default_filename(datetime(2025, 1, 15)) == "smartcart_resumo_2025-01-15.pdf"


def test_empty_cart_rejected(tmp_path):
    report = CartReport(entries=[], totals=CartStore().totals())
    with pytest.raises(ValueError, match="vazio"):
        generate_pdf(report, tmp_path / "empty.pdf")


class TestPDFGeneration:
    def test_generate_pdf_creates_file(self, tmp_path):
        _require_reportlab()
        output = tmp_path / "relatorio.pdf"
        result = generate_pdf(_make_report(), output)
        assert result == output
        assert output.stat().st_size > 0
        with open(output, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_generate_pdf_with_budget_and_missing(self, tmp_path):
        _require_reportlab()
        report = _make_report(
            budget=50.0,
            missing=[ShoppingListEntry(name="Feijão"), ShoppingListEntry(name="Café")],
        )
        output = generate_pdf(report, tmp_path / "com_lista.pdf")
        assert output.exists()

    def test_generate_pdf_under_budget(self, tmp_path):
        _require_reportlab()
        output = generate_pdf(_make_report(budget=500.0), tmp_path / "ok.pdf")
        assert output.exists()

    def test_generate_pdf_creates_parent_dirs(self, tmp_path):
        _require_reportlab()
        output = tmp_path / "sub" / "dir" / "r.pdf"
        generate_pdf(_make_report(), output)
        assert output.exists()

    def test_generate_pdf_without_unicode_font(self, tmp_path):
        """Falls back to Helvetica when no TTF font is installed."""
        _require_reportlab()
        with patch("smartcart.pdf._FONT_SEARCH_PATHS", ["/nonexistent/font.ttf"]):
            output = generate_pdf(_make_report(), tmp_path / "helvetica.pdf")
        assert output.exists()


def test_find_unicode_font_not_found():
    with patch("smartcart.pdf._FONT_SEARCH_PATHS", ["/nonexistent/font.ttf"]):
        assert _find_unicode_font() is None
