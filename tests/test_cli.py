"""Tests for the smartcart command line."""

import json
from unittest.mock import patch

import pytest

from smartcart.cli import main, parse_item_arg, render_session
from smartcart.manual import InvalidInputError
from smartcart.models import ProductRecord
from smartcart.session import SmartCartSession
from smartcart.vision import AnalysisError, VisionBackend


class FakeBackend(VisionBackend):
    def __init__(self, products=None, names=None):
        self.products = products or {}
        self.names = names or []

    async def analyze_product(self, path):
        result = self.products[str(path)]
        if isinstance(result, Exception):
            raise result
        return result

    async def extract_list(self, path):
        return list(self.names)


@pytest.fixture(autouse=True)
def _clear_api_keys(monkeypatch):
    for var in ("GEMINI_API_KEY", "API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)


class TestParseItemArg:
    def test_with_size(self):
        assert parse_item_arg("Arroz Camil;22,90;1kg") == ("Arroz Camil", "22,90", "1kg")

    def test_without_size(self):
        assert parse_item_arg("Leite; 4,50") == ("Leite", "4,50", "")

    def test_missing_price(self):
        with pytest.raises(InvalidInputError):
            parse_item_arg("Leite")


class TestScanCommand:
    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_manual_items_json(self, capsys):
        main([
            "scan",
            "--item", "Arroz Tio João;10;500g",
            "--item", "Arroz Camil;22;1kg",
            "--budget", "30",
            "--want", "arroz",
            "--want", "Feijão",
            "--json",
        ])
        data = json.loads(capsys.readouterr().out)

        assert [i["name"] for i in data["items"]] == ["Arroz Camil", "Arroz Tio João"]
        best = [i["name"] for i in data["items"] if i["best_value"]]
        assert best == ["Arroz Tio João"]
        assert all(i["in_wishlist"] for i in data["items"])
        assert data["totals"]["total_cost"] == 32.0
        assert data["totals"]["is_over_budget"] is True
        assert list(data["comparison"]) == ["arroz"]
        status = {i["name"]: i["in_cart"] for i in data["shopping_list"]}
        assert status == {"arroz": True, "Feijão": False}

    def test_invalid_manual_price_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["scan", "--item", "Leite;quatro"])
        assert exc.value.code == 2
        assert "Entrada inválida" in capsys.readouterr().err

    def test_images_with_partial_failure(self, capsys):
        backend = FakeBackend(products={
            "a.jpg": ProductRecord("Coca-Cola 2L", 9.99, "refrigerante", 2, "l"),
            "b.jpg": AnalysisError(),
        })
        with patch("smartcart.cli.create_backend", return_value=backend):
            main(["scan", "--image", "a.jpg", "b.jpg"])

        captured = capsys.readouterr()
        assert "Coca-Cola 2L" in captured.out
        assert "R$ 9,99" in captured.out
        assert "Alguns arquivos não puderam ser processados." in captured.err
        assert "b.jpg" in captured.err

    def test_missing_api_key_exits(self, capsys, tmp_path):
        image = tmp_path / "p.jpg"
        image.write_bytes(b"fake")
        with pytest.raises(SystemExit) as exc:
            main(["scan", "--image", str(image)])
        assert exc.value.code == 2
        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_camera_failure_exits(self, capsys):
        with patch("smartcart.cli.ProductCamera") as camera_cls:
            camera_cls.return_value.capture_all.side_effect = RuntimeError(
                "Não foi possível abrir a câmera 0."
            )
            with pytest.raises(SystemExit) as exc:
                main(["scan"])
        assert exc.value.code == 1
        assert "câmera 0" in capsys.readouterr().err

    def test_missing_sdk_exits(self, capsys):
        with patch("smartcart.cli.create_backend") as create:
            create.return_value.extract_list.side_effect = ImportError(
                "google-generativeai é necessário"
            )
            with pytest.raises(SystemExit) as exc:
                main(["read-list", "lista.jpg"])
        assert exc.value.code == 1
        assert "google-generativeai" in capsys.readouterr().err

    def test_list_import(self, capsys):
        backend = FakeBackend(names=["Leite", "Pão"])
        with patch("smartcart.cli.create_backend", return_value=backend):
            main(["scan", "--item", "Leite Integral;4,50", "--list", "lista.jpg"])
        out = capsys.readouterr().out
        assert "✓ Leite" in out
        assert "✗ Pão" in out

    def test_share_falls_back_to_stdout(self, capsys):
        with patch("smartcart.cli.copy_to_clipboard", return_value=False):
            main(["scan", "--item", "Leite;4,50", "--share"])
        out = capsys.readouterr().out
        assert "🛒 *Lista SmartCart*" in out
        assert "💰 *Total: R$ 4,50*" in out

    def test_share_to_clipboard(self, capsys):
        with patch("smartcart.cli.copy_to_clipboard", return_value=True) as copy:
            main(["scan", "--item", "Leite;4,50", "--share"])
        assert "1x Leite - R$ 4,50" in copy.call_args.args[0]
        assert "copiada" in capsys.readouterr().err

    def test_pdf_export(self, tmp_path):
        with patch("smartcart.session.generate_pdf") as gen:
            main(["scan", "--item", "Leite;4,50", "--pdf", str(tmp_path)])
        report, path = gen.call_args.args
        assert path.parent == tmp_path
        assert path.name.startswith("smartcart_resumo_")
        assert report.entries[0].name == "Leite"


class TestReadListCommand:
    def test_read_list_json(self, capsys):
        backend = FakeBackend(names=["Arroz", "Feijão"])
        with patch("smartcart.cli.create_backend", return_value=backend):
            main(["read-list", "lista.jpg", "--json"])
        assert json.loads(capsys.readouterr().out) == ["Arroz", "Feijão"]

    def test_read_list_empty(self, capsys):
        with patch("smartcart.cli.create_backend", return_value=FakeBackend()):
            main(["read-list", "lista.jpg"])
        assert "Nenhum item" in capsys.readouterr().out


def test_render_session_budget_and_comparison():
    session = SmartCartSession(budget=50.0)
    session.add_record(ProductRecord("A", 10, "arroz", 500, "g"))
    session.add_record(ProductRecord("B", 22, "arroz", 1, "kg"))
    session.add_manual("Picanha", "30")

    text = render_session(session)

    assert "Total: R$ 62,00" in text
    assert "100% usado" in text
    assert "Ultrapassou: R$ 12,00" in text
    assert "Melhores Preços" in text
    assert "★ Melhor Custo" in text
    assert "R$ 2,00/100g" in text
