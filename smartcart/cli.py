"""CLI entry point for SmartCart."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .camera import ProductCamera
from .compare import display_unit_price, unit_price
from .config import load_config
from .manual import InvalidInputError
from .pdf import default_filename
from .session import SmartCartSession
from .share import SHARE_TITLE, copy_to_clipboard, format_currency
from .vision import ListReadError, MissingCredentialError, create_backend


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="smartcart",
        description="SmartCart: fotografe produtos, controle o orçamento e compare preços",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="caminho do arquivo de configuração (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="log detalhado"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="listar câmeras disponíveis")

    # scan
    scan_parser = sub.add_parser("scan", help="analisar produtos e montar o carrinho")
    scan_parser.add_argument(
        "--image", type=str, nargs="+", help="imagens ou PDFs de produtos"
    )
    scan_parser.add_argument(
        "--item", type=str, action="append", default=[], metavar="NOME;PREÇO[;TAMANHO]",
        help='item manual, ex: "Arroz Camil;22,90;1kg"',
    )
    scan_parser.add_argument(
        "--budget", type=str, default=None, help="limite da carteira, ex: 150,00"
    )
    scan_parser.add_argument(
        "--list", type=str, default=None, metavar="FILE", dest="list_file",
        help="imagem da lista de compras para importar",
    )
    scan_parser.add_argument(
        "--want", type=str, action="append", default=[], metavar="NOME",
        help="item da lista de compras",
    )
    scan_parser.add_argument("--json", action="store_true", help="saída em JSON")
    scan_parser.add_argument(
        "--pdf", type=str, nargs="?", const="", default=None, metavar="FILE",
        help="exportar relatório em PDF (sem FILE: pasta export.pdf_dir)",
    )
    scan_parser.add_argument(
        "--share", action="store_true", help="copiar o resumo para a área de transferência"
    )

    # read-list
    list_parser = sub.add_parser("read-list", help="ler uma lista de compras de uma imagem")
    list_parser.add_argument("file", type=str, help="imagem ou PDF da lista")
    list_parser.add_argument("--json", action="store_true", help="saída em JSON")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)

    try:
        match args.command:
            case "cameras":
                _cmd_cameras()
            case "scan":
                asyncio.run(_cmd_scan(config, args))
            case "read-list":
                asyncio.run(_cmd_read_list(config, args))
    except MissingCredentialError as e:
        print(str(e), file=sys.stderr)
        sys.exit(2)
    except InvalidInputError as e:
        print(f"Entrada inválida: {e}", file=sys.stderr)
        sys.exit(2)
    except ListReadError as e:
        print(f"Erro ao ler lista: {e}", file=sys.stderr)
        sys.exit(1)
    except (RuntimeError, ImportError, FileNotFoundError) as e:
        print(f"Erro: {e}", file=sys.stderr)
        sys.exit(1)


def _cmd_cameras() -> None:
    cameras = ProductCamera.list_cameras()
    if not cameras:
        print("Nenhuma câmera disponível.")
        return
    print(f"Câmeras disponíveis: {len(cameras)}")
    for idx in cameras:
        print(f"  Câmera {idx}")


def parse_item_arg(text: str) -> tuple[str, str, str]:
    """Split a --item value "name;price[;size]"."""
    parts = [p.strip() for p in text.split(";")]
    if len(parts) < 2:
        raise InvalidInputError(f"Use NOME;PREÇO[;TAMANHO]: {text!r}")
    size = parts[2] if len(parts) > 2 else ""
    return parts[0], parts[1], size


async def _cmd_scan(config, args) -> None:
    session = SmartCartSession(
        budget=config.cart.budget,
        currency_symbol=config.cart.currency_symbol,
    )
    if args.budget is not None:
        session.set_budget(args.budget)

    # Manual items are validated before anything is sent to the AI
    manual_items = [parse_item_arg(i) for i in args.item]
    for name, price, size in manual_items:
        session.add_manual(name, price, size)

    session.shopping_list.extend(args.want)

    backend = None
    if args.list_file:
        backend = create_backend(config)
        print("📝 Lendo lista de compras...", file=sys.stderr)
        await session.import_list(backend, args.list_file)

    # Get images
    if args.image:
        image_paths = args.image
    elif not manual_items:
        camera = ProductCamera(
            camera_indices=config.camera.indices,
            save_dir=config.camera.save_dir,
        )
        print("📷 Fotografando...", file=sys.stderr)
        captures = camera.capture_all()
        image_paths = [c.image_path for c in captures]
    else:
        image_paths = []

    if image_paths:
        backend = backend or create_backend(config)
        print(f"🔍 Analisando {len(image_paths)} arquivo(s)...", file=sys.stderr)
        result = await session.scan_files(backend, image_paths)
        if result.error:
            print(f"⚠  {result.error}", file=sys.stderr)
            for failure in result.failures:
                print(f"   {failure.path}: {failure.error}", file=sys.stderr)

    if args.json:
        print(json.dumps(session_to_dict(session), ensure_ascii=False, indent=2))
    else:
        print(render_session(session))

    if args.pdf is not None and len(session.cart) > 0:
        print("📄 Gerando PDF...", file=sys.stderr)
        pdf_path = Path(args.pdf or config.export.pdf_dir)
        if not args.pdf or pdf_path.is_dir():
            pdf_path = pdf_path / default_filename()
        try:
            session.export_pdf(pdf_path)
            print(f"   PDF salvo: {pdf_path}", file=sys.stderr)
        except ImportError as e:
            print(f"Erro ao gerar PDF: {e}", file=sys.stderr)

    if args.share and len(session.cart) > 0:
        text = session.share_text()
        if copy_to_clipboard(text):
            print("Lista copiada para a área de transferência!", file=sys.stderr)
        else:
            print(f"\n{SHARE_TITLE}\n{text}")


async def _cmd_read_list(config, args) -> None:
    backend = create_backend(config)
    names = await backend.extract_list(args.file)
    if args.json:
        print(json.dumps(names, ensure_ascii=False, indent=2))
        return
    if not names:
        print("Nenhum item encontrado.")
        return
    print(f"📝 Lista de compras ({len(names)} itens):")
    for name in names:
        print(f"  ☐ {name}")


def session_to_dict(session: SmartCartSession) -> dict:
    totals = session.totals()
    best = session.best_value_ids()
    return {
        "items": [
            {
                **asdict(e),
                "best_value": e.id in best,
                "in_wishlist": session.is_wished(e.name),
            }
            for e in session.cart
        ],
        "totals": asdict(totals),
        "comparison": {
            cat: [e.id for e in group] for cat, group in session.comparison().items()
        },
        "shopping_list": [
            {**asdict(i), "in_cart": session.is_fulfilled(i.name)}
            for i in session.shopping_list
        ],
    }


def render_session(session: SmartCartSession) -> str:
    """Format the cart, budget, comparison and list for the terminal."""
    sym = session.currency_symbol
    totals = session.totals()
    best = session.best_value_ids()
    lines: list[str] = []

    lines.append(f"🛒 Carrinho ({totals.item_count} itens)")
    if not len(session.cart):
        lines.append("  Carrinho vazio.")
    for e in session.cart:
        badges = []
        if e.id in best:
            badges.append("★ Melhor Custo")
        if session.is_wished(e.name):
            badges.append("✓ Na Lista")
        if e.measure_display:
            badges.append(e.measure_display)
        per_unit = display_unit_price(e)
        if per_unit is not None:
            badges.append(f"{format_currency(per_unit, sym)}/{e.measure_unit}")
        badge_str = f"  [{' | '.join(badges)}]" if badges else ""
        lines.append(
            f"  {e.quantity}x {e.name:<30} {format_currency(e.subtotal, sym):>12}{badge_str}"
        )

    lines.append(f"{'─' * 50}")
    lines.append(f"💰 Total: {format_currency(totals.total_cost, sym)}")
    if totals.budget is not None:
        lines.append(
            f"   Limite: {format_currency(totals.budget, sym)}  "
            f"({totals.usage_percent:.0f}% usado)"
        )
        if totals.is_over_budget:
            lines.append(
                f"   ⚠ Ultrapassou: {format_currency(-totals.remaining_budget, sym)}"
            )
        else:
            lines.append(f"   Disponível: {format_currency(totals.remaining_budget, sym)}")

    groups = session.comparison()
    if groups:
        lines.append("")
        lines.append("⚖  Melhores Preços")
        for cat, group in groups.items():
            lines.append(f"  {cat.capitalize()}")
            for i, e in enumerate(group):
                mark = "★" if i == 0 and len(group) >= 2 else " "
                lines.append(
                    f"    {mark} {e.name:<28} {e.measure_display:>8}  {_unit_price_label(e, sym)}"
                )

    if len(session.shopping_list):
        lines.append("")
        lines.append("📝 Lista de compras")
        for item in session.shopping_list:
            status = "✓" if session.is_fulfilled(item.name) else "✗"
            lines.append(f"  {status} {item.name}")

    return "\n".join(lines)


_BASE_UNITS = {"g": "g", "kg": "g", "ml": "ml", "l": "ml"}


def _unit_price_label(entry, symbol: str) -> str:
    """Normalized price as shown in the comparison: per 100 g / 100 ml, else per unit."""
    base = _BASE_UNITS.get(entry.measure_unit or "")
    if base is None:
        return f"{format_currency(unit_price(entry), symbol)}/{entry.measure_unit}"
    return f"{format_currency(unit_price(entry) * 100, symbol)}/100{base}"
