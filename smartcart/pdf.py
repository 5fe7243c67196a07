"""PDF shopping report using ReportLab."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from .cart import CartTotals
from .models import CartEntry, ShoppingListEntry
from .share import format_currency

# Unicode TTF fonts for product names outside Latin-1; Helvetica otherwise
_FONT_SEARCH_PATHS = [
    # DejaVu (Debian/Ubuntu, Fedora)
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf",
    # Noto Sans
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    # macOS / Windows
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

_FALLBACK_FONT = "Helvetica"


@dataclass
class CartReport:
    """Everything the PDF report shows."""

    entries: list[CartEntry]
    totals: CartTotals
    best_value_ids: set[str] = field(default_factory=set)
    missing: list[ShoppingListEntry] = field(default_factory=list)
    currency_symbol: str = "R$"
    generated_at: datetime = field(default_factory=datetime.now)


def default_filename(when: datetime | None = None) -> str:
    when = when or datetime.now()
    return f"smartcart_resumo_{when.strftime('%Y-%m-%d')}.pdf"


def _find_unicode_font() -> str | None:
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    return None


def _register_font() -> str:
    """Register a Unicode font with ReportLab if one exists; return its name."""
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    font_path = _find_unicode_font()
    if font_path is None:
        return _FALLBACK_FONT
    font_name = "SmartCartFont"
    pdfmetrics.registerFont(TTFont(font_name, font_path))
    return font_name


def generate_pdf(report: CartReport, output_path: str | Path) -> Path:
    """Generate the shopping report PDF.

    Args:
        report: Cart contents, totals and missing list items.
        output_path: Where to save the PDF file.

    Returns:
        Path to the generated PDF file.

    Raises:
        ValueError: If the cart is empty.
        ImportError: If reportlab is not installed.
    """
    if not report.entries:
        raise ValueError("O carrinho está vazio; nada para exportar.")

    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError("reportlab é necessário: pip install reportlab") from None

    font_name = _register_font()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    symbol = report.currency_symbol
    totals = report.totals

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="Relatório de Compras - SmartCart AI",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "Title_SC",
        parent=styles["Title"],
        fontName=font_name,
        fontSize=18,
        leading=24,
        alignment=0,
    )
    small_style = ParagraphStyle(
        "Small_SC",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=10,
        leading=13,
    )
    heading_style = ParagraphStyle(
        "Heading_SC",
        parent=styles["Heading2"],
        fontName=font_name,
        fontSize=14,
        leading=20,
        spaceBefore=4 * mm,
        spaceAfter=3 * mm,
    )
    body_style = ParagraphStyle(
        "Body_SC",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=11,
        leading=15,
    )

    elements: list = []

    # Title
    elements.append(Paragraph("Relatório de Compras - SmartCart AI", title_style))
    elements.append(
        Paragraph(
            f"Data: {report.generated_at.strftime('%d/%m/%Y %H:%M:%S')}",
            small_style,
        )
    )
    elements.append(Spacer(1, 5 * mm))

    # Financial summary box
    summary_rows = [
        ["Resumo Financeiro:", ""],
        [
            f"Total Gasto: {format_currency(totals.total_cost, symbol)}",
            (
                f"Limite da Carteira: {format_currency(totals.budget, symbol)}"
                if totals.budget is not None
                else "Limite: Não definido"
            ),
        ],
    ]
    balance_color = colors.black
    if totals.budget is not None:
        if totals.remaining_budget >= 0:
            balance_color = colors.HexColor("#008000")
            summary_rows.append([
                f"Saldo / Economia: {format_currency(totals.remaining_budget, symbol)}",
                "",
            ])
        else:
            balance_color = colors.HexColor("#C80000")
            summary_rows.append([
                f"Ultrapassou: {format_currency(abs(totals.remaining_budget), symbol)}",
                "",
            ])

    summary_style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#F5F5F5")),
        ("BOX", (0, 0), (-1, -1), 0.75, colors.HexColor("#C8C8C8")),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 11),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
    ])
    if len(summary_rows) > 2:
        summary_style.add("TEXTCOLOR", (0, 2), (-1, 2), balance_color)
    summary = Table(summary_rows, colWidths=[90 * mm, 90 * mm])
    summary.setStyle(summary_style)
    elements.append(summary)
    elements.append(Spacer(1, 6 * mm))

    # Purchased items
    elements.append(Paragraph("Itens Comprados", heading_style))
    table_data: list[list] = [["Qtd", "Produto", "Preço Un.", "Total"]]
    for entry in report.entries:
        name = escape(entry.name)
        if entry.id in report.best_value_ids:
            name += " (Melhor Custo)"
        table_data.append([
            str(entry.quantity),
            Paragraph(name, body_style),
            format_currency(entry.price, symbol),
            format_currency(entry.price * entry.quantity, symbol),
        ])

    items_table = Table(table_data, colWidths=[15 * mm, 95 * mm, 35 * mm, 35 * mm])
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#16A34A")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    elements.append(items_table)

    # Shopping-list items not in the cart
    if report.missing:
        elements.append(Paragraph("Itens Faltantes (Da sua lista)", heading_style))
        missing_data = [["Produto Faltante"]] + [[m.name] for m in report.missing]
        missing_table = Table(missing_data, colWidths=[180 * mm])
        missing_table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#DC2626")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, -1), font_name),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]))
        elements.append(missing_table)

    doc.build(elements)
    return output_path
