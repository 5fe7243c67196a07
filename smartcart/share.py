"""Plain-text cart summary for sharing, and its clipboard hand-off."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import CartEntry

logger = logging.getLogger(__name__)

SHARE_HEADER = "🛒 *Lista SmartCart*"
SHARE_TITLE = "Minha Lista de Compras"

# Clipboard commands tried in order: Wayland, X11 (two tools), macOS, Windows
_CLIPBOARD_COMMANDS: list[list[str]] = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
    ["clip"],
]


def format_currency(value: float, symbol: str = "R$") -> str:
    """Format a value the pt-BR way: 1234.5 → "R$ 1.234,50"."""
    digits = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if round(value, 2) < 0 else ""
    return f"{sign}{symbol} {digits}"


def parse_currency(text: str, symbol: str = "R$") -> float:
    """Inverse of format_currency."""
    cleaned = text.strip()
    negative = cleaned.startswith("-")
    cleaned = cleaned.lstrip("-").strip().removeprefix(symbol).strip()
    value = float(cleaned.replace(".", "").replace(",", "."))
    return -value if negative else value


def share_text(
    entries: Iterable[CartEntry], total_cost: float, symbol: str = "R$"
) -> str:
    """Build the WhatsApp-style summary of the cart."""
    lines = [
        f"{e.quantity}x {e.name} - {format_currency(e.price * e.quantity, symbol)}"
        for e in entries
    ]
    return (
        f"{SHARE_HEADER}\n\n"
        + "\n".join(lines)
        + f"\n\n💰 *Total: {format_currency(total_cost, symbol)}*"
    )


@dataclass
class SharedLine:
    quantity: int
    name: str
    subtotal: float


@dataclass
class ParsedShare:
    lines: list[SharedLine] = field(default_factory=list)
    total: float = 0.0

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def parse_share_text(text: str, symbol: str = "R$") -> ParsedShare:
    """Read quantities, names and the total back out of a share summary.

    Raises:
        ValueError: If the total line is missing.
    """
    money = rf"-?{re.escape(symbol)} [\d.]+,\d{{2}}"
    line_re = re.compile(rf"^(\d+)x (.+) - ({money})$")
    total_re = re.compile(rf"^💰 \*Total: ({money})\*$")

    parsed = ParsedShare()
    found_total = False
    for raw in text.splitlines():
        raw = raw.strip()
        m = line_re.match(raw)
        if m:
            parsed.lines.append(
                SharedLine(
                    quantity=int(m.group(1)),
                    name=m.group(2),
                    subtotal=parse_currency(m.group(3), symbol),
                )
            )
            continue
        m = total_re.match(raw)
        if m:
            parsed.total = parse_currency(m.group(1), symbol)
            found_total = True

    if not found_total:
        raise ValueError("Texto de compartilhamento sem linha de total.")
    return parsed


def copy_to_clipboard(text: str) -> bool:
    """Copy text using the first clipboard tool found on the system.

    Returns:
        True if the text was copied, False if no tool is available or
        the tool failed.
    """
    for cmd in _CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]) is None:
            continue
        try:
            result = subprocess.run(
                cmd,
                input=text,
                text=True,
                capture_output=True,
                timeout=10,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.warning("Clipboard command %s failed: %s", cmd[0], e)
            continue
        if result.returncode == 0:
            logger.debug("Share text copied with %s", cmd[0])
            return True
        logger.warning(
            "Clipboard command %s exited with %d: %s",
            cmd[0], result.returncode, result.stderr.strip(),
        )
    return False
