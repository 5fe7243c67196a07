"""Parsing of hand-typed prices, package sizes and budgets."""

from __future__ import annotations

import math
import re

from .models import ProductRecord

# Number followed by a unit word: "500g", "1.5 L", "2,5kg"
_MEASURE_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*([a-zA-Z]+)")


class InvalidInputError(ValueError):
    """A manually typed value could not be parsed."""


def parse_price(text: str) -> float:
    """Parse a price typed with either a decimal comma or point.

    Args:
        text: e.g. "4,50", "12.9", "R$ 3,99"

    Raises:
        InvalidInputError: If the text is blank, not a finite number or negative.
    """
    cleaned = text.strip().removeprefix("R$").strip().replace(",", ".")
    if not cleaned:
        raise InvalidInputError("Preço inválido.")
    try:
        value = float(cleaned)
    except ValueError:
        raise InvalidInputError(f"Preço inválido: {text!r}") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"Preço inválido: {text!r}")
    return value


def parse_measure(text: str) -> tuple[float | None, str | None]:
    """Parse a package size such as "500g" or "1 l".

    Returns:
        (value, unit) with the unit lower-cased, or (None, None) if the
        text doesn't look like a size.
    """
    m = _MEASURE_PATTERN.search(text.strip())
    if not m:
        return (None, None)
    return (float(m.group(1).replace(",", ".")), m.group(2).lower())


def parse_budget(text: str) -> float | None:
    """Parse a budget; blank text clears it."""
    if not text.strip():
        return None
    return parse_price(text)


def manual_record(name: str, price_text: str, size_text: str = "") -> ProductRecord:
    """Build a product record from the manual entry form.

    The category is the first word of the name, so "Arroz Tio João"
    and "Arroz Camil" land in the same comparison group.
    """
    name = name.strip()
    if not name:
        raise InvalidInputError("Informe o nome do produto.")
    price = parse_price(price_text)
    value, unit = parse_measure(size_text) if size_text.strip() else (None, None)
    return ProductRecord(
        name=name,
        price=price,
        category=name.split(" ")[0].lower(),
        measure_value=value,
        measure_unit=unit,
    )
