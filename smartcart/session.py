"""Application state: cart, shopping list and budget under one controller."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .cart import CartStore, CartTotals
from .compare import best_value_ids, comparison_groups
from .manual import manual_record, parse_budget
from .models import CartEntry, ProductRecord, ShoppingListEntry
from .pdf import CartReport, generate_pdf
from .share import share_text
from .shopping_list import ShoppingList, is_fulfilled, is_wished, missing_items
from .vision import AnalysisError, MissingCredentialError

if TYPE_CHECKING:
    from .vision import VisionBackend

logger = logging.getLogger(__name__)

BATCH_ERROR_MESSAGE = "Alguns arquivos não puderam ser processados."


@dataclass
class FileFailure:
    path: str
    error: str


@dataclass
class BatchResult:
    """Outcome of analyzing several files one after another."""

    added: list[CartEntry] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def error(self) -> str | None:
        """Single message shown once after the batch, if anything failed."""
        return BATCH_ERROR_MESSAGE if self.failures else None


class SmartCartSession:
    """Owns the cart, the shopping list and the budget for one session."""

    def __init__(self, budget: float | None = None, currency_symbol: str = "R$") -> None:
        self.cart = CartStore()
        self.shopping_list = ShoppingList()
        self.budget = budget
        self.currency_symbol = currency_symbol

    # -- budget ---------------------------------------------------------

    def set_budget(self, value: float | str | None) -> float | None:
        """Set the budget from a number or typed text; blank/None clears it.

        Raises:
            InvalidInputError: If the text is not a valid amount.
            ValueError: If a numeric budget is negative.
        """
        if isinstance(value, str):
            value = parse_budget(value)
        elif value is not None and value < 0:
            raise ValueError(f"Budget must not be negative, got {value}")
        self.budget = value
        return value

    # -- adding products ------------------------------------------------

    def add_manual(self, name: str, price_text: str, size_text: str = "") -> CartEntry:
        """Add a typed-in product; nothing changes if the input is invalid."""
        record = manual_record(name, price_text, size_text)
        return self.cart.add(record)

    def add_record(self, record: ProductRecord, quantity: int = 1) -> CartEntry:
        return self.cart.add(record, quantity=quantity)

    async def scan_files(
        self, backend: VisionBackend, paths: Sequence[str | Path]
    ) -> BatchResult:
        """Analyze files sequentially and add the recognized products.

        A failure on one file is recorded and the rest of the batch still
        runs. A missing API key aborts the whole batch.
        """
        result = BatchResult()
        records: list[ProductRecord] = []
        total = len(paths)

        for i, path in enumerate(paths, 1):
            logger.info("Analisando arquivo %d/%d: %s", i, total, path)
            try:
                records.append(await backend.analyze_product(path))
            except MissingCredentialError:
                raise
            except AnalysisError as e:
                logger.exception("Falha ao analisar %s", path)
                result.failures.append(FileFailure(path=str(path), error=str(e)))

        result.added = self.cart.add_many(records)
        if result.failures:
            logger.warning(
                "%d de %d arquivo(s) falharam", len(result.failures), total
            )
        return result

    async def import_list(
        self, backend: VisionBackend, path: str | Path
    ) -> list[ShoppingListEntry]:
        """Append the items read from a list image; the list is untouched on failure."""
        names = await backend.extract_list(path)
        added = self.shopping_list.extend(names)
        logger.info("Importados %d itens da lista %s", len(added), path)
        return added

    # -- derived views --------------------------------------------------

    def totals(self) -> CartTotals:
        return self.cart.totals(self.budget)

    def comparison(self) -> dict[str, list[CartEntry]]:
        return comparison_groups(self.cart)

    def best_value_ids(self) -> set[str]:
        return best_value_ids(self.comparison())

    def is_fulfilled(self, list_item_name: str) -> bool:
        return is_fulfilled(list_item_name, self.cart)

    def is_wished(self, cart_entry_name: str) -> bool:
        return is_wished(cart_entry_name, self.shopping_list)

    def missing_items(self) -> list[ShoppingListEntry]:
        return missing_items(self.shopping_list, self.cart)

    # -- export ---------------------------------------------------------

    def share_text(self) -> str:
        return share_text(self.cart, self.totals().total_cost, self.currency_symbol)

    def report(self) -> CartReport:
        return CartReport(
            entries=list(self.cart),
            totals=self.totals(),
            best_value_ids=self.best_value_ids(),
            missing=self.missing_items(),
            currency_symbol=self.currency_symbol,
        )

    def export_pdf(self, output_path: str | Path) -> Path:
        return generate_pdf(self.report(), output_path)
