"""Vision backend base class, errors, reply parsing, and factory."""

from __future__ import annotations

import json
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import ProductRecord

if TYPE_CHECKING:
    from ..config import SmartCartConfig

PRODUCT_PROMPT = """\
Analise esta imagem/documento. Identifique o produto, preço, e muito \
importante: o peso/volume da embalagem para cálculo de custo-benefício. \
Se houver vários itens iguais de marcas diferentes, escolha o mais legível. \
Categorize o produto.

Responda apenas com um objeto JSON no formato:
{"productName": "nome conciso em português", "price": 0.0,
 "category": "categoria_em_snake_case", "measureValue": 0, "measureUnit": "g"}

- price: o preço visível; se não estiver visível, estime um preço de mercado
  realista em Reais (BRL).
- category: categoria geral simples para agrupar produtos similares
  (ex: creme_dental, arroz, refrigerante, sabonete).
- measureValue / measureUnit: peso ou volume da embalagem (ex: 90 e "g").
  Use apenas as unidades g, kg, ml, l, un.
"""

PRODUCT_SYSTEM_INSTRUCTION = (
    "Você é um assistente de supermercado brasileiro focado em economia. "
    "Identifique produtos, preços e TAMANHOS DE EMBALAGEM (peso/volume) "
    "com precisão. Responda em JSON."
)

LIST_PROMPT = """\
Leia esta imagem (que pode ser uma lista manuscrita, nota fiscal antiga ou \
planilha) e extraia APENAS os nomes dos produtos para criar uma lista de \
compras. Retorne um array JSON de strings simples.
"""

LIST_SYSTEM_INSTRUCTION = (
    "Extraia uma lista de itens de compras. Ignore preços e quantidades, "
    "retorne apenas os nomes dos itens (ex: [\"Arroz\", \"Feijão\", \"Leite\"])."
)


class MissingCredentialError(ValueError):
    """No API key is configured for the selected backend."""


class AnalysisError(RuntimeError):
    """A product image or document could not be analyzed."""

    def __init__(self, message: str = "Falha ao analisar o arquivo. Tente novamente.") -> None:
        super().__init__(message)


class ListReadError(RuntimeError):
    """A shopping list image or document could not be read."""

    def __init__(self, message: str = "Falha ao ler a lista de compras.") -> None:
        super().__init__(message)


class VisionBackend(ABC):
    """Abstract base for product and shopping-list extraction from files."""

    @abstractmethod
    async def analyze_product(self, path: str | Path) -> ProductRecord:
        """Extract a single product (name, price, size) from one file.

        Raises:
            MissingCredentialError: If no API key is configured.
            AnalysisError: If the call fails or returns unusable output.
        """
        ...

    @abstractmethod
    async def extract_list(self, path: str | Path) -> list[str]:
        """Extract shopping-list item names from one file.

        Raises:
            MissingCredentialError: If no API key is configured.
            ListReadError: If the call fails or returns unusable output.
        """
        ...


def guess_mime_type(path: str | Path) -> str:
    return mimetypes.guess_type(str(path))[0] or "image/jpeg"


def strip_fences(text: str) -> str:
    """Remove markdown code fences around a JSON reply."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def parse_product_response(text: str | None) -> ProductRecord:
    """Parse the JSON object describing one product.

    Raises:
        AnalysisError: On empty text, invalid JSON or missing fields.
    """
    if not text or not text.strip():
        raise AnalysisError("Não foi possível obter resposta da IA.")
    try:
        data = json.loads(strip_fences(text))
        record = ProductRecord(
            name=str(data["productName"]).strip(),
            price=float(data["price"]),
            category=_optional_text(data.get("category")),
            measure_value=_optional_float(data.get("measureValue")),
            measure_unit=_optional_unit(data.get("measureUnit")),
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        raise AnalysisError() from e
    return record


def parse_list_response(text: str | None) -> list[str]:
    """Parse the JSON array of item names; empty text is an empty list."""
    if not text or not text.strip():
        return []
    try:
        items = json.loads(strip_fences(text))
    except json.JSONDecodeError as e:
        raise ListReadError() from e
    if not isinstance(items, list):
        raise ListReadError()
    return [str(i).strip() for i in items if str(i).strip()]


def _optional_float(value) -> float | None:
    if value in (None, ""):
        return None
    return float(value)


def _optional_text(value) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _optional_unit(value) -> str | None:
    if not value:
        return None
    return str(value).strip().lower()


def create_backend(config: SmartCartConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case _:
            raise ValueError(
                f"Backend de visão desconhecido: {backend_name!r}  "
                f"(escolha gemini ou claude)"
            )
