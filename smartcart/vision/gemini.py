"""Gemini API vision backend for product and list extraction."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import ProductRecord
from . import (
    LIST_PROMPT,
    LIST_SYSTEM_INSTRUCTION,
    PRODUCT_PROMPT,
    PRODUCT_SYSTEM_INSTRUCTION,
    AnalysisError,
    ListReadError,
    MissingCredentialError,
    VisionBackend,
    guess_mime_type,
    parse_list_response,
    parse_product_response,
)

logger = logging.getLogger(__name__)


class GeminiVisionBackend(VisionBackend):
    """Read products and shopping lists using Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.5-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def analyze_product(self, path: str | Path) -> ProductRecord:
        try:
            text = await self._generate(path, PRODUCT_PROMPT, PRODUCT_SYSTEM_INSTRUCTION)
        except (MissingCredentialError, ImportError):
            raise
        except Exception as e:
            logger.error("Gemini analysis error for %s: %s", path, e)
            raise AnalysisError() from e
        return parse_product_response(text)

    async def extract_list(self, path: str | Path) -> list[str]:
        try:
            text = await self._generate(path, LIST_PROMPT, LIST_SYSTEM_INSTRUCTION)
        except (MissingCredentialError, ImportError):
            raise
        except Exception as e:
            logger.error("Gemini list extraction error for %s: %s", path, e)
            raise ListReadError() from e
        return parse_list_response(text)

    async def _generate(self, path: str | Path, prompt: str, system: str) -> str | None:
        if not self._api_key:
            raise MissingCredentialError(
                "Chave da API Gemini não configurada. "
                "Verifique o arquivo de configuração ou a variável GEMINI_API_KEY."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        data = Path(path).read_bytes()
        parts: list = [
            {"mime_type": guess_mime_type(path), "data": data},
            prompt,
        ]

        response = await model.generate_content_async(
            parts,
            generation_config={"response_mime_type": "application/json"},
        )
        return response.text
