"""Claude API vision backend for product and list extraction."""

from __future__ import annotations

import base64
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


class ClaudeVisionBackend(VisionBackend):
    """Read products and shopping lists using Claude's vision capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def analyze_product(self, path: str | Path) -> ProductRecord:
        try:
            text = await self._generate(path, PRODUCT_PROMPT, PRODUCT_SYSTEM_INSTRUCTION)
        except (MissingCredentialError, ImportError):
            raise
        except Exception as e:
            logger.error("Claude analysis error for %s: %s", path, e)
            raise AnalysisError() from e
        return parse_product_response(text)

    async def extract_list(self, path: str | Path) -> list[str]:
        try:
            text = await self._generate(path, LIST_PROMPT, LIST_SYSTEM_INSTRUCTION)
        except (MissingCredentialError, ImportError):
            raise
        except Exception as e:
            logger.error("Claude list extraction error for %s: %s", path, e)
            raise ListReadError() from e
        return parse_list_response(text)

    async def _generate(self, path: str | Path, prompt: str, system: str) -> str:
        if not self._api_key:
            raise MissingCredentialError(
                "Chave da API Anthropic não configurada. "
                "Verifique o arquivo de configuração ou a variável ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        data = Path(path).read_bytes()
        media_type = guess_mime_type(path)
        # PDFs go in as document blocks, everything else as an image
        block_type = "document" if media_type == "application/pdf" else "image"
        content: list[dict] = [
            {
                "type": block_type,
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": prompt},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=1024,
            system=system,
            messages=[{"role": "user", "content": content}],
        )

        if not response.content:
            return ""
        return response.content[0].text
