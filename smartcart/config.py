"""TOML configuration loader for SmartCart."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.5-flash"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class VisionConfig:
    backend: str = "gemini"
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)


@dataclass
class CameraConfig:
    indices: list[int] = field(default_factory=lambda: [0])
    save_dir: str = "/tmp/smartcart"


@dataclass
class CartConfig:
    currency_symbol: str = "R$"
    budget: float | None = None


@dataclass
class ExportConfig:
    pdf_dir: str = "."


@dataclass
class SmartCartConfig:
    vision: VisionConfig = field(default_factory=VisionConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    cart: CartConfig = field(default_factory=CartConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(path: str | Path | None = None) -> SmartCartConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    vis = raw.get("vision", {})
    cam = raw.get("camera", {})
    crt = raw.get("cart", {})
    exp = raw.get("export", {})

    gemini_cfg = vis.get("gemini", {})
    claude_cfg = vis.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = (
        gemini_cfg.get("api_key", "")
        or os.environ.get("GEMINI_API_KEY", "")
        or os.environ.get("API_KEY", "")
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    budget = crt.get("budget")
    if budget is not None:
        budget = float(budget)
        if budget < 0:
            raise ValueError(f"cart.budget must not be negative, got {budget}")

    return SmartCartConfig(
        vision=VisionConfig(
            backend=vis.get("backend", "gemini"),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.5-flash"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        camera=CameraConfig(
            indices=cam.get("indices", [0]),
            save_dir=cam.get("save_dir", "/tmp/smartcart"),
        ),
        cart=CartConfig(
            currency_symbol=crt.get("currency_symbol", "R$"),
            budget=budget,
        ),
        export=ExportConfig(
            pdf_dir=exp.get("pdf_dir", "."),
        ),
    )
