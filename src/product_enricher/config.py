"""Runtime configuration for the enrichment pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_SEARCH_MODEL = "sonar"
DEFAULT_MAX_CONTENT_CHARS = 15000


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class EnrichmentConfig:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    search_api_key: str | None = None
    search_model: str = DEFAULT_SEARCH_MODEL
    search_enabled: bool = True
    fetch_timeout_sec: float = 30.0
    max_content_chars: int = DEFAULT_MAX_CONTENT_CHARS
    field_delay_sec: float = 0.0

    @classmethod
    def from_env(cls) -> "EnrichmentConfig":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or None,
            model=os.getenv("PRODUCT_ENRICHER_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
            search_api_key=os.getenv("PERPLEXITY_API_KEY") or None,
            search_model=(
                os.getenv("PRODUCT_ENRICHER_SEARCH_MODEL", DEFAULT_SEARCH_MODEL).strip()
                or DEFAULT_SEARCH_MODEL
            ),
            search_enabled=_parse_bool(os.getenv("PRODUCT_ENRICHER_SEARCH_ENABLED"), True),
            fetch_timeout_sec=max(
                1.0, _safe_float(os.getenv("PRODUCT_ENRICHER_FETCH_TIMEOUT_SEC"), 30.0)
            ),
            max_content_chars=max(
                1000,
                _safe_int(
                    os.getenv("PRODUCT_ENRICHER_MAX_CONTENT_CHARS"), DEFAULT_MAX_CONTENT_CHARS
                ),
            ),
            field_delay_sec=max(
                0.0, _safe_float(os.getenv("PRODUCT_ENRICHER_FIELD_DELAY_SEC"), 0.0)
            ),
        )
