"""Core enrichment functions."""

from __future__ import annotations

from typing import Any, Iterable

from product_enricher.batch import BatchRunner, ItemCompleteCallback, ItemProgressCallback
from product_enricher.config import EnrichmentConfig
from product_enricher.fetcher import ContentFetcher
from product_enricher.pipeline import EnrichmentPipeline, ProgressCallback
from product_enricher.providers.base import BaseCompletionProvider, BaseSearchProvider
from product_enricher.schema import (
    BatchItem,
    EnrichmentRequest,
    EnrichmentResult,
    ProductCategory,
)


def _build_gemini_provider(api_key: str | None, model: str) -> BaseCompletionProvider:
    from product_enricher.providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key, model=model)


def _build_search_provider(api_key: str, model: str) -> BaseSearchProvider:
    from product_enricher.providers.perplexity import PerplexitySearchProvider

    return PerplexitySearchProvider(api_key=api_key, model=model)


def build_pipeline(
    config: EnrichmentConfig | None = None,
    *,
    api_key: str | None = None,
    search_api_key: str | None = None,
) -> EnrichmentPipeline:
    """Wire a pipeline from configuration.

    Args:
        config: Settings. Defaults to `EnrichmentConfig.from_env()`.
        api_key: Gemini API key, overriding the configured one.
        search_api_key: Perplexity API key, overriding the configured one.

    Raises:
        AuthenticationError: If no Gemini API key is available.
    """
    config = config or EnrichmentConfig.from_env()
    completion = _build_gemini_provider(api_key or config.api_key, config.model)

    search_key = search_api_key or config.search_api_key
    search = None
    if config.search_enabled and search_key:
        search = _build_search_provider(search_key, config.search_model)

    return EnrichmentPipeline(
        completion,
        search_provider=search,
        fetcher=ContentFetcher(
            timeout=config.fetch_timeout_sec,
            max_chars=config.max_content_chars,
        ),
        field_delay_sec=config.field_delay_sec,
    )


async def enrich(
    product_name: str,
    *,
    category: str | ProductCategory,
    brand: str | None = None,
    url: str | None = None,
    existing_data: dict[str, Any] | None = None,
    api_key: str | None = None,
    search_api_key: str | None = None,
    on_progress: ProgressCallback | None = None,
) -> EnrichmentResult:
    """Enrich one product reference into a confidence-scored record.

    Args:
        product_name: Product name as the user typed it.
        category: `supplement`, `facial_product` or `equipment`.
        brand: Optional brand name.
        url: Optional product page URL to scrape.
        existing_data: Optional known values, passed to the model as context.
        api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
        search_api_key: Perplexity API key. Falls back to PERPLEXITY_API_KEY;
            without one the fallback search is skipped.
        on_progress: Callback receiving each `ProgressEvent` in order.

    Returns:
        EnrichmentResult. `success` is False only when the run could not
        complete (unknown category, provider failure).
    """
    pipeline = build_pipeline(api_key=api_key, search_api_key=search_api_key)
    request = EnrichmentRequest(
        product_name=product_name,
        brand=brand,
        product_url=url,
        category=category,
        existing_data=existing_data,
    )
    return await pipeline.run(request, on_progress)


async def enrich_batch(
    items: Iterable[BatchItem],
    *,
    category: str | ProductCategory,
    api_key: str | None = None,
    search_api_key: str | None = None,
    on_item_progress: ItemProgressCallback | None = None,
    on_item_complete: ItemCompleteCallback | None = None,
) -> dict[int, EnrichmentResult]:
    """Enrich several product references sequentially, keyed by item index."""
    pipeline = build_pipeline(api_key=api_key, search_api_key=search_api_key)
    runner = BatchRunner(pipeline, category)
    return await runner.run(items, on_item_progress, on_item_complete)
