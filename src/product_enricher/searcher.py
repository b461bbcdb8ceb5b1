"""Fallback web search for fields the primary pass could not fill."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx

from product_enricher.categories import PRICE_FIELD, CategorySchema
from product_enricher.exceptions import EnrichmentError
from product_enricher.parsing import extract_json_object
from product_enricher.providers.base import BaseSearchProvider
from product_enricher.schema import EnrichmentRequest

logger = logging.getLogger(__name__)

FIELD_DESCRIPTIONS = {
    "brand": "brand/manufacturer name",
    "price": "current retail price in USD (number only, e.g., 29.99)",
    "servings_per_container": "total servings per bottle (number)",
    "serving_size": 'units per serving (e.g., 2 if "take 2 capsules")',
    "intake_form": "physical form: capsule, tablet, softgel, powder, liquid, gummy, or patch",
    "dose_per_serving": "active ingredient amount per serving (number only)",
    "dose_unit": "measurement unit: mg, g, mcg, IU, ml, or CFU",
    "category": "product category",
    "size_amount": "product size as a number (e.g., 200 for 200ml)",
    "size_unit": "size unit: ml, oz, or g",
    "application_form": "application form: cream, gel, oil, liquid, or foam",
    "usage_amount": "recommended amount per application (e.g., 1 for 1 pump, 2 for 2 drops)",
    "usage_unit": "usage unit: ml, pumps, drops, or pea-sized",
}

SEARCH_SYSTEM_PROMPT = """You are a product price researcher. Find the retail PRICE of {label} products.

Search ANY retailer - Amazon, Walmart, Target, Ulta, Sephora, iHerb, brand websites, etc.

When you find a price mentioned ANYWHERE, extract it:
- "$24.99" → price: 24.99
- "costs $15" → price: 15
- "US$29.95" → price: 29.95
- "for 12.99" → price: 12.99

Return ONLY valid JSON:
{{
  "brand": "string or null",
  "price": number (e.g., 24.99) - FIND THIS,
  "size_amount": number or null,
  "size_unit": "ml|oz|g or null",
  "application_form": "cream|gel|oil|liquid|foam or null",
  "category": "string or null",
  "usage_amount": number or null (recommended amount per use, e.g., 1 for 1 pump),
  "usage_unit": "ml|pumps|drops|pea-sized or null",
  "servings_per_container": number or null,
  "serving_size": number or null,
  "intake_form": "capsule|tablet|softgel|powder|liquid|gummy|patch or null",
  "dose_per_serving": number or null,
  "dose_unit": "mg|g|mcg|IU|ml|CFU or null",
  "source_url": "URL where you found the price",
  "confidence": 0.0-1.0
}}"""


@dataclass(frozen=True)
class SearchOutcome:
    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


def fields_to_search(missing: Sequence[str]) -> list[str]:
    """Missing fields, with price always re-confirmed first."""
    fields = list(missing)
    if PRICE_FIELD not in fields:
        fields.insert(0, PRICE_FIELD)
    return fields


def build_search_query(product_name: str, brand: str | None, fields: Sequence[str]) -> str:
    brand_suffix = ""
    if brand and brand.lower() not in product_name.lower():
        brand_suffix = f" {brand}"
    descriptions = ", ".join(FIELD_DESCRIPTIONS.get(name, name) for name in fields)
    return (
        f'"{product_name}{brand_suffix}" price USD buy online. '
        f"What is the price? {descriptions}."
    )


class FallbackSearcher:
    """Asks the search provider for the fields the primary pass missed."""

    def __init__(self, provider: BaseSearchProvider):
        self.provider = provider

    async def search(
        self,
        schema: CategorySchema,
        request: EnrichmentRequest,
        fields: Sequence[str],
    ) -> SearchOutcome:
        """Query the provider; failures come back as `success=False`."""
        query = build_search_query(request.product_name, request.brand, fields)
        logger.info("fallback search query: %s", query)
        try:
            answer = await self.provider.search(
                SEARCH_SYSTEM_PROMPT.format(label=schema.label), query
            )
            data = extract_json_object(answer)
        except (EnrichmentError, httpx.HTTPError) as exc:
            logger.warning("fallback search failed: %s", exc)
            return SearchOutcome(success=False, error=str(exc) or type(exc).__name__)
        return SearchOutcome(success=True, data=data)
