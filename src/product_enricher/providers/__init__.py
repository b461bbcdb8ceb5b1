"""Providers for product-enricher."""

from product_enricher.providers.base import BaseCompletionProvider, BaseSearchProvider
from product_enricher.providers.gemini import GeminiProvider
from product_enricher.providers.perplexity import PerplexitySearchProvider

__all__ = [
    "BaseCompletionProvider",
    "BaseSearchProvider",
    "GeminiProvider",
    "PerplexitySearchProvider",
]
