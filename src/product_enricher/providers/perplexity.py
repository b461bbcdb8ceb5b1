"""Perplexity web-search provider implementation."""

import logging
import os

import httpx

from product_enricher.config import DEFAULT_SEARCH_MODEL
from product_enricher.exceptions import AuthenticationError, ProviderError, RateLimitError
from product_enricher.providers.base import BaseSearchProvider

logger = logging.getLogger(__name__)

PERPLEXITY_API_URL = "https://api.perplexity.ai/chat/completions"


class PerplexitySearchProvider(BaseSearchProvider):
    """Perplexity chat-completions provider used for fallback search."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_SEARCH_MODEL,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
    ):
        """Initialize Perplexity provider.

        Args:
            api_key: Perplexity API key. Falls back to PERPLEXITY_API_KEY env var.
            model: Model name to use.
            transport: Optional httpx transport (tests).

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.api_key = api_key or os.environ.get("PERPLEXITY_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set PERPLEXITY_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.model = model
        self.timeout = timeout
        self.transport = transport
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def search(self, system_instructions: str, query: str) -> str:
        """Send `query` to Perplexity and return the answer text.

        Raises:
            RateLimitError: On HTTP 429.
            AuthenticationError: On HTTP 401/403.
            ProviderError: On any other non-2xx status or an unexpected body.
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instructions},
                {"role": "user", "content": query},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        ) as client:
            response = await client.post(PERPLEXITY_API_URL, json=payload, headers=headers)

        if response.status_code == 429:
            raise RateLimitError(f"Perplexity API error: {response.status_code}")
        if response.status_code in {401, 403}:
            raise AuthenticationError(f"Perplexity API error: {response.status_code}")
        if not response.is_success:
            raise ProviderError(f"Perplexity API error: {response.status_code}")

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderError(f"Unexpected Perplexity response body: {exc}") from exc
        if not isinstance(content, str):
            raise ProviderError(
                f"Unexpected Perplexity content type: {type(content).__name__}"
            )

        logger.debug("perplexity answer: %s", content[:500])
        return content
