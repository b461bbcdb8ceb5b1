"""Gemini provider implementation."""

import logging
import os

from google import genai
from google.genai import errors, types

from product_enricher.config import DEFAULT_MODEL
from product_enricher.exceptions import AuthenticationError, ProviderError, RateLimitError
from product_enricher.providers.base import BaseCompletionProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseCompletionProvider):
    """Gemini text-completion provider used for primary extraction."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        *,
        client=None,
        temperature: float = 0.1,
        max_output_tokens: int = 1500,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use.
            client: Pre-built `genai.Client`-compatible object (tests, shared clients).

        Raises:
            AuthenticationError: If no client is given and no API key is found.
        """
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    async def complete(self, system_instructions: str, prompt: str) -> str:
        """Run one completion against Gemini.

        Raises:
            RateLimitError: If the API rate limit or quota is exceeded.
            AuthenticationError: If the API key is rejected.
            ProviderError: For any other API failure.
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[prompt],
                config=types.GenerateContentConfig(
                    system_instruction=system_instructions,
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except errors.ClientError as e:
            if "rate" in str(e).lower() or "quota" in str(e).lower():
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if "auth" in str(e).lower() or "key" in str(e).lower():
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise ProviderError(f"Gemini request rejected: {e}") from e
        except errors.APIError as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        text = response.text or ""
        logger.debug("gemini response (%d chars) from %s", len(text), self.model)
        return text
