"""Tests for the Gemini completion provider."""

from types import SimpleNamespace

import pytest
from google.genai import errors

from product_enricher.exceptions import AuthenticationError, ProviderError, RateLimitError
from product_enricher.providers.gemini import GeminiProvider


class MockGeminiClient:
    def __init__(self, text=None, error=None):
        self.calls = []
        outer = self

        class Models:
            async def generate_content(self, model, contents, config):
                outer.calls.append((model, contents, config))
                if error is not None:
                    raise error
                return SimpleNamespace(text=text)

        self.aio = SimpleNamespace(models=Models())


def test_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        GeminiProvider()


@pytest.mark.asyncio
async def test_complete_sends_system_instruction():
    client = MockGeminiClient(text='{"product": {"brand": "Acme"}}')
    provider = GeminiProvider(client=client, model="gemini-2.5-flash")

    text = await provider.complete("You extract products.", "Product Name: Widget")

    assert text == '{"product": {"brand": "Acme"}}'
    model, contents, config = client.calls[0]
    assert model == "gemini-2.5-flash"
    assert contents == ["Product Name: Widget"]
    assert config.system_instruction == "You extract products."
    assert config.temperature == 0.1


@pytest.mark.asyncio
async def test_empty_response_text_becomes_empty_string():
    provider = GeminiProvider(client=MockGeminiClient(text=None))

    assert await provider.complete("system", "prompt") == ""


@pytest.mark.asyncio
async def test_quota_error_maps_to_rate_limit():
    error = errors.ClientError(
        429, {"error": {"code": 429, "message": "Resource exhausted: quota", "status": "RESOURCE_EXHAUSTED"}}
    )
    provider = GeminiProvider(client=MockGeminiClient(error=error))

    with pytest.raises(RateLimitError):
        await provider.complete("system", "prompt")


@pytest.mark.asyncio
async def test_server_error_maps_to_provider_error():
    error = errors.ServerError(
        500, {"error": {"code": 500, "message": "Internal error", "status": "INTERNAL"}}
    )
    provider = GeminiProvider(client=MockGeminiClient(error=error))

    with pytest.raises(ProviderError):
        await provider.complete("system", "prompt")
