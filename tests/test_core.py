"""Tests for core enrichment functions."""

import pytest

from product_enricher import BatchItem, build_pipeline, enrich, enrich_batch
from product_enricher.config import EnrichmentConfig
from product_enricher.exceptions import AuthenticationError


def test_build_pipeline_requires_api_key(monkeypatch):
    """build_pipeline() should raise AuthenticationError without API key."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        build_pipeline(EnrichmentConfig())


def test_build_pipeline_without_search_key_skips_search(mocker, completion_factory):
    mocker.patch("product_enricher.core._build_gemini_provider", return_value=completion_factory())
    build_search = mocker.patch("product_enricher.core._build_search_provider")

    pipeline = build_pipeline(EnrichmentConfig(api_key="test-key"))

    assert pipeline.searcher is None
    build_search.assert_not_called()


def test_build_pipeline_wires_config(mocker, completion_factory, search_factory):
    build_gemini = mocker.patch(
        "product_enricher.core._build_gemini_provider", return_value=completion_factory()
    )
    search = search_factory()
    build_search = mocker.patch("product_enricher.core._build_search_provider", return_value=search)

    pipeline = build_pipeline(
        EnrichmentConfig(
            api_key="test-key",
            model="gemini-2.5-flash",
            search_api_key="pplx-key",
            max_content_chars=5000,
            field_delay_sec=0.1,
        )
    )

    build_gemini.assert_called_once_with("test-key", "gemini-2.5-flash")
    build_search.assert_called_once_with("pplx-key", "sonar")
    assert pipeline.searcher.provider is search
    assert pipeline.fetcher.max_chars == 5000
    assert pipeline.field_delay_sec == 0.1


def test_build_pipeline_respects_search_disabled(mocker, completion_factory):
    mocker.patch("product_enricher.core._build_gemini_provider", return_value=completion_factory())
    build_search = mocker.patch("product_enricher.core._build_search_provider")

    pipeline = build_pipeline(
        EnrichmentConfig(api_key="test-key", search_api_key="pplx-key", search_enabled=False)
    )

    assert pipeline.searcher is None
    build_search.assert_not_called()


@pytest.mark.asyncio
async def test_enrich_with_mock_provider(mocker, monkeypatch, completion_factory):
    """enrich() should return normalized data from the completion provider."""
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    provider = completion_factory(
        'Here you go:\n```json\n{"product": {"brand": "NOW Foods", "price": "$12.99", '
        '"dose_unit": "IU", "dose_per_serving": 5000}, "field_confidence": {"brand": 0.95}}\n```'
    )
    mocker.patch("product_enricher.core._build_gemini_provider", return_value=provider)
    events = []

    result = await enrich(
        "Vitamin D3 5000 IU",
        category="supplement",
        brand="NOW Foods",
        existing_data={"serving_size": 1},
        api_key="test-key",
        on_progress=events.append,
    )

    assert result.success is True
    assert result.data["brand"] == "NOW Foods"
    assert result.data["price"] == 12.99
    assert result.data["dose_unit"] == "IU"
    assert result.field_confidence["brand"] == 0.95
    assert events[-1].step == "web_search_skipped"
    system, prompt = provider.calls[0]
    assert "supplement product data extraction" in system
    assert "Brand: NOW Foods" in prompt
    assert 'Existing Data: {"serving_size": 1}' in prompt


@pytest.mark.asyncio
async def test_enrich_batch_uses_one_pipeline(mocker, monkeypatch, completion_factory):
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    provider = completion_factory({"product": {"brand": "Acme"}})
    build_gemini = mocker.patch(
        "product_enricher.core._build_gemini_provider", return_value=provider
    )
    completed = []

    results = await enrich_batch(
        [BatchItem(index=0, name="Foam Roller"), BatchItem(index=1, name="Massage Gun")],
        category="equipment",
        api_key="test-key",
        on_item_complete=lambda index, result: completed.append(index),
    )

    assert completed == [0, 1]
    assert all(result.success for result in results.values())
    build_gemini.assert_called_once()
