"""Enrichment pipeline orchestrator.

Runs the stages of one enrichment strictly in order::

    scrape (optional) -> extract -> normalize -> evaluate
        -> fallback search (or skip) -> merge -> finalize

Progress is reported only through the `on_progress` callback, which is called
synchronously, in order, before each stage proceeds. `run` always returns an
`EnrichmentResult`; it never raises to the caller. An exception raised by the
callback aborts the run and is reported as `success=False`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from product_enricher.categories import CategorySchema, get_schema
from product_enricher.evaluator import evaluate_fields, is_found, missing_fields
from product_enricher.exceptions import UnknownCategoryError
from product_enricher.extractor import PrimaryExtractor, build_context
from product_enricher.fetcher import ContentFetcher
from product_enricher.merger import finalize_confidence, merge_fallback
from product_enricher.providers.base import BaseCompletionProvider, BaseSearchProvider
from product_enricher.schema import (
    EnrichmentRequest,
    EnrichmentResult,
    ExtractedRecord,
    FieldConfidenceMap,
    FieldStatus,
    ProgressEvent,
)
from product_enricher.searcher import FallbackSearcher, fields_to_search

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


def _ignore(event: ProgressEvent) -> None:
    return None


class EnrichmentPipeline:
    """Sequences fetch, extraction, evaluation and fallback for one product."""

    def __init__(
        self,
        completion_provider: BaseCompletionProvider,
        *,
        search_provider: BaseSearchProvider | None = None,
        fetcher: ContentFetcher | None = None,
        field_delay_sec: float = 0.0,
    ):
        """Initialize the pipeline.

        Args:
            completion_provider: Provider for the primary extraction pass.
            search_provider: Provider for fallback search. When None, fallback
                search is skipped with a `web_search_skipped` event.
            fetcher: Page fetcher. Defaults to a `ContentFetcher`.
            field_delay_sec: Pause between per-field events, for consumers
                that render the stream incrementally. Has no effect on results.
        """
        self.extractor = PrimaryExtractor(completion_provider)
        self.searcher = FallbackSearcher(search_provider) if search_provider else None
        self.fetcher = fetcher or ContentFetcher()
        self.field_delay_sec = field_delay_sec

    async def run(
        self,
        request: EnrichmentRequest,
        on_progress: ProgressCallback | None = None,
    ) -> EnrichmentResult:
        emit = on_progress or _ignore
        try:
            schema = get_schema(request.category)
        except UnknownCategoryError as exc:
            logger.warning("%s", exc)
            return EnrichmentResult(success=False, category=request.category, error=str(exc))

        try:
            return await self._run(schema, request, emit)
        except Exception as exc:
            logger.exception("enrichment failed for %r", request.product_name)
            return EnrichmentResult(
                success=False,
                category=schema.category.value,
                error=str(exc) or "Enrichment failed",
            )

    async def _run(
        self,
        schema: CategorySchema,
        request: EnrichmentRequest,
        emit: ProgressCallback,
    ) -> EnrichmentResult:
        page_content = await self._scrape(request, emit)

        emit(
            ProgressEvent(
                step="analyzing",
                message=f"AI analyzing {schema.category.value} data...",
                fields=[FieldStatus(key=name, status="pending") for name in schema.required_fields],
            )
        )
        outcome = await self.extractor.extract(schema, build_context(request, page_content))
        logger.info(
            "extraction for %r returned %d fields (parsed=%s)",
            request.product_name,
            len(outcome.record),
            outcome.parsed,
        )
        record = schema.normalize(outcome.record)
        confidence = dict(outcome.field_confidence)
        baseline = outcome.baseline_confidence

        evaluations = evaluate_fields(schema.required_fields, record, confidence, baseline)
        for item in evaluations:
            emit(
                ProgressEvent(
                    step="field_found" if item.found else "field_not_found",
                    field=item.field,
                    value=item.value if item.found else None,
                    confidence=item.confidence,
                    source="ai_analysis",
                )
            )
            await self._pace()

        missing = missing_fields(evaluations)
        total = len(schema.required_fields)
        emit(
            ProgressEvent(
                step="first_pass_done",
                message=f"Found {total - len(missing)}/{total} fields",
                product=dict(record),
                fields=[item.status() for item in evaluations],
                missing_fields=missing,
            )
        )
        logger.info(
            "first pass for %r: %d/%d fields found",
            request.product_name,
            total - len(missing),
            total,
        )

        if missing:
            if self.searcher is None:
                logger.warning("no search provider configured, skipping fallback search")
                emit(
                    ProgressEvent(
                        step="web_search_skipped",
                        message="No search API key - skipping web search",
                    )
                )
            else:
                record, confidence = await self._search_fallback(
                    schema, request, record, confidence, missing, emit
                )

        return EnrichmentResult(
            success=True,
            category=schema.category.value,
            data=record,
            field_confidence=finalize_confidence(schema, record, confidence, baseline),
        )

    async def _scrape(self, request: EnrichmentRequest, emit: ProgressCallback) -> str | None:
        if not request.product_url:
            return None

        logger.info("fetching %s", request.product_url)
        emit(ProgressEvent(step="scraping", message=f"Fetching {request.product_url}..."))
        result = await self.fetcher.fetch(request.product_url)
        if result.success and result.content:
            emit(
                ProgressEvent(
                    step="scraping_done",
                    message="URL scraped successfully",
                    content_length=len(result.content),
                )
            )
            return result.content

        emit(ProgressEvent(step="scraping_failed", message=result.error or "Could not fetch URL"))
        return None

    async def _search_fallback(
        self,
        schema: CategorySchema,
        request: EnrichmentRequest,
        record: ExtractedRecord,
        confidence: FieldConfidenceMap,
        missing: list[str],
        emit: ProgressCallback,
    ) -> tuple[ExtractedRecord, FieldConfidenceMap]:
        emit(
            ProgressEvent(
                step="web_search",
                message=f"Searching web for {len(missing)} missing fields...",
                missing_fields=missing,
            )
        )
        fields = fields_to_search(missing)
        logger.info("fallback search for %r: %s", request.product_name, ", ".join(fields))
        outcome = await self.searcher.search(schema, request, fields)
        if not outcome.success:
            emit(ProgressEvent(step="web_search_failed", message=outcome.error or "Web search failed"))
            return record, confidence

        merged = merge_fallback(schema, record, confidence, outcome.data, fields)
        for name in merged.updated_fields:
            value = merged.record.get(name)
            score = merged.field_confidence.get(name, 0.0)
            found = is_found(value, score)
            emit(
                ProgressEvent(
                    step="field_found" if found else "field_not_found",
                    field=name,
                    value=value if found else None,
                    confidence=score,
                    source="web_search",
                )
            )
            await self._pace()

        emit(
            ProgressEvent(
                step="web_search_done",
                message="Web search complete",
                product=dict(merged.record),
            )
        )
        return merged.record, merged.field_confidence

    async def _pace(self) -> None:
        if self.field_delay_sec > 0:
            await asyncio.sleep(self.field_delay_sec)
