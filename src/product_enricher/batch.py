"""Sequential batch enrichment."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from pydantic import ValidationError

from product_enricher.pipeline import EnrichmentPipeline
from product_enricher.schema import (
    BatchItem,
    EnrichmentRequest,
    EnrichmentResult,
    ProductCategory,
    ProgressEvent,
)

logger = logging.getLogger(__name__)

ItemProgressCallback = Callable[[int, ProgressEvent], None]
ItemCompleteCallback = Callable[[int, EnrichmentResult], None]


class BatchRunner:
    """Runs the pipeline over items one at a time.

    Items are never run concurrently, which keeps the load on the completion
    and search providers bounded. A failing item yields a `success=False`
    result for its index and the batch moves on.
    """

    def __init__(self, pipeline: EnrichmentPipeline, category: str | ProductCategory):
        self.pipeline = pipeline
        self.category = category.value if isinstance(category, ProductCategory) else category

    async def run(
        self,
        items: Iterable[BatchItem],
        on_item_progress: ItemProgressCallback | None = None,
        on_item_complete: ItemCompleteCallback | None = None,
    ) -> dict[int, EnrichmentResult]:
        results: dict[int, EnrichmentResult] = {}
        for item in items:
            result = await self._run_item(item, on_item_progress)
            results[item.index] = result
            if on_item_complete is not None:
                on_item_complete(item.index, result)
        succeeded = sum(1 for result in results.values() if result.success)
        logger.info("batch finished: %d/%d items succeeded", succeeded, len(results))
        return results

    async def _run_item(
        self,
        item: BatchItem,
        on_item_progress: ItemProgressCallback | None,
    ) -> EnrichmentResult:
        category = item.category or self.category
        try:
            request = EnrichmentRequest(
                product_name=item.name,
                brand=item.brand,
                product_url=item.url,
                category=category,
            )
        except ValidationError as exc:
            logger.warning("batch item %d rejected: %s", item.index, exc)
            return EnrichmentResult(
                success=False,
                category=category,
                error=f"Invalid product reference: {exc.errors()[0]['msg']}",
            )

        def forward(event: ProgressEvent) -> None:
            if on_item_progress is not None:
                on_item_progress(item.index, event.model_copy(update={"index": item.index}))

        return await self.pipeline.run(request, forward)
