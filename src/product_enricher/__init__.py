"""product-enricher: Turn sparse product references into confidence-scored records."""

from product_enricher.batch import BatchRunner
from product_enricher.categories import get_schema
from product_enricher.core import build_pipeline, enrich, enrich_batch
from product_enricher.normalization import normalize_record
from product_enricher.pipeline import EnrichmentPipeline
from product_enricher.schema import (
    BatchItem,
    EnrichmentRequest,
    EnrichmentResult,
    ProductCategory,
    ProgressEvent,
)

__version__ = "0.1.0"

__all__ = [
    "enrich",
    "enrich_batch",
    "build_pipeline",
    "normalize_record",
    "get_schema",
    "EnrichmentPipeline",
    "BatchRunner",
    "BatchItem",
    "EnrichmentRequest",
    "EnrichmentResult",
    "ProductCategory",
    "ProgressEvent",
    "__version__",
]
