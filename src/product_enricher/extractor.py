"""Primary extraction pass: one completion call over product identity and page text."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from product_enricher.categories import CategorySchema
from product_enricher.exceptions import JSONExtractionError
from product_enricher.parsing import extract_json_object
from product_enricher.providers.base import BaseCompletionProvider
from product_enricher.schema import EnrichmentRequest, ExtractedRecord, FieldConfidenceMap

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_CONFIDENCE = 0.8
_BOOKKEEPING_KEYS = ("field_confidence", "confidence", "product", "products")


@dataclass
class ExtractionOutcome:
    record: ExtractedRecord = field(default_factory=dict)
    field_confidence: FieldConfidenceMap = field(default_factory=dict)
    baseline_confidence: float = DEFAULT_BASELINE_CONFIDENCE
    parsed: bool = False


def build_context(request: EnrichmentRequest, page_content: str | None = None) -> str:
    lines = [f"Product Name: {request.product_name}"]
    if request.brand:
        lines.append(f"Brand: {request.brand}")
    if request.product_url:
        lines.append(f"Product URL: {request.product_url}")
    if request.existing_data:
        lines.append(f"Existing Data: {json.dumps(request.existing_data, default=str)}")
    context = "\n".join(lines)
    if page_content:
        context += (
            "\n\n--- Product Page Content ---\n"
            f"{page_content}\n"
            "--- End Product Page ---\n"
        )
    return context


def coerce_confidence(value: Any) -> float | None:
    """Return `value` as a score clamped to [0, 1], or None if not numeric."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        score = float(value)
    except ValueError:
        return None
    if math.isnan(score):
        return None
    return max(0.0, min(1.0, score))


def parse_extraction(payload: dict[str, Any]) -> ExtractionOutcome:
    """Split a parsed model payload into record, confidence map and baseline."""
    product = payload.get("product")
    if not isinstance(product, dict):
        products = payload.get("products")
        if isinstance(products, list) and products and isinstance(products[0], dict):
            product = products[0]
        else:
            product = payload

    raw_confidence = payload.get("field_confidence")
    if not isinstance(raw_confidence, dict):
        raw_confidence = product.get("field_confidence")
    field_confidence: FieldConfidenceMap = {}
    if isinstance(raw_confidence, dict):
        for name, value in raw_confidence.items():
            score = coerce_confidence(value)
            if score is not None:
                field_confidence[str(name)] = score

    baseline = coerce_confidence(product.get("confidence"))
    if baseline is None:
        baseline = coerce_confidence(payload.get("confidence"))
    if baseline is None:
        baseline = DEFAULT_BASELINE_CONFIDENCE

    record = {key: value for key, value in product.items() if key not in _BOOKKEEPING_KEYS}
    return ExtractionOutcome(
        record=record,
        field_confidence=field_confidence,
        baseline_confidence=baseline,
        parsed=True,
    )


class PrimaryExtractor:
    """Runs the category prompt through the completion provider."""

    def __init__(self, provider: BaseCompletionProvider):
        self.provider = provider

    async def extract(self, schema: CategorySchema, context: str) -> ExtractionOutcome:
        """Extract a raw record for `schema` from `context`.

        Keys outside the schema's required and auxiliary fields are dropped,
        so every field in the record can carry a confidence score. An
        unparsable response yields an empty, unparsed outcome. Provider
        exceptions propagate.
        """
        prompt = (
            f"Extract product information from the following:\n\n{context}\n\n"
            'Return JSON with "product" object and "field_confidence" object.'
        )
        text = await self.provider.complete(schema.extraction_instructions, prompt)
        try:
            payload = extract_json_object(text)
        except JSONExtractionError as exc:
            logger.warning("could not parse extraction response: %s", exc)
            return ExtractionOutcome()
        outcome = parse_extraction(payload)
        dropped = sorted(set(outcome.record).difference(schema.known_fields))
        if dropped:
            logger.debug("dropping unknown %s fields: %s", schema.category.value, dropped)
        outcome.record = {
            name: value for name, value in outcome.record.items() if name in schema.known_fields
        }
        return outcome
