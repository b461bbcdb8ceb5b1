"""Overlay fallback answers onto the primary record and finalize confidence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from product_enricher.categories import PURCHASE_URL_FIELD, CategorySchema
from product_enricher.evaluator import has_value
from product_enricher.extractor import coerce_confidence
from product_enricher.schema import ExtractedRecord, FieldConfidenceMap

DEFAULT_FALLBACK_CONFIDENCE = 0.9
SOURCE_URL_KEY = "source_url"


@dataclass
class MergeResult:
    record: ExtractedRecord
    field_confidence: FieldConfidenceMap
    updated_fields: list[str] = field(default_factory=list)


def fallback_confidence(answer: dict[str, Any]) -> float:
    score = coerce_confidence(answer.get("confidence"))
    return DEFAULT_FALLBACK_CONFIDENCE if score is None else score


def merge_fallback(
    schema: CategorySchema,
    record: ExtractedRecord,
    field_confidence: FieldConfidenceMap,
    answer: dict[str, Any],
    fields: Sequence[str],
) -> MergeResult:
    """Fill `fields` from `answer`, then re-normalize.

    Only the searched fields are written, so values the primary pass found
    confidently stay untouched. The purchase link is adopted from
    `source_url` only when the record has none.
    """
    merged = dict(record)
    confidence = dict(field_confidence)
    score = fallback_confidence(answer)
    updated: list[str] = []

    for name in fields:
        value = answer.get(name)
        if has_value(value):
            merged[name] = value
            confidence[name] = score
            updated.append(name)

    source_url = answer.get(SOURCE_URL_KEY)
    if has_value(source_url) and not has_value(merged.get(PURCHASE_URL_FIELD)):
        merged[PURCHASE_URL_FIELD] = source_url
        confidence[PURCHASE_URL_FIELD] = score
        updated.append(PURCHASE_URL_FIELD)

    return MergeResult(
        record=schema.normalize(merged),
        field_confidence=confidence,
        updated_fields=updated,
    )


def finalize_confidence(
    schema: CategorySchema,
    record: ExtractedRecord,
    field_confidence: FieldConfidenceMap,
    baseline: float,
) -> FieldConfidenceMap:
    """Restrict scores to known fields and give every filled field a score."""
    known = schema.known_fields
    final = {name: score for name, score in field_confidence.items() if name in known}
    for name in known:
        if name not in final and has_value(record.get(name)):
            final[name] = baseline
    return final
