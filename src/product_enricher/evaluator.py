"""Confidence evaluation of required fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from product_enricher.schema import ExtractedRecord, FieldConfidenceMap, FieldStatus

FOUND_THRESHOLD = 0.5


@dataclass(frozen=True)
class FieldEvaluation:
    field: str
    value: Any
    confidence: float
    found: bool

    def status(self) -> FieldStatus:
        return FieldStatus(
            key=self.field,
            status="found" if self.found else "missing",
            confidence=self.confidence,
        )


def has_value(value: Any) -> bool:
    """True unless `value` is None, blank text or an empty container."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return bool(value)
    return True


def effective_confidence(
    field: str,
    record: ExtractedRecord,
    field_confidence: FieldConfidenceMap,
    baseline: float,
) -> float:
    if field in field_confidence and field_confidence[field] is not None:
        return field_confidence[field]
    return baseline if has_value(record.get(field)) else 0.0


def is_found(value: Any, confidence: float) -> bool:
    return has_value(value) and confidence >= FOUND_THRESHOLD


def evaluate_fields(
    fields: Iterable[str],
    record: ExtractedRecord,
    field_confidence: FieldConfidenceMap,
    baseline: float,
) -> list[FieldEvaluation]:
    """Classify each field in declared order as found or missing."""
    evaluations = []
    for field in fields:
        value = record.get(field)
        confidence = effective_confidence(field, record, field_confidence, baseline)
        evaluations.append(
            FieldEvaluation(
                field=field,
                value=value,
                confidence=confidence,
                found=is_found(value, confidence),
            )
        )
    return evaluations


def missing_fields(evaluations: Iterable[FieldEvaluation]) -> list[str]:
    return [item.field for item in evaluations if not item.found]
