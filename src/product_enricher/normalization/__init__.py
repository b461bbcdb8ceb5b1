"""Normalization utilities for product-enricher."""

from product_enricher.normalization.engine import (
    Normalizer,
    normalize_equipment,
    normalize_facial_product,
    normalize_record,
    normalize_supplement,
)

__all__ = [
    "Normalizer",
    "normalize_equipment",
    "normalize_facial_product",
    "normalize_record",
    "normalize_supplement",
]
