"""Tests for merging fallback answers."""

from product_enricher import get_schema
from product_enricher.merger import finalize_confidence, merge_fallback


def test_only_searched_fields_are_written():
    schema = get_schema("supplement")

    merged = merge_fallback(
        schema,
        {"brand": "Thorne", "price": 20.0},
        {"brand": 0.95, "price": 0.9},
        {"brand": "Other", "price": "$22.50", "serving_size": "2", "confidence": 0.7},
        ["price", "serving_size"],
    )

    assert merged.record["brand"] == "Thorne"
    assert merged.record["price"] == 22.5
    assert merged.record["serving_size"] == 2
    assert merged.field_confidence == {"brand": 0.95, "price": 0.7, "serving_size": 0.7}
    assert merged.updated_fields == ["price", "serving_size"]


def test_empty_answer_values_are_ignored():
    schema = get_schema("equipment")

    merged = merge_fallback(schema, {}, {}, {"price": None, "category": ""}, ["price", "category"])

    assert merged.record == {}
    assert merged.updated_fields == []


def test_source_url_fills_missing_purchase_url_with_default_confidence():
    schema = get_schema("equipment")

    merged = merge_fallback(schema, {"purchase_url": ""}, {}, {"source_url": "http://x"}, ["price"])

    assert merged.record["purchase_url"] == "http://x"
    assert merged.field_confidence["purchase_url"] == 0.9


def test_merge_renormalizes_record():
    schema = get_schema("supplement")

    merged = merge_fallback(schema, {"intake_form": None}, {}, {"dose_unit": "softgels"}, ["dose_unit"])

    assert merged.record["intake_form"] == "softgel"
    assert merged.record["dose_unit"] is None


def test_merge_does_not_mutate_inputs():
    schema = get_schema("equipment")
    record = {"brand": "Acme"}
    confidence = {"brand": 0.9}

    merge_fallback(schema, record, confidence, {"price": 10}, ["price"])

    assert record == {"brand": "Acme"}
    assert confidence == {"brand": 0.9}


def test_finalize_confidence():
    schema = get_schema("equipment")

    final = finalize_confidence(
        schema,
        {"brand": "Acme", "model": "X1", "price": None, "color": "red"},
        {"price": 0.2, "color": 0.9},
        0.8,
    )

    assert final == {"price": 0.2, "brand": 0.8, "model": 0.8}
