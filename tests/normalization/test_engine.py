"""Tests for category normalizers."""

import pytest

from product_enricher import normalize_record
from product_enricher.exceptions import UnknownCategoryError
from product_enricher.normalization import (
    normalize_equipment,
    normalize_facial_product,
    normalize_supplement,
)


def test_supplement_moves_form_out_of_dose_unit():
    result = normalize_supplement({"dose_unit": "Capsules"})

    assert result["intake_form"] == "capsule"
    assert result["dose_unit"] is None


def test_supplement_keeps_existing_intake_form_when_correcting_unit():
    result = normalize_supplement({"dose_unit": "tablet", "intake_form": "Softgels"})

    assert result["intake_form"] == "softgel"
    assert result["dose_unit"] is None


def test_supplement_cfu_units():
    assert normalize_supplement({"dose_unit": "billion CFU"})["dose_unit"] == "CFU"
    assert normalize_supplement({"dose_unit": "AFU"})["dose_unit"] == "CFU"


def test_supplement_dose_unit_vocabulary():
    assert normalize_supplement({"dose_unit": "Milligrams"})["dose_unit"] == "mg"
    assert normalize_supplement({"dose_unit": "µg"})["dose_unit"] == "mcg"
    assert normalize_supplement({"dose_unit": "iu"})["dose_unit"] == "IU"
    assert normalize_supplement({"dose_unit": "scoops"})["dose_unit"] is None


def test_supplement_numeric_coercion():
    result = normalize_supplement(
        {
            "price": "$1,299.50",
            "servings_per_container": "60 servings",
            "serving_size": "2 capsules",
            "dose_per_serving": "5000",
        }
    )

    assert result["price"] == 1299.5
    assert result["servings_per_container"] == 60
    assert result["serving_size"] == 2
    assert result["dose_per_serving"] == 5000.0


def test_unparsable_numbers_become_none():
    result = normalize_supplement({"price": "call for price", "serving_size": ["2"]})

    assert result["price"] is None
    assert result["serving_size"] is None


def test_supplement_intake_form_from_phrase():
    assert normalize_supplement({"intake_form": "Delayed-release veggie capsules"})[
        "intake_form"
    ] == "capsule"
    assert normalize_supplement({"intake_form": "sachet"})["intake_form"] is None


def test_category_is_snake_case():
    assert normalize_supplement({"category": "Vitamin Mineral"})["category"] == "vitamin_mineral"
    assert normalize_equipment({"category": "Red Light  Therapy"})["category"] == "red_light_therapy"


def test_facial_units():
    assert normalize_facial_product({"size_unit": "FL OZ"})["size_unit"] == "oz"
    assert normalize_facial_product({"size_unit": "Milliliters"})["size_unit"] == "ml"
    assert normalize_facial_product({"size_unit": "grams"})["size_unit"] == "g"
    assert normalize_facial_product({"usage_unit": "pump"})["usage_unit"] == "pumps"
    assert normalize_facial_product({"usage_unit": "Drop"})["usage_unit"] == "drops"
    assert normalize_facial_product({"usage_unit": "pea size"})["usage_unit"] == "pea-sized"
    assert normalize_facial_product({"usage_unit": "scoop"})["usage_unit"] is None


def test_facial_key_ingredients_from_string():
    result = normalize_facial_product({"key_ingredients": "Niacinamide, Ceramides ,"})

    assert result["key_ingredients"] == ["Niacinamide", "Ceramides"]


def test_absent_fields_stay_absent():
    result = normalize_facial_product({"brand": " CeraVe "})

    assert result == {"brand": "CeraVe"}


def test_equipment_specs_and_model():
    result = normalize_equipment({"model": 360, "specs": "lots", "price": 199})

    assert result["model"] == "360"
    assert result["specs"] is None
    assert result["price"] == 199.0


def test_out_of_range_numbers_become_none():
    result = normalize_supplement(
        {
            "price": 10**400,
            "dose_per_serving": "9" * 400,
            "servings_per_container": "9" * 400,
            "serving_size": float("-inf"),
        }
    )

    assert result == {
        "price": None,
        "dose_per_serving": None,
        "servings_per_container": None,
        "serving_size": None,
    }


def test_non_dict_input_returns_empty_record():
    assert normalize_supplement(None) == {}
    assert normalize_equipment(["brand"]) == {}


def test_normalizer_does_not_mutate_input():
    raw = {"dose_unit": "capsule"}

    normalize_supplement(raw)

    assert raw == {"dose_unit": "capsule"}


def test_normalize_record_dispatches_by_category():
    assert normalize_record("supplement", {"dose_unit": "gummies"})["intake_form"] == "gummy"
    with pytest.raises(UnknownCategoryError):
        normalize_record("snack", {})


@pytest.mark.parametrize(
    ("normalize", "raw"),
    [
        (normalize_supplement, {"dose_unit": "capsule"}),
        (normalize_supplement, {"dose_unit": "Softgels", "intake_form": None}),
        (normalize_supplement, {"dose_unit": "gummies", "intake_form": "Tablets"}),
        (normalize_supplement, {"dose_unit": "50 Billion CFU", "price": "$24.99"}),
        (
            normalize_supplement,
            {"serving_size": "2.5", "servings_per_container": 30.0, "category": "Herb Botanical"},
        ),
        (normalize_supplement, {"brand": 42, "price": True, "dose_per_serving": float("nan")}),
        (normalize_facial_product, {"size_unit": "fl. oz.", "usage_unit": "pumps"}),
        (normalize_facial_product, {"usage_unit": "Pea-sized amount", "size_amount": "1.7 oz"}),
        (normalize_facial_product, {"application_form": "Cream Gel", "key_ingredients": ["  "]}),
        (normalize_equipment, {"category": "Sleep Tech", "price": "USD 1,049", "specs": {}}),
        (normalize_equipment, {"model": "  ", "purchase_url": "https://example.com/p"}),
        (normalize_supplement, {"price": "9" * 400, "servings_per_container": "9" * 400}),
        (normalize_supplement, {"price": 10**400, "serving_size": 10**400}),
        (normalize_facial_product, {"size_amount": "1e999", "usage_amount": float("inf")}),
    ],
)
def test_normalizers_are_idempotent(normalize, raw):
    once = normalize(raw)

    assert normalize(once) == once
