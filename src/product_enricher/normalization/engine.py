"""Category-specific normalization of extracted product records.

Every normalizer is pure and idempotent: it returns a new dict, leaves absent
keys absent, and turns anomalous values into `None` instead of raising.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable

from product_enricher.exceptions import UnknownCategoryError
from product_enricher.normalization.vocabulary import (
    DOSE_UNIT_ALIASES,
    INTAKE_FORM_ALIASES,
    INTAKE_FORMS,
    SIZE_UNIT_ALIASES,
    USAGE_UNIT_ALIASES,
)
from product_enricher.schema import ExtractedRecord, ProductCategory

Normalizer = Callable[[ExtractedRecord], ExtractedRecord]

_CURRENCY_CHARS = re.compile(r"[$€£¥,]")
_CURRENCY_PREFIX = re.compile(r"^(usd|us)\s*", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
_FORM_WORDS = sorted({*INTAKE_FORMS, *INTAKE_FORM_ALIASES}, key=len, reverse=True)
_FORM_PATTERN = re.compile(r"\b(" + "|".join(re.escape(word) for word in _FORM_WORDS) + r")\b")


def normalize_supplement(raw: ExtractedRecord | None) -> ExtractedRecord:
    data = _copy(raw)
    _apply(data, ("brand", "purchase_url"), _clean_text)

    # Dosage forms are often returned as the dose unit ("capsule"); move them over.
    if "dose_unit" in data:
        unit = _clean_text(data["dose_unit"])
        misplaced_form = _exact_intake_form(unit)
        if misplaced_form:
            if not _clean_text(data.get("intake_form")):
                data["intake_form"] = misplaced_form
            data["dose_unit"] = None
        else:
            data["dose_unit"] = _dose_unit(unit)

    _apply(data, ("intake_form",), _intake_form)
    _apply(data, ("category",), _snake_case)
    _apply(data, ("price", "dose_per_serving"), _to_float)
    _apply(data, ("servings_per_container", "serving_size"), _to_int)
    return data


def normalize_facial_product(raw: ExtractedRecord | None) -> ExtractedRecord:
    data = _copy(raw)
    _apply(data, ("brand", "purchase_url"), _clean_text)
    _apply(data, ("application_form", "category"), _snake_case)
    _apply(data, ("size_unit",), _size_unit)
    _apply(data, ("usage_unit",), _usage_unit)
    _apply(data, ("price", "size_amount", "usage_amount"), _to_float)
    _apply(data, ("key_ingredients",), _text_list)
    return data


def normalize_equipment(raw: ExtractedRecord | None) -> ExtractedRecord:
    data = _copy(raw)
    _apply(data, ("brand", "model", "purchase_url"), _clean_text)
    _apply(data, ("category",), _snake_case)
    _apply(data, ("price",), _to_float)
    _apply(data, ("specs",), lambda value: value if isinstance(value, dict) and value else None)
    return data


_NORMALIZERS: dict[ProductCategory, Normalizer] = {
    ProductCategory.SUPPLEMENT: normalize_supplement,
    ProductCategory.FACIAL_PRODUCT: normalize_facial_product,
    ProductCategory.EQUIPMENT: normalize_equipment,
}


def normalize_record(category: str | ProductCategory, raw: ExtractedRecord | None) -> ExtractedRecord:
    """Normalize `raw` with the rules registered for `category`."""
    try:
        normalizer = _NORMALIZERS[ProductCategory(category)]
    except ValueError as exc:
        raise UnknownCategoryError(f"Unknown product category: {category}") from exc
    return normalizer(raw)


def _copy(raw: Any) -> ExtractedRecord:
    if not isinstance(raw, dict):
        return {}
    return dict(raw)


def _apply(data: ExtractedRecord, fields: tuple[str, ...], fn: Callable[[Any], Any]) -> None:
    for field in fields:
        if field in data:
            data[field] = fn(data[field])


def _clean_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _snake_case(value: Any) -> str | None:
    text = _clean_text(value)
    if text is None:
        return None
    return re.sub(r"\s+", "_", text.lower())


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = _CURRENCY_PREFIX.sub("", _CURRENCY_CHARS.sub("", value).strip())
        match = _LEADING_NUMBER.match(text)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _to_float(value)
    return int(number) if number is not None else None


def _exact_intake_form(text: str | None) -> str | None:
    if text is None:
        return None
    lowered = text.lower()
    if lowered in INTAKE_FORMS:
        return lowered
    return INTAKE_FORM_ALIASES.get(lowered)


def _intake_form(value: Any) -> str | None:
    text = _clean_text(value)
    if text is None:
        return None
    exact = _exact_intake_form(text)
    if exact:
        return exact
    match = _FORM_PATTERN.search(text.lower())
    if not match:
        return None
    return _exact_intake_form(match.group(1))


def _dose_unit(text: str | None) -> str | None:
    if text is None:
        return None
    lowered = text.lower()
    if "cfu" in lowered or "afu" in lowered:
        return "CFU"
    return DOSE_UNIT_ALIASES.get(lowered)


def _size_unit(value: Any) -> str | None:
    text = _clean_text(value)
    if text is None:
        return None
    lowered = text.lower().rstrip(".")
    if "fl" in lowered and "oz" in lowered:
        return "oz"
    return SIZE_UNIT_ALIASES.get(lowered)


def _usage_unit(value: Any) -> str | None:
    text = _clean_text(value)
    if text is None:
        return None
    lowered = text.lower()
    if lowered in USAGE_UNIT_ALIASES:
        return USAGE_UNIT_ALIASES[lowered]
    return USAGE_UNIT_ALIASES.get(lowered.removesuffix("s"))


def _text_list(value: Any) -> list[str] | None:
    if isinstance(value, str):
        value = re.split(r"[,;\n]", value)
    if not isinstance(value, list):
        return None
    items = [text for text in (_clean_text(item) for item in value) if text]
    return items or None
