"""Field schema registry: required fields, prompts and normalizers per category."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from pydantic import BaseModel

from product_enricher.exceptions import UnknownCategoryError
from product_enricher.normalization import (
    Normalizer,
    normalize_equipment,
    normalize_facial_product,
    normalize_supplement,
)
from product_enricher.schema import (
    EquipmentRecord,
    FacialProductRecord,
    ProductCategory,
    SupplementRecord,
)

PURCHASE_URL_FIELD = "purchase_url"
PRICE_FIELD = "price"

_RESPONSE_FORMAT = (
    'Return JSON with a "product" object containing these fields and a '
    '"field_confidence" object (0-1 for each field).'
)

SUPPLEMENT_PROMPT = f"""You are a supplement product data extraction assistant. Given product information (name, URL content, etc.), extract these fields:
- brand: The brand/manufacturer name
- price: The price in USD (number only, no currency symbol)
- servings_per_container: Total number of servings in the container
- serving_size: How many units per serving (e.g., "2 capsules" means serving_size=2)
- intake_form: One of: capsule, tablet, softgel, gummy, powder, liquid, spray, patch
- dose_per_serving: The dosage amount per serving (number only)
- dose_unit: One of: mg, g, mcg, IU, ml, CFU
- category: One of: vitamin_mineral, amino_protein, herb_botanical, probiotic, other
- purchase_url: Amazon or retailer URL if found

IMPORTANT: Extract price and size from the page content. Look for:
- Price patterns: "$XX.XX", "Price: $XX", etc.
- Size patterns: "XX Count", "XX Capsules", "XX Servings"

{_RESPONSE_FORMAT}"""

FACIAL_PRODUCT_PROMPT = f"""You are a skincare/facial product data extraction assistant. Given product information (name, URL content, etc.), extract these fields:
- brand: The brand/manufacturer name
- price: The price in USD (number only, no currency symbol)
- size_amount: The product size as a number (e.g., 200 for "200ml")
- size_unit: One of: ml, oz, g
- application_form: One of: cream, gel, oil, liquid, foam
- category: One of: cleanser, toner, serum, moisturizer, sunscreen, other
- usage_amount: Amount per application (number). ALWAYS provide a value - use typical amounts if not explicitly stated:
  * Serums/oils: 2-3 drops
  * Toners/essences: 1-2 ml or 2-3 pumps
  * Cleansers: 1-2 pumps or pea-sized amount (use 1)
  * Moisturizers/creams: pea-sized amount (use 1)
  * Sunscreens: 2 finger lengths worth (~1 ml)
- usage_unit: One of: ml, pumps, drops, pea-sized. Match to product type:
  * Serums/oils with droppers: drops
  * Pump bottles: pumps
  * Tubes/jars (creams): pea-sized
  * Liquids: ml
- purchase_url: Amazon or retailer URL if found
- key_ingredients: Array of key active ingredients if found

IMPORTANT:
- Extract price and size from the page content
- ALWAYS provide usage_amount and usage_unit - estimate based on product type if not explicitly stated
- Price patterns: "$XX.XX", "Price: $XX", etc.
- Size patterns: "XX ml", "XX oz", "XX g", "XX FL OZ"

{_RESPONSE_FORMAT}"""

EQUIPMENT_PROMPT = f"""You are a health equipment/device data extraction assistant. Given product information (name, URL content, etc.), extract these fields:
- brand: The brand/manufacturer name
- model: The model name/number
- price: The price in USD (number only, no currency symbol)
- category: One of: lllt, microneedling, sleep, skincare, recovery, other
- purchase_url: Amazon or retailer URL if found
- specs: Object with key specifications

IMPORTANT: Extract price from the page content. Look for:
- Price patterns: "$XX.XX", "Price: $XX", etc.

{_RESPONSE_FORMAT}"""


@dataclass(frozen=True)
class CategorySchema:
    category: ProductCategory
    required_fields: tuple[str, ...]
    auxiliary_fields: tuple[str, ...]
    extraction_instructions: str
    normalize: Normalizer
    record_model: type[BaseModel]
    label: str

    @property
    def known_fields(self) -> tuple[str, ...]:
        return self.required_fields + self.auxiliary_fields


SCHEMAS: MappingProxyType[ProductCategory, CategorySchema] = MappingProxyType(
    {
        ProductCategory.SUPPLEMENT: CategorySchema(
            category=ProductCategory.SUPPLEMENT,
            required_fields=(
                "brand",
                "price",
                "servings_per_container",
                "serving_size",
                "intake_form",
                "dose_per_serving",
                "dose_unit",
                "category",
            ),
            auxiliary_fields=(PURCHASE_URL_FIELD,),
            extraction_instructions=SUPPLEMENT_PROMPT,
            normalize=normalize_supplement,
            record_model=SupplementRecord,
            label="supplement",
        ),
        ProductCategory.FACIAL_PRODUCT: CategorySchema(
            category=ProductCategory.FACIAL_PRODUCT,
            required_fields=(
                "brand",
                "price",
                "size_amount",
                "size_unit",
                "application_form",
                "category",
                "usage_amount",
                "usage_unit",
            ),
            auxiliary_fields=(PURCHASE_URL_FIELD, "key_ingredients"),
            extraction_instructions=FACIAL_PRODUCT_PROMPT,
            normalize=normalize_facial_product,
            record_model=FacialProductRecord,
            label="skincare product",
        ),
        ProductCategory.EQUIPMENT: CategorySchema(
            category=ProductCategory.EQUIPMENT,
            required_fields=("brand", "price", "category"),
            auxiliary_fields=("model", "specs", PURCHASE_URL_FIELD),
            extraction_instructions=EQUIPMENT_PROMPT,
            normalize=normalize_equipment,
            record_model=EquipmentRecord,
            label="equipment",
        ),
    }
)


def get_schema(category: str | ProductCategory) -> CategorySchema:
    """Look up the schema for `category`.

    Raises:
        UnknownCategoryError: If the category has no registered schema.
    """
    try:
        return SCHEMAS[ProductCategory(category)]
    except (ValueError, KeyError) as exc:
        raise UnknownCategoryError(f"Unknown product category: {category}") from exc
