"""Data models for product-enricher."""

from enum import Enum
from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

ExtractedRecord = dict[str, Any]
FieldConfidenceMap = dict[str, float]

ProgressStep = Literal[
    "scraping",
    "scraping_done",
    "scraping_failed",
    "analyzing",
    "field_found",
    "field_not_found",
    "first_pass_done",
    "web_search",
    "web_search_done",
    "web_search_failed",
    "web_search_skipped",
]
FieldSource = Literal["ai_analysis", "web_search"]


class ProductCategory(str, Enum):
    """Product types with a registered extraction schema."""

    SUPPLEMENT = "supplement"
    FACIAL_PRODUCT = "facial_product"
    EQUIPMENT = "equipment"


class EnrichmentRequest(BaseModel):
    """A sparse product reference to enrich.

    `category` is kept as a plain string so that an unrecognized value reaches
    the pipeline and fails there instead of at construction time.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str = Field(min_length=1)
    brand: str | None = None
    product_url: str | None = None
    category: str
    existing_data: dict[str, Any] | None = None

    @field_validator("product_name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("product_name must not be blank")
        return value

    @field_validator("brand", mode="before")
    @classmethod
    def _blank_brand_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("product_url")
    @classmethod
    def _url_well_formed(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"product_url is not a well-formed http(s) URL: {value}")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _category_value(cls, value: Any) -> Any:
        if isinstance(value, ProductCategory):
            return value.value
        return value


class FieldStatus(BaseModel):
    """Per-field status carried by `analyzing` and `first_pass_done` events."""

    key: str
    status: Literal["pending", "found", "missing"]
    confidence: float | None = None


class ProgressEvent(BaseModel):
    """One pipeline milestone delivered to the progress sink."""

    step: ProgressStep
    message: str | None = None
    field: str | None = None
    value: Any = None
    confidence: float | None = None
    source: FieldSource | None = None
    product: ExtractedRecord | None = None
    fields: list[FieldStatus] | None = None
    missing_fields: list[str] | None = None
    content_length: int | None = None
    index: int | None = None


class EnrichmentResult(BaseModel):
    """Terminal value of one pipeline run."""

    success: bool
    category: str | None = None
    data: ExtractedRecord | None = None
    field_confidence: FieldConfidenceMap | None = None
    error: str | None = None

    def to_record(self) -> BaseModel | None:
        """Return `data` validated against the category's typed record."""
        if not self.success or self.data is None or self.category is None:
            return None
        from product_enricher.categories import get_schema

        return get_schema(self.category).record_model.model_validate(self.data)


class BatchItem(BaseModel):
    """One entry of a batch run; `category` overrides the batch default."""

    index: int
    name: str
    brand: str | None = None
    url: str | None = None
    category: str | None = None


class _ProductRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    brand: str | None = None
    price: float | None = None
    category: str | None = None
    purchase_url: str | None = None


class SupplementRecord(_ProductRecord):
    """Normalized supplement fields."""

    servings_per_container: int | None = None
    serving_size: int | None = None
    intake_form: str | None = None
    dose_per_serving: float | None = None
    dose_unit: str | None = None


class FacialProductRecord(_ProductRecord):
    """Normalized skincare/facial product fields."""

    size_amount: float | None = None
    size_unit: str | None = None
    application_form: str | None = None
    usage_amount: float | None = None
    usage_unit: str | None = None
    key_ingredients: list[str] | None = None


class EquipmentRecord(_ProductRecord):
    """Normalized health equipment fields."""

    model: str | None = None
    specs: dict[str, Any] | None = None
