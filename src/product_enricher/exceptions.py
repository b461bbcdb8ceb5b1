"""Custom exceptions for product-enricher."""


class EnrichmentError(Exception):
    """Base exception for product-enricher."""

    pass


class AuthenticationError(EnrichmentError):
    """Raised when a provider API key is invalid or missing."""

    pass


class RateLimitError(EnrichmentError):
    """Raised when a provider rate limit or quota is exceeded."""

    pass


class ProviderError(EnrichmentError):
    """Raised when a provider call fails or returns an unusable body."""

    pass


class UnknownCategoryError(EnrichmentError):
    """Raised when no schema is registered for a product category."""

    pass


class JSONExtractionError(EnrichmentError):
    """Raised when no JSON object can be recovered from model output."""

    pass


class NoJSONFoundError(JSONExtractionError):
    """Raised when the text contains no balanced `{...}` span."""

    pass


class MalformedJSONError(JSONExtractionError):
    """Raised when the `{...}` span is not a valid JSON object."""

    pass
