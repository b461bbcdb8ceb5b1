"""Command-line interface for product-enricher."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from product_enricher import __version__
from product_enricher.core import enrich
from product_enricher.exceptions import EnrichmentError
from product_enricher.schema import EnrichmentResult, ProductCategory, ProgressEvent


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="product-enrich",
        description="Enrich a product reference into structured, confidence-scored data",
    )
    parser.add_argument("name", help="Product name")
    parser.add_argument(
        "--category",
        required=True,
        choices=[category.value for category in ProductCategory],
        help="Product category",
    )
    parser.add_argument("--brand", help="Brand name")
    parser.add_argument("--url", help="Product page URL to scrape")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--api-key",
        help="Gemini API key (default: GEMINI_API_KEY env var)",
    )
    parser.add_argument(
        "--search-api-key",
        help="Perplexity API key (default: PERPLEXITY_API_KEY env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"product-enrich {__version__}",
    )

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    on_progress = None if args.json else _print_event
    try:
        result = asyncio.run(
            enrich(
                args.name,
                category=args.category,
                brand=args.brand,
                url=args.url,
                api_key=args.api_key,
                search_api_key=args.search_api_key,
                on_progress=on_progress,
            )
        )
    except (EnrichmentError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(result.model_dump_json(indent=2, exclude_none=True))
    elif result.success:
        _print_formatted(result)
    else:
        print(f"Error: {result.error}", file=sys.stderr)

    return 0 if result.success else 1


def _print_event(event: ProgressEvent) -> None:
    """Print one progress event as a single line."""
    if event.field:
        marker = "+" if event.step == "field_found" else "-"
        confidence = f"{event.confidence:.2f}" if event.confidence is not None else "-"
        value = event.value if event.value is not None else ""
        print(f"  {marker} {event.field:<24} {confidence:>5}  {value}  ({event.source})")
    elif event.message:
        print(f"[{event.step}] {event.message}")


def _print_formatted(result: EnrichmentResult) -> None:
    """Print result in human-readable format."""
    record = result.to_record()
    confidence = result.field_confidence or {}
    print()
    print("  product-enrich")
    print()
    for name, value in record.model_dump(exclude_none=True).items():
        score = confidence.get(name)
        display = ", ".join(value) if isinstance(value, list) else value
        suffix = f"  ({score:.2f})" if score is not None else ""
        print(f"  {name + ':':<24} {display}{suffix}")
    print()


if __name__ == "__main__":
    sys.exit(main())
