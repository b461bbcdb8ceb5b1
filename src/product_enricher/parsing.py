"""Recover a JSON object embedded in free-form model output."""

from __future__ import annotations

import json
from typing import Any

from product_enricher.exceptions import MalformedJSONError, NoJSONFoundError


def find_json_span(text: str) -> str:
    """Return the first balanced `{...}` substring of `text`.

    Braces inside JSON string literals are ignored, so a value such as
    `"note": "use {n} drops"` does not end the span early. Markdown fences and
    surrounding prose are skipped.

    Raises:
        NoJSONFoundError: If `text` has no `{` or the first object never closes.
    """
    start = text.find("{")
    if start < 0:
        raise NoJSONFoundError("no '{' in response text")

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : pos + 1]

    raise NoJSONFoundError("unbalanced '{' in response text")


def extract_json_object(text: str | None) -> dict[str, Any]:
    """Parse the first balanced `{...}` span of `text` as a JSON object.

    Failure modes:
        NoJSONFoundError: empty text, no `{`, or no balanced close.
        MalformedJSONError: the span is not strict JSON, holds an integer
            beyond the interpreter's digit limit, or nests too deeply.
    """
    if not text:
        raise NoJSONFoundError("empty response text")

    span = find_json_span(text)
    try:
        value = json.loads(span)
    except (ValueError, RecursionError) as exc:
        raise MalformedJSONError(f"invalid JSON object: {exc}") from exc
    return value
