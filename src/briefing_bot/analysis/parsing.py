"""JSON extraction from LLM responses."""

import json
import re

from briefing_bot.errors import AnalysisMalformedError

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence markers, keeping their content."""
    return _FENCE.sub("", text)


def _first_object_span(text: str) -> str | None:
    start = text.find("{")
    if start == -1:
        return None

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
    return None


def extract_json_object(text: str | None) -> dict:
    """Parse the first balanced JSON object in an LLM response.

    Args:
        text: Raw response text, possibly wrapped in code fences or prose.

    Returns:
        The parsed object.

    Raises:
        AnalysisMalformedError: If the text is empty, holds no balanced
            object, or the object is not valid JSON.
    """
    if not text or not text.strip():
        raise AnalysisMalformedError("Empty response")

    span = _first_object_span(strip_code_fences(text))
    if span is None:
        raise AnalysisMalformedError("No JSON object found in response")

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise AnalysisMalformedError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AnalysisMalformedError("Response JSON is not an object")
    return data
