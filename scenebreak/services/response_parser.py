"""Extract the breakdown JSON object from free-form model output."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .errors import ParseError
from .schemas import BreakdownPayload, validate_breakdown


def find_balanced_object(text: str) -> Optional[str]:
    """Return the leftmost balanced ``{...}`` substring of ``text``.

    Braces inside JSON string literals (including escaped quotes) do not count
    towards the nesting depth. An opening brace that is never closed is skipped
    and the scan resumes at the next ``{``. Returns ``None`` when no balanced
    object exists.
    """

    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        if end is not None:
            return text[start : end + 1]
        start = text.find("{", start + 1)
    return None


def _matching_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
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
                return index
    return None


def extract_json_object(raw_text: Optional[str]) -> Dict[str, Any]:
    text = raw_text or ""
    candidate = find_balanced_object(text)
    if candidate is None:
        raise ParseError("AI did not return valid JSON: no JSON object found in the response.", raw_text=text)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"AI did not return valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno}).",
            raw_text=text,
        ) from exc

    if not isinstance(data, dict):  # pragma: no cover - a balanced "{...}" always decodes to an object
        raise ParseError("AI did not return a JSON object.", raw_text=text)
    return data


def parse_breakdown(raw_text: Optional[str]) -> BreakdownPayload:
    """Turn raw model output into a validated :class:`BreakdownPayload`."""

    data = extract_json_object(raw_text)
    return validate_breakdown(data, raw_text=raw_text)
