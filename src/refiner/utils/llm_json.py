from __future__ import annotations

import json
import re
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from refiner.domain.errors import ParseError

_FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")

_KEYWORDS = TypeAdapter(list[str])
_DECODER = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    """Remove surrounding ```...``` fences (with or without a language tag)."""
    t = text.strip()
    if t.startswith("```") and t.endswith("```"):
        t = _FENCE_OPEN_RE.sub("", t)
        t = _FENCE_CLOSE_RE.sub("", t)
    return t.strip()


def first_json_array(text: str) -> Optional[list[Any]]:
    """
    Return the first JSON array embedded in `text`, or None.

    Tries every '[' in turn and decodes from there, so brackets inside
    surrounding prose do not derail the search.
    """
    start = text.find("[")
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, list):
                return value
        start = text.find("[", start + 1)
    return None


def parse_keyword_array(text: Optional[str]) -> list[str]:
    """
    Extract a list of keywords from a language model reply.

    Direct JSON parse first; if that fails or is not an array, fall back to
    the first bracketed array in the text. Entries are stripped and blanks
    dropped.

    Raises:
        ParseError: no array of strings could be recovered. Carries the raw text.
    """
    if text is None or not text.strip():
        raise ParseError("Empty response from model", raw_text=text or "")

    body = strip_code_fences(text)
    data: Any = None
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        pass

    if not isinstance(data, list):
        data = first_json_array(body)
    if data is None:
        raise ParseError("Failed to parse keywords from response", raw_text=text)

    try:
        keywords = _KEYWORDS.validate_python(data)
    except ValidationError as e:
        raise ParseError("Expected a JSON array of strings", raw_text=text) from e

    return [k.strip() for k in keywords if k.strip()]
