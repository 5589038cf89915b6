"""
Input validation and normalization for JSON request bodies.

Trims and bounds field lengths, strips control characters from the question
while keeping any script (farmers write in Hindi as well as English), and
builds a clean AdviceContext for the advice engine.
"""

from __future__ import annotations
import re
from typing import Any, Dict, Optional, Tuple

from ..models import AdviceContext, WeatherSnapshot

MAX_QUERY_LEN = 1200
MAX_LOCATION_LEN = 80
MAX_CROP_LEN = 80

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
# Keep word characters, the whole Devanagari block (vowel signs are not \w), spaces and place-name punctuation
_UNSAFE_NAME_CHARS = re.compile(r"[^\w\s\-\.,'()/&\u0900-\u097F]+", re.UNICODE)


def _soft_sanitize(text: Any, max_len: int) -> str:
    """
    Normalizes names/locations:
    - strip whitespace
    - bound length
    - remove disallowed characters
    - collapse double spaces
    """
    if not isinstance(text, str):
        return ""
    t = text.strip()[:max_len]
    t = _UNSAFE_NAME_CHARS.sub("", t)
    t = re.sub(r"\s{2,}", " ", t)
    return t.strip()


def _soft_sanitize_question(text: Any) -> str:
    """
    Question field is a bit more permissive:
    - strip whitespace
    - remove control chars only; keep reasonable punctuation
    - normalize repeated tabs/spaces
    Length is checked by the caller so overlong questions are rejected, not cut.
    """
    if not isinstance(text, str):
        return ""
    t = _CONTROL_CHARS.sub("", text.strip())
    t = re.sub(r"[ \t]{2,}", " ", t)
    return t.strip()


def _location_name(raw: Any) -> Tuple[str, str]:
    """Location may be a plain string or {"name": .., "country": ..}."""
    if isinstance(raw, dict):
        return (
            _soft_sanitize(raw.get("name"), MAX_LOCATION_LEN),
            _soft_sanitize(raw.get("country"), MAX_LOCATION_LEN),
        )
    return _soft_sanitize(raw, MAX_LOCATION_LEN), ""


def validate_advice_payload(data: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], str | None]:
    """
    Validates an advice request body and returns (payload, error_message).
    On success, payload has:
      - query (required string within length limit)
      - context (AdviceContext with optional weather, location, crop)
    """
    if not isinstance(data, dict):
        return {}, "Invalid request body"

    query = _soft_sanitize_question(data.get("query"))
    if not query:
        return {}, "Query is required."
    if len(query) > MAX_QUERY_LEN:
        return {}, f"Query must be at most {MAX_QUERY_LEN} characters."

    location, country = _location_name(data.get("location"))
    crop = _soft_sanitize(data.get("crop"), MAX_CROP_LEN)

    context = AdviceContext(
        weather=WeatherSnapshot.from_dict(data.get("weather")),
        location=location or None,
        crop=crop or None,
        country=country or None,
    )
    return {"query": query, "context": context}, None


def validate_location(raw: Any) -> str:
    return _soft_sanitize(raw, MAX_LOCATION_LEN)
