"""Helpers for pulling JSON objects (and salvageable text) out of model replies."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_ADVICE_FIELD = re.compile(r'advice["\s]*:["\s]*"([^"]+)"', re.IGNORECASE)
_ADVICE_SENTENCE = re.compile(r"(?:advice|guidance|recommendation).*?([A-Z][^.!?]*[.!?])", re.IGNORECASE | re.DOTALL)


class ModelReplyParseError(ValueError):
    """Raised when a model reply does not contain a JSON object."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite JSON constant: {name}")


def clean_json_text(raw: str) -> str:
    """
    Strip markdown code fences and surrounding prose.

    '```json\\n{"a": 1}\\n```' -> '{"a": 1}'
    """
    text = raw.strip()
    if text.startswith("```"):
        text = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text))

    match = _JSON_OBJECT.search(text)
    if match:
        text = match.group(0)
    return text


def parse_json_object(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(clean_json_text(raw), parse_constant=_reject_constant)
    except ValueError as exc:
        raise ModelReplyParseError("Model reply is not valid JSON") from exc

    if not isinstance(parsed, dict):
        raise ModelReplyParseError("Model reply is not a JSON object")
    return parsed


def salvage_advice(raw: str) -> str | None:
    """Best-effort advice text from a reply that failed to parse."""
    match = _ADVICE_FIELD.search(raw)
    if match:
        return match.group(1)

    match = _ADVICE_SENTENCE.search(raw)
    if match:
        return match.group(1)
    return None
