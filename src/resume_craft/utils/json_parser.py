"""Utility to extract the JSON object embedded in a model reply."""

from __future__ import annotations

import json
import logging
import re

from resume_craft.errors import ErrorCode, ExtractionError

logger = logging.getLogger(__name__)

_FENCE_MARKERS = re.compile(r"```json|```")
# Greedy: first "{" through the last "}".
_OUTER_BRACES = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(text: str) -> dict:
    """Extract a JSON object from an LLM reply, handling ```json fences and prose.

    Braces inside string values, or more than one object in the reply, can
    defeat the brace-to-brace match. That limitation is kept as is.
    """
    cleaned = _strip_code_fences(text)

    candidate = _extract_braces(cleaned)
    if candidate is None:
        logger.error("Model output missing JSON: %s", cleaned[:200])
        raise ExtractionError(
            "Generation service returned no JSON object.",
            code=ErrorCode.NO_JSON_FOUND,
            raw_text=cleaned,
        )

    try:
        data = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.error("JSON parse error: %s\nRaw output: %s", exc, cleaned)
        raise ExtractionError(
            f"Failed to parse generated resume JSON: {exc}",
            code=ErrorCode.MALFORMED_JSON,
            raw_text=cleaned,
        ) from exc

    if not isinstance(data, dict):
        raise ExtractionError(
            f"Expected a JSON object, got {type(data).__name__}",
            code=ErrorCode.MALFORMED_JSON,
            raw_text=cleaned,
        )
    return data


def _strip_code_fences(text: str) -> str:
    """Remove every markdown code fence marker from text."""
    return _FENCE_MARKERS.sub("", text).strip()


def _extract_braces(text: str) -> str | None:
    """Return the substring from the first '{' to the last '}', if any."""
    match = _OUTER_BRACES.search(text)
    return match.group(0) if match else None


def _reject_constant(name: str) -> float:
    """NaN, Infinity and -Infinity are not valid JSON."""
    raise ValueError(f"Invalid JSON constant {name!r}")
