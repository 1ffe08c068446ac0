"""Pull the JSON classification object out of free-form model text."""

from __future__ import annotations

import json
import re
from typing import Any

from loguru import logger

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_BRACES_RE = re.compile(r"\{[\s\S]*\}")


def _candidate(text: str) -> str | None:
    fenced = _FENCED_RE.search(text)
    if fenced:
        return fenced.group(1)
    braces = _BRACES_RE.search(text)
    if braces:
        return braces.group(0)
    return None


def extract_json(text: str) -> dict[str, Any] | None:
    """Return the classification object embedded in *text*, or None.

    A fenced code block wins over a bare ``{...}`` span.  The parsed value
    must be an object with a truthy ``intent``, a non-null ``entities`` and
    a ``targetCollection`` key (null allowed).  Nothing is repaired.
    """
    raw = _candidate(text)
    if raw is None:
        logger.error("Could not find a JSON block in model response")
        return None

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON from model response: {e}")
        return None

    if (
        isinstance(parsed, dict)
        and parsed.get("intent")
        and parsed.get("entities") is not None
        and "targetCollection" in parsed
    ):
        return parsed

    logger.error("Model JSON is missing intent, entities or targetCollection")
    return None
