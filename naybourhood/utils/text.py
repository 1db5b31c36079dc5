"""Sanitizers for free text passed to and returned from the LLM."""

from __future__ import annotations

import re

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Strip NUL bytes and surrounding whitespace, then truncate."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def extract_json_object(value: str) -> str | None:
    """Return the outermost ``{...}`` span of a model reply, ignoring any prose around it."""
    match = _JSON_OBJECT_RE.search(value or "")
    return match.group(0) if match else None
