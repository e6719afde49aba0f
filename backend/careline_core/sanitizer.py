from __future__ import annotations

import re

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_text(value: str | None) -> str:
    """Replace control characters, collapse whitespace runs and trim."""
    if not value:
        return ""
    cleaned = _CONTROL_CHARS_RE.sub(" ", value)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()
