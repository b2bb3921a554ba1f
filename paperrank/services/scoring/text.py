"""Text normalization shared by the keyword and concept matchers."""

import re
from typing import Optional

_DASHES = re.compile(r"[-–—]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, turn hyphen/en-dash/em-dash into spaces, collapse whitespace.

    Idempotent: ``normalize_text(normalize_text(x)) == normalize_text(x)``.
    """
    if not text:
        return ""
    lowered = _DASHES.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()
