"""Free-text cleanup for GADM attribute values."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any, List

_SYNONYM_SPLIT = re.compile(r"\s*\|\s*")


def clean_text(value: Any) -> str:
    """Return ``value`` as trimmed, NFC-normalised text.

    Attribute tables occasionally surface raw bytes or NaN placeholders for
    empty cells; both are folded into plain strings here.
    """

    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, (bytes, bytearray)):
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            text = bytes(value).decode("latin-1")
    else:
        text = str(value)
    return unicodedata.normalize("NFC", text).strip()


def split_synonyms(value: Any) -> List[str]:
    text = clean_text(value)
    if not text:
        return []
    return [part for part in _SYNONYM_SPLIT.split(text) if part]


__all__ = ["clean_text", "split_synonyms"]
