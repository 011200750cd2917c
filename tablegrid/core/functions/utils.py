# tablegrid/core/functions/utils.py
"""
Common text helpers shared by header naming, header inference and rules.
"""
import re
from typing import List, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_NUMERIC_LIKE_RE = re.compile(r"^[0-9.\-+, ]+$")


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to one space and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_column_key(name: Optional[str]) -> str:
    """
    Normalize a column display name into a lookup key.

    "  Unit   Price " -> "unit price"
    """
    return collapse_whitespace(name).lower()


def is_numeric_like(text: Optional[str]) -> bool:
    """
    Check whether a label looks like a body value rather than a header.

    Plain numbers ("1,200", "-3.5") qualify, and so does a split label whose
    every "/"-separated part is a number ("10 / 20").
    """
    s = (text or "").strip()
    if not s:
        return False
    if _NUMERIC_LIKE_RE.match(s):
        return True
    if "/" in s:
        parts = [p.strip() for p in s.split("/") if p.strip()]
        return len(parts) > 0 and all(_NUMERIC_LIKE_RE.match(p) for p in parts)
    return False


def dedupe_consecutive(labels: List[str]) -> List[str]:
    """Drop empty labels and labels equal to the one right before them."""
    out: List[str] = []
    for label in labels:
        if not label:
            continue
        if out and out[-1] == label:
            continue
        out.append(label)
    return out


def dedupe_preserving_order(labels: List[str]) -> List[str]:
    seen = set()
    out = []
    for label in labels:
        if label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out
