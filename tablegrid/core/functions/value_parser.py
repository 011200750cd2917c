# tablegrid/core/functions/value_parser.py
"""
Value Parser - Cell Markup to Comparable Values

Turns the rich-text markup stored in a cell into the values the rule engine
compares against.

================================================================================
PROCESSING FLOW
================================================================================

comparable_value(cell)
│
├─ to_text(cell.content)       - markup → collapsed plain text (memoized)
├─ text.lower()                - case-insensitive comparisons
├─ parse_number(text)          - currency/percent/thousands stripped
└─ parse_date(text)            - locale-independent, epoch milliseconds

================================================================================
CACHE
================================================================================

to_text() memoizes by the exact markup string. The cache belongs to one
ValueParser instance (one table widget), has no size or time eviction, and
is emptied by clear_cache() when the owning widget is torn down.
================================================================================
"""
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from bs4 import BeautifulSoup

from tablegrid.core.functions.table_model import Cell
from tablegrid.core.functions.utils import collapse_whitespace

logger = logging.getLogger("table-grid")

_NUMBER_NOISE_RE = re.compile(r"[$€£¥₹,%\s]")
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_BARE_NUMBER_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?$")

# Tried in order after ISO 8601; none of them depends on the process locale
# (month names are matched against the fixed English abbreviations below).
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y.%m.%d",
)

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_DAY_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]{3,9})\.?,?\s+(\d{4})$")
_MONTH_DAY_YEAR_RE = re.compile(r"^([A-Za-z]{3,9})\.?\s+(\d{1,2}),?\s+(\d{4})$")


@dataclass(frozen=True)
class ComparableValue:
    """Parsed form of a cell's content used by the rule engine.

    Attributes:
        text: Plain text of the cell
        text_lower: Lowercased text
        num: Parsed number, or None
        date_ms: Parsed date as epoch milliseconds, or None
    """
    text: str
    text_lower: str
    num: Optional[float]
    date_ms: Optional[float]


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Parse a numeric cell value.

    Currency symbols ($€£¥₹), percent signs, thousands separators and
    whitespace are ignored: "$1,250.50" -> 1250.5, "15 %" -> 15.0.

    Returns:
        The number, or None when nothing numeric is left or it is not finite
    """
    t = (text or "").strip()
    if not t:
        return None
    normalized = _NUMBER_NOISE_RE.sub("", t)
    if not normalized or not _DECIMAL_RE.match(normalized):
        return None
    number = float(normalized)
    return number if math.isfinite(number) else None


def _month_number(name: str) -> Optional[int]:
    return _MONTHS.get(name[:3].lower())


def _to_epoch_ms(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000.0


def parse_date(text: Optional[str]) -> Optional[float]:
    """
    Parse a date cell value into epoch milliseconds.

    Accepts ISO 8601 ("2024-03-01", "2024-03-01T10:00:00Z"), "2024/03/01",
    "03/01/2024" (month first), "1 Mar 2024" and "Mar 1, 2024". Values
    without a timezone are read as UTC. Bare numbers are never dates.

    Returns:
        Epoch milliseconds, or None when the text is not a recognised date
    """
    t = collapse_whitespace(text)
    if not t or _BARE_NUMBER_RE.match(t):
        return None

    try:
        return _to_epoch_ms(datetime.fromisoformat(t.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return _to_epoch_ms(datetime.strptime(t, fmt))
        except ValueError:
            continue

    match = _DAY_MONTH_YEAR_RE.match(t)
    if match:
        day, month, year = match.group(1), _month_number(match.group(2)), match.group(3)
    else:
        match = _MONTH_DAY_YEAR_RE.match(t)
        if not match:
            return None
        month, day, year = _month_number(match.group(1)), match.group(2), match.group(3)
    if month is None:
        return None
    try:
        return _to_epoch_ms(datetime(int(year), month, int(day)))
    except ValueError:
        return None


class ValueParser:
    """
    Markup-to-value parser with a per-instance text cache.

    One instance is owned by one table widget (or one TableGrid); the host
    calls clear_cache() on teardown.
    """

    def __init__(self):
        self._text_cache: Dict[str, str] = {}
        self.logger = logging.getLogger("table-grid")

    def to_text(self, markup: Optional[str]) -> str:
        """
        Strip markup to collapsed, trimmed plain text.

        Args:
            markup: Cell rich-text markup (None is treated as "")

        Returns:
            Plain text, memoized by the exact markup string
        """
        key = markup or ""
        cached = self._text_cache.get(key)
        if cached is not None:
            return cached

        if "<" in key or "&" in key:
            soup = BeautifulSoup(key, "html.parser")
            text = collapse_whitespace(soup.get_text())
        else:
            text = collapse_whitespace(key)

        self._text_cache[key] = text
        return text

    def parse_number(self, text: Optional[str]) -> Optional[float]:
        return parse_number(text)

    def parse_date(self, text: Optional[str]) -> Optional[float]:
        return parse_date(text)

    def comparable_value(self, cell: Optional[Cell]) -> ComparableValue:
        """Build the comparable value of a cell from its own markup."""
        text = self.to_text(cell.content if cell is not None else "")
        return ComparableValue(
            text=text,
            text_lower=text.lower(),
            num=parse_number(text),
            date_ms=parse_date(text),
        )

    @property
    def cache_size(self) -> int:
        return len(self._text_cache)

    def clear_cache(self) -> None:
        """Drop every memoized markup string."""
        if self._text_cache:
            self.logger.debug(f"Clearing {len(self._text_cache)} cached markup entries")
        self._text_cache.clear()


def create_value_parser() -> ValueParser:
    """
    Factory function to create a ValueParser.

    Returns:
        A ValueParser with an empty cache
    """
    return ValueParser()
