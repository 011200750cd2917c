# tablegrid/core/processor/grid_helper/column_catalog.py
"""
Column Catalog Builder - Stable Column Identity from Nested Headers

Builds the list of columns a user can target with conditional formatting:
one entry per top-level column and, where a header cell is split into
sub-columns, one entry per leaf sub-column.

================================================================================
NAMING
================================================================================

For top-level column c, header rows 0..h-1 are walked top-down:

    row 0   address (colSpan 5)          -> "address"
    row 1   geo (colSpan 2)              -> "geo"
    row 2   lat                          -> "lat"
                                            name  "address > geo > lat"
                                            key   "address > geo > lat"

- each header cell is first resolved through coveredBy
- a split header cell yields one layer per split row
- once a cell's own split yields more than one layer, later header rows are
  not consumed for that column (the split already encodes the hierarchy and
  the next row may well be body data)
- layers are joined with " > ", immediate duplicates skipped

Keys are the normalized names (trimmed, whitespace collapsed, lowercased).
The first column to claim a key keeps it; later collisions and empty names
use the positional key "col:{c}", which is also always registered for
lookup. Leaf entries use "leafcol:{c}:{path}" with the path joined by "-".

================================================================================
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Row, cell_at, grid_column_count
from tablegrid.core.functions.utils import dedupe_consecutive, normalize_column_key
from tablegrid.core.functions.value_parser import ValueParser
from tablegrid.core.processor.grid_helper.covered_cell_resolver import CoveredCellResolver
from tablegrid.core.processor.grid_helper.header_layers import HeaderLayerBuilder

logger = logging.getLogger("table-grid")

_COL_KEY_RE = re.compile(r"^(?:col|whole):(\d+)$", re.IGNORECASE)
_LEAF_KEY_RE = re.compile(r"^(?:leafcol|leaf):(\d+):(\d+(?:-\d+)*)$", re.IGNORECASE)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class ColumnTarget:
    """A resolved column identity: a top-level column, optionally a leaf in it."""
    top_col_index: int
    leaf_path: Optional[tuple] = None

    @property
    def kind(self) -> str:
        return "leaf" if self.leaf_path else "whole"

    @classmethod
    def from_dict(cls, data: Any) -> Optional['ColumnTarget']:
        """Read a persisted {kind, topColIndex, leafPath} target."""
        if not isinstance(data, dict):
            return None
        top = data.get("topColIndex")
        if isinstance(top, bool) or not isinstance(top, (int, float)) or top < 0:
            return None
        leaf_path = None
        if data.get("kind") == "leaf":
            leaf_path = parse_leaf_path(data.get("leafPath"))
        return cls(top_col_index=int(top), leaf_path=leaf_path)


@dataclass
class ColumnEntry:
    """One selectable column.

    Attributes:
        kind: "top" for a top-level column, "leaf" for a split sub-column
        top_col_index: Index of the top-level column
        name: Display name (" > "-joined header layers)
        key: Stable lookup key
        leaf_path: Leaf column path for leaf entries, None for top entries
    """
    kind: str
    top_col_index: int
    name: str
    key: str
    leaf_path: Optional[List[int]] = None

    @property
    def target(self) -> ColumnTarget:
        return ColumnTarget(self.top_col_index, tuple(self.leaf_path) if self.leaf_path else None)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "kind": self.kind,
            "topColIndex": self.top_col_index,
            "name": self.name,
            "key": self.key,
        }
        if self.leaf_path is not None:
            out["leafPath"] = list(self.leaf_path)
        return out


@dataclass
class ColumnCatalog:
    """Catalog entries plus the key → column lookup used to resolve rule sets."""
    entries: List[ColumnEntry] = field(default_factory=list)
    key_index: Dict[str, ColumnTarget] = field(default_factory=dict)

    def register(self, key: str, target: ColumnTarget) -> bool:
        """Register a lookup key; the first registration of a key wins."""
        if not key or key in self.key_index:
            return False
        self.key_index[key] = target
        return True

    def lookup(self, key: Optional[str]) -> Optional[ColumnTarget]:
        """Find a column by exact key, structured key or normalized name."""
        if not key:
            return None
        if key in self.key_index:
            return self.key_index[key]
        parsed = parse_column_key(key)
        if parsed is not None:
            return parsed
        return self.key_index.get(normalize_column_key(key))

    def leaf_entries(self, top_col_index: int) -> List[ColumnEntry]:
        return [e for e in self.entries if e.kind == "leaf" and e.top_col_index == top_col_index]

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]


# ============================================================================
# Key helpers
# ============================================================================

def parse_leaf_path(value: Any) -> Optional[tuple]:
    """Read a leaf path from a list or a "0-1" string; None when empty or invalid."""
    if isinstance(value, str):
        parts = [p for p in value.strip().split("-") if p != ""]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        return None
    out = []
    for part in parts:
        try:
            index = int(part)
        except (TypeError, ValueError):
            return None
        if index < 0:
            return None
        out.append(index)
    return tuple(out) if out else None


def parse_column_key(key: Optional[str]) -> Optional[ColumnTarget]:
    """
    Parse a positional column key.

    "col:3" / "whole:3" -> column 3
    "leafcol:2:0-1" / "leaf:2:0-1" -> leaf (0, 1) of column 2
    Name keys ("unit price") return None.
    """
    k = (key or "").strip()
    m = _COL_KEY_RE.match(k)
    if m:
        return ColumnTarget(int(m.group(1)))
    m = _LEAF_KEY_RE.match(k)
    if m:
        return ColumnTarget(int(m.group(1)), parse_leaf_path(m.group(2)))
    return None


def leaf_column_key(top_col_index: int, leaf_path: Sequence[int]) -> str:
    return f"leafcol:{top_col_index}:{'-'.join(str(i) for i in leaf_path)}"


def leaf_col_path_for_rendered_cell(
    rows: List[Row],
    row_index: int,
    top_col_index: int,
    path: Optional[str],
) -> Optional[List[int]]:
    """
    Convert a rendered sub-cell path into a leaf column path.

    The rendered path lists row-major indices into each nested split grid
    ("1-0" = sub-cell 1 of the top split, then sub-cell 0 of that one). Only
    splits with cols > 1 contribute their column (index % cols).

    Returns:
        The leaf column path, or None for an unsplit cell or an empty path
    """
    indices = parse_leaf_path(path)
    if not indices:
        return None
    current = cell_at(rows, row_index, top_col_index)
    if current is None:
        return None

    out: List[int] = []
    for index in indices:
        split = current.split if current is not None else None
        if split is None:
            break
        if split.cols > 1:
            out.append(index % split.cols)
        if index >= len(split.cells):
            break
        current = split.cells[index]

    return out or None


# ============================================================================
# Builder
# ============================================================================

class ColumnCatalogBuilder:
    """Build a ColumnCatalog from the header rows of a grid."""

    def __init__(
        self,
        value_parser: Optional[ValueParser] = None,
        config: Optional[TableGridConfig] = None,
        resolver: Optional[CoveredCellResolver] = None,
    ):
        self.config = config or DEFAULT_GRID_CONFIG
        self.value_parser = value_parser or ValueParser()
        self.resolver = resolver or CoveredCellResolver(self.config)
        self.layers = HeaderLayerBuilder(self.value_parser, self.config)

    def build(
        self,
        rows: List[Row],
        header_row_count: int,
        column_count: Optional[int] = None,
    ) -> ColumnCatalog:
        """
        Build the catalog.

        Args:
            rows: Grid rows, header rows first
            header_row_count: Number of header rows to name columns from
            column_count: Top-level column count (derived from rows if None)

        Returns:
            ColumnCatalog with one top entry per column followed by its leaves
        """
        catalog = ColumnCatalog()
        if not rows:
            return catalog

        col_count = column_count or grid_column_count(rows)
        header_rows = max(0, min(len(rows), int(header_row_count or 0)))

        for c in range(col_count):
            consumed, parts = self._column_layers(rows, header_rows, c)
            name = self.config.layer_separator.join(parts)
            fallback_key = f"col:{c}"

            base_key = normalize_column_key(name)
            key = base_key if base_key and catalog.register(base_key, ColumnTarget(c)) else fallback_key
            catalog.register(fallback_key, ColumnTarget(c))
            catalog.entries.append(ColumnEntry(
                kind="top",
                top_col_index=c,
                name=name or f"Column {c + 1}",
                key=key,
            ))

            for leaf_path in self._leaf_paths(rows, consumed, c):
                leaf_name = self._leaf_name(rows, consumed, c, leaf_path) or f"Column {c + 1}"
                target = ColumnTarget(c, tuple(leaf_path))
                leaf_key = leaf_column_key(c, leaf_path)
                catalog.register(leaf_key, target)
                catalog.register(normalize_column_key(leaf_name), target)
                catalog.entries.append(ColumnEntry(
                    kind="leaf",
                    top_col_index=c,
                    name=leaf_name,
                    key=leaf_key,
                    leaf_path=list(leaf_path),
                ))

        logger.debug(f"Built column catalog: {len(catalog.entries)} entries from {header_rows} header rows")
        return catalog

    def _column_layers(self, rows: List[Row], header_rows: int, col: int):
        """Header rows consumed for a column and its " > " name parts."""
        consumed: List[int] = []
        parts: List[str] = []
        for r in range(header_rows):
            consumed.append(r)
            resolved = self.resolver.resolve_at(rows, r, col)
            if resolved is None:
                continue
            layers = self.layers.whole_layers(resolved)
            parts.extend(layers)
            if len(layers) > 1:
                break
        return consumed, dedupe_consecutive(parts)

    def _leaf_paths(self, rows: List[Row], consumed: List[int], col: int) -> List[List[int]]:
        # The first header row that defines split leaf columns owns the leaf
        # structure; unioning rows with different split shapes adds noise.
        for r in consumed:
            resolved = self.resolver.resolve_at(rows, r, col)
            paths = [p for p in self.layers.leaf_col_paths(resolved) if p]
            if paths:
                unique = {tuple(p) for p in paths}
                return [list(p) for p in sorted(unique)]
        return []

    def _leaf_name(self, rows: List[Row], consumed: List[int], col: int, leaf_path: List[int]) -> str:
        parts: List[str] = []
        for r in consumed:
            resolved = self.resolver.resolve_at(rows, r, col)
            if resolved is None:
                continue
            parts.extend(self.layers.leaf_layers(resolved, leaf_path))
        return self.config.layer_separator.join(dedupe_consecutive(parts))


def build_column_catalog(
    rows: List[Row],
    header_row_count: int,
    column_count: Optional[int] = None,
    config: Optional[TableGridConfig] = None,
) -> List[ColumnEntry]:
    """Functional shortcut returning only the catalog entries."""
    return ColumnCatalogBuilder(config=config).build(rows, header_row_count, column_count).entries
