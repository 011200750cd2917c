# tablegrid/core/functions/table_model.py
"""
Table Model - Cell, Row and Table Data Structures

Data classes for the table widget grid as it is persisted in a document.
A table is a list of rows, each a list of cells. A cell is one of:

- a plain cell holding rich-text markup (``contentHtml``)
- a merge anchor (``merge``) owning a rowSpan x colSpan region
- a covered cell (``coveredBy``) owned by an anchor elsewhere in the grid
- a split cell (``split``) replaced by an independent rows x cols sub-grid

Module Components:
- CellMerge: rowSpan/colSpan of an anchor cell
- CoveredBy: (row, col) reference to the owning anchor
- CellSplit: flattened (row-major) sub-grid of a split cell
- Cell: a single grid cell
- Row: an ordered list of cells
- Table: the full grid snapshot with its persisted hints

Persisted documents may come from older or buggy editor versions, so every
``from_dict`` accepts malformed input and drops what it cannot read instead
of raising.

Usage Example:
    from tablegrid.core.functions.table_model import Table

    table = Table.from_dict(widget_props)
    cell = table.cell_at(0, 2)
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger("table-grid")


def coerce_int(value: Any) -> Optional[int]:
    """Read a persisted integer; None for missing, boolean or non-finite values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


def coerce_fractions(value: Any) -> List[float]:
    if not isinstance(value, list):
        return []
    out = []
    for item in value:
        if isinstance(item, (int, float)) and not isinstance(item, bool):
            out.append(float(item))
    return out


@dataclass
class CellMerge:
    """Span of a merge anchor cell."""
    row_span: int = 1
    col_span: int = 1

    @classmethod
    def from_dict(cls, data: Any) -> Optional['CellMerge']:
        if not isinstance(data, dict):
            return None
        row_span = coerce_int(data.get("rowSpan"))
        col_span = coerce_int(data.get("colSpan"))
        return cls(
            row_span=max(1, row_span if row_span is not None else 1),
            col_span=max(1, col_span if col_span is not None else 1),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"rowSpan": self.row_span, "colSpan": self.col_span}


@dataclass
class CoveredBy:
    """Coordinates of the cell owning a covered cell."""
    row: int
    col: int

    @classmethod
    def from_dict(cls, data: Any) -> Optional['CoveredBy']:
        if not isinstance(data, dict):
            return None
        row = coerce_int(data.get("row"))
        col = coerce_int(data.get("col"))
        if row is None or col is None:
            logger.debug(f"Dropping unreadable coveredBy reference: {data!r}")
            return None
        return cls(row=row, col=col)

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "col": self.col}


@dataclass
class CellSplit:
    """Sub-grid replacing the content of a split cell.

    Attributes:
        rows: Number of sub-grid rows (at least 1)
        cols: Number of sub-grid columns (at least 1)
        cells: Flattened row-major list, ideally rows * cols long
        column_fractions: Layout weights of the sub-columns
        row_fractions: Layout weights of the sub-rows
    """
    rows: int = 1
    cols: int = 1
    cells: List['Cell'] = field(default_factory=list)
    column_fractions: List[float] = field(default_factory=list)
    row_fractions: List[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional['CellSplit']:
        if not isinstance(data, dict) or not isinstance(data.get("cells"), list):
            return None
        rows = coerce_int(data.get("rows"))
        cols = coerce_int(data.get("cols"))
        return cls(
            rows=max(1, rows if rows is not None else 1),
            cols=max(1, cols if cols is not None else 1),
            cells=[Cell.from_dict(item) for item in data["cells"]],
            column_fractions=coerce_fractions(data.get("columnFractions")),
            row_fractions=coerce_fractions(data.get("rowFractions")),
        )

    def cell_at(self, row: int, col: int) -> Optional['Cell']:
        """Return the sub-cell at (row, col), or None when out of range."""
        if row < 0 or col < 0 or col >= self.cols:
            return None
        index = row * self.cols + col
        if index >= len(self.cells):
            return None
        return self.cells[index]


@dataclass
class Cell:
    """A single table cell.

    Attributes:
        id: Cell identifier (opaque)
        content: Rich-text markup of the cell
        style: Persisted cell style, passed through untouched
        merge: Span when this cell anchors a merged region
        covered_by: Owning anchor when this cell is covered by a merge
        split: Sub-grid when this cell is split
    """
    id: str = ""
    content: str = ""
    style: Dict[str, Any] = field(default_factory=dict)
    merge: Optional[CellMerge] = None
    covered_by: Optional[CoveredBy] = None
    split: Optional[CellSplit] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'Cell':
        if isinstance(data, Cell):
            return data
        if not isinstance(data, dict):
            return cls()
        content = data.get("contentHtml", data.get("content", ""))
        style = data.get("style")
        return cls(
            id=str(data.get("id") or ""),
            content=content if isinstance(content, str) else "",
            style=dict(style) if isinstance(style, dict) else {},
            merge=CellMerge.from_dict(data.get("merge")),
            covered_by=CoveredBy.from_dict(data.get("coveredBy")),
            split=CellSplit.from_dict(data.get("split")),
        )

    @property
    def is_anchor(self) -> bool:
        return self.merge is not None and self.covered_by is None

    @property
    def is_covered(self) -> bool:
        return self.covered_by is not None

    @property
    def has_split(self) -> bool:
        return self.split is not None


@dataclass
class Row:
    """An ordered sequence of cells."""
    id: str = ""
    cells: List[Cell] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'Row':
        if isinstance(data, Row):
            return data
        if not isinstance(data, dict):
            return cls()
        cells = data.get("cells")
        return cls(
            id=str(data.get("id") or ""),
            cells=[Cell.from_dict(item) for item in cells] if isinstance(cells, list) else [],
        )


@dataclass
class Table:
    """A table widget snapshot.

    Attributes:
        rows: Grid rows, header rows first
        column_fractions: Column layout weights (not interpreted here)
        row_fractions: Row layout weights (not interpreted here)
        header_row_count: Persisted header depth hint, may be stale or absent
        header_row: Persisted header flag; False means no header rows at all
        show_borders: Persisted border flag (not interpreted here)
        column_rules: Persisted rule sets as raw dictionaries
    """
    rows: List[Row] = field(default_factory=list)
    column_fractions: List[float] = field(default_factory=list)
    row_fractions: List[float] = field(default_factory=list)
    header_row_count: Optional[int] = None
    header_row: Optional[bool] = None
    show_borders: bool = True
    column_rules: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'Table':
        if isinstance(data, Table):
            return data
        if not isinstance(data, dict):
            logger.warning(f"Table snapshot is not a mapping ({type(data).__name__}); using an empty table")
            return cls()
        rows = data.get("rows")
        header_row = data.get("headerRow")
        column_rules = data.get("columnRules")
        return cls(
            rows=[Row.from_dict(item) for item in rows] if isinstance(rows, list) else [],
            column_fractions=coerce_fractions(data.get("columnFractions")),
            row_fractions=coerce_fractions(data.get("rowFractions")),
            header_row_count=coerce_int(data.get("headerRowCount")),
            header_row=header_row if isinstance(header_row, bool) else None,
            show_borders=data.get("showBorders") is not False,
            column_rules=[rs for rs in column_rules if isinstance(rs, dict)] if isinstance(column_rules, list) else [],
        )

    @property
    def column_count(self) -> int:
        """Top-level column count: the longest row or the fraction count, at least 1."""
        return grid_column_count(self.rows, self.column_fractions)

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        return cell_at(self.rows, row, col)


def as_rows(rows: Any) -> List[Row]:
    """Accept rows as models or raw dictionaries."""
    if not isinstance(rows, list):
        return []
    return [Row.from_dict(item) for item in rows]


def cell_at(rows: List[Row], row: int, col: int) -> Optional[Cell]:
    """Indexed lookup into the row array; None when out of range."""
    if row < 0 or col < 0 or row >= len(rows):
        return None
    cells = rows[row].cells
    if col >= len(cells):
        return None
    return cells[col]


def grid_column_count(rows: List[Row], column_fractions: Optional[List[float]] = None) -> int:
    from_rows = max((len(row.cells) for row in rows), default=0)
    from_fractions = len(column_fractions) if column_fractions else 0
    return max(1, from_rows, from_fractions)
