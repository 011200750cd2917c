# tablegrid/core/processor/grid_helper/header_depth.py
"""
Header-Depth Inferer

Decides how many leading rows of a table are header rows. The persisted
headerRowCount can be stale (an import that grew the header) or absent, so
it is combined with what the grid itself shows.

================================================================================
PROCESSING FLOW
================================================================================

infer(rows, persisted)
│
├─ headerRow == False?  ──► 0
│
├─ base = clamp(persisted or 1, 1, max_header_rows)
│
├─ Stage 1: metadata_floor(rows)
│   ├─ scan rows top-down (cap max_header_rows)
│   ├─ row counts only with a merge anchor that is not itself covered
│   ├─ a grouping anchor (colSpan > 1) claims the row below its span
│   │   when every column outside the group is covered from above
│   └─ stop at the first row without an anchor
│
└─ Stage 2: clamp_by_body(rows, max(base, floor), base)
    ├─ row labels resolved through covered cells and split layers
    ├─ r >= base, non-empty >= 1, numeric ratio >= 0.9  ──► body at r
    └─ non-empty >= 2, numeric ratio >= 0.7            ──► body at r

================================================================================
Body rows may hold split sub-grids ("10 / 20") or merges of their own; the
body clamp keeps those from being promoted into the header no matter what
merge metadata sits elsewhere in the row.
"""
import logging
from typing import List, Optional

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Row, grid_column_count
from tablegrid.core.functions.utils import is_numeric_like
from tablegrid.core.functions.value_parser import ValueParser
from tablegrid.core.processor.grid_helper.covered_cell_resolver import CoveredCellResolver
from tablegrid.core.processor.grid_helper.header_layers import HeaderLayerBuilder

logger = logging.getLogger("table-grid")


class HeaderDepthInferer:
    """Two-stage header depth inference (metadata floor, then body clamp)."""

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

    def infer(
        self,
        rows: List[Row],
        persisted: Optional[int] = None,
        header_row: Optional[bool] = None,
        column_count: Optional[int] = None,
    ) -> int:
        """
        Infer the header row count of a grid.

        Args:
            rows: Grid rows
            persisted: Persisted headerRowCount hint (None when absent)
            header_row: Persisted headerRow flag; False disables headers
            column_count: Top-level column count (derived from rows if None)

        Returns:
            Number of leading header rows, 0..max_header_rows
        """
        if header_row is False or not rows:
            return 0

        cap = self.config.max_header_rows
        col_count = column_count or grid_column_count(rows)

        base = max(1, min(cap, persisted or 1))
        floor = self.metadata_floor(rows)
        start = min(cap, len(rows), max(base, floor))

        depth = self.clamp_by_body(rows, start, base, col_count)
        logger.debug(f"Header depth: persisted={persisted}, floor={floor}, inferred={depth}")
        return depth

    def metadata_floor(self, rows: List[Row]) -> int:
        """
        Stage 1: header depth evidenced by merge anchors in the top rows.

        A grouping anchor (colSpan > 1) also claims the row right below its
        span, but only when every column outside the group is covered in that
        row by a taller anchor from above. Nested headers such as
        address > geo > lat/lng satisfy this; a body row under a one-row
        header never does.
        """
        cap = min(self.config.max_header_rows, len(rows))
        depth = 0
        for r in range(cap):
            anchors = [
                (c, cell) for c, cell in enumerate(rows[r].cells)
                if cell.merge is not None and cell.covered_by is None
            ]
            if not anchors:
                break
            depth = max(depth, r + 1)
            for c, anchor in anchors:
                if anchor.merge.col_span < 2:
                    continue
                below = r + anchor.merge.row_span
                if self.is_sub_header_row(rows, below, c, c + anchor.merge.col_span):
                    depth = max(depth, below + 1)
        return min(depth, cap)

    def is_sub_header_row(self, rows: List[Row], row_index: int, group_start: int, group_end: int) -> bool:
        """True when every cell outside [group_start, group_end) is covered from a row above."""
        if row_index >= len(rows):
            return False
        outside = [cell for c, cell in enumerate(rows[row_index].cells) if not group_start <= c < group_end]
        if not outside:
            return False
        return all(cell.covered_by is not None and cell.covered_by.row < row_index for cell in outside)

    def clamp_by_body(self, rows: List[Row], requested: int, base: int, column_count: int) -> int:
        """Stage 2: stop the header at the first row that reads like body data."""
        upper = max(0, min(self.config.max_header_rows, len(rows), requested))
        if upper <= 1:
            return upper
        base = max(0, min(upper, base))

        for r in range(1, upper):
            labels = [label for label in self.row_labels(rows, r, column_count) if label]
            non_empty = len(labels)
            numeric = sum(1 for label in labels if is_numeric_like(label))
            ratio = numeric / non_empty if non_empty > 0 else 0.0

            if r >= base and non_empty >= 1 and ratio >= self.config.numeric_ratio_strict:
                return r
            if non_empty >= 2 and ratio >= self.config.numeric_ratio_loose:
                return r

        return upper

    def row_labels(self, rows: List[Row], row_index: int, column_count: int) -> List[str]:
        """Label of every top-level column in a row, covered cells resolved."""
        labels = []
        for col in range(column_count):
            resolved = self.resolver.resolve_at(rows, row_index, col)
            labels.append(self.layers.cell_label(resolved) if resolved is not None else "")
        return labels


def infer_header_row_count(
    rows: List[Row],
    persisted: Optional[int] = None,
    header_row: Optional[bool] = None,
    column_count: Optional[int] = None,
    config: Optional[TableGridConfig] = None,
) -> int:
    """Functional shortcut for HeaderDepthInferer(config=config).infer(...)."""
    return HeaderDepthInferer(config=config).infer(rows, persisted, header_row, column_count)
