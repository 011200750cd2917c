# tablegrid/core/processor/grid_helper/covered_cell_resolver.py
"""
Covered-Cell Resolver

Follows coveredBy references from a covered cell to the anchor that owns it.

    rows[2][4] --coveredBy--> rows[1][4] --coveredBy--> rows[0][4] (anchor)

Chains are walked with an explicit hop counter over indexed row lookups, so
cyclic or dangling references in a persisted document end the walk instead
of looping or raising.
"""
import logging
from typing import List, Optional

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Cell, Row, cell_at

logger = logging.getLogger("table-grid")


class CoveredCellResolver:
    """Resolve covered cells to their owning anchor cells."""

    def __init__(self, config: Optional[TableGridConfig] = None):
        self.config = config or DEFAULT_GRID_CONFIG

    def resolve(self, rows: List[Row], cell: Optional[Cell]) -> Optional[Cell]:
        """
        Resolve a cell to the cell that owns it.

        Args:
            rows: Grid rows used for (row, col) lookups
            cell: Starting cell (None resolves to None)

        Returns:
            The first cell without a coveredBy reference, None when a
            reference points outside the grid, or the last cell reached when
            the hop guard trips or a cell references itself
        """
        current = cell
        hops = 0
        while current is not None and current.covered_by is not None:
            if hops >= self.config.max_cover_hops:
                logger.debug(f"coveredBy chain exceeded {self.config.max_cover_hops} hops; stopping")
                break
            ref = current.covered_by
            nxt = cell_at(rows, ref.row, ref.col)
            if nxt is None:
                logger.debug(f"coveredBy reference ({ref.row}, {ref.col}) is out of range")
                return None
            if nxt is current:
                break
            current = nxt
            hops += 1
        return current

    def resolve_at(self, rows: List[Row], row: int, col: int) -> Optional[Cell]:
        """Resolve the cell at (row, col); None when the coordinate is empty."""
        return self.resolve(rows, cell_at(rows, row, col))


def resolve_covered_cell(
    rows: List[Row],
    cell: Optional[Cell],
    config: Optional[TableGridConfig] = None,
) -> Optional[Cell]:
    """Functional shortcut for CoveredCellResolver(config).resolve(rows, cell)."""
    return CoveredCellResolver(config).resolve(rows, cell)
