# tablegrid/core/table_grid.py
"""
TableGrid - Table Widget Facade

One TableGrid per table widget. It owns the ValueParser whose markup cache
is shared by header inference, the column catalog and rule evaluation, and
exposes every grid operation against a single Table snapshot.

Usage Example:
    from tablegrid import create_table_grid

    grid = create_table_grid(widget_props)
    for entry in grid.build_column_catalog():
        print(entry.key, entry.name)

    style = grid.get_conditional_cell_style(4, 2, grid.resolve_cell(4, 2))
    grid.clear_cache()   # on widget teardown
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from tablegrid.core.functions.config import DEFAULT_GRID_CONFIG, TableGridConfig
from tablegrid.core.functions.table_model import Cell, Table
from tablegrid.core.functions.value_parser import ValueParser
from tablegrid.core.processor.grid_helper.column_catalog import ColumnCatalog, ColumnCatalogBuilder, ColumnEntry
from tablegrid.core.processor.grid_helper.covered_cell_resolver import CoveredCellResolver
from tablegrid.core.processor.grid_helper.header_depth import HeaderDepthInferer
from tablegrid.core.processor.rules_helper.conditional_formatter import TableConditionalFormatter
from tablegrid.core.processor.rules_helper.rule_models import ConditionThen

logger = logging.getLogger("table-grid")


class TableGrid:
    """
    Grid model and conditional formatting for one table snapshot.

    Args:
        table: Table model or persisted widget dict
        config: Grid configuration (DEFAULT_GRID_CONFIG if None)
        value_parser: Parser to share; a new one is owned otherwise
    """

    def __init__(
        self,
        table: Any,
        config: Optional[TableGridConfig] = None,
        value_parser: Optional[ValueParser] = None,
    ):
        self.table = Table.from_dict(table)
        self.config = config or DEFAULT_GRID_CONFIG
        self.value_parser = value_parser or ValueParser()
        self.resolver = CoveredCellResolver(self.config)
        self.header_inferer = HeaderDepthInferer(self.value_parser, self.config, self.resolver)
        self.catalog_builder = ColumnCatalogBuilder(self.value_parser, self.config, self.resolver)
        self.formatter = TableConditionalFormatter(self.value_parser, self.config)
        self._header_row_count: Optional[int] = None

    @property
    def rows(self):
        return self.table.rows

    @property
    def column_count(self) -> int:
        return self.table.column_count

    # ========================================================================
    # Grid structure
    # ========================================================================

    def infer_header_row_count(self) -> int:
        """Infer the header depth from the persisted hint and the grid itself."""
        return self.header_inferer.infer(
            self.table.rows,
            persisted=self.table.header_row_count,
            header_row=self.table.header_row,
            column_count=self.column_count,
        )

    @property
    def header_row_count(self) -> int:
        """Inferred header depth, computed once per instance."""
        if self._header_row_count is None:
            self._header_row_count = self.infer_header_row_count()
        return self._header_row_count

    def resolve_cell(self, row: int, col: int) -> Optional[Cell]:
        """Cell owning (row, col) after following coveredBy references."""
        return self.resolver.resolve_at(self.table.rows, row, col)

    def build_catalog(self, header_row_count: Optional[int] = None) -> ColumnCatalog:
        depth = self.header_row_count if header_row_count is None else header_row_count
        return self.catalog_builder.build(self.table.rows, depth, self.column_count)

    def build_column_catalog(self, header_row_count: Optional[int] = None) -> List[ColumnEntry]:
        """
        Column entries a rule set can target.

        Args:
            header_row_count: Header depth to name columns from (inferred if None)

        Returns:
            One top entry per column, each followed by its leaf entries
        """
        return self.build_catalog(header_row_count).entries

    # ========================================================================
    # Conditional formatting
    # ========================================================================

    def evaluate_rule_match(self, rule: Any, cell: Any) -> bool:
        return self.formatter.evaluate_rule_match(rule, cell)

    def get_conditional_then_for_cell(
        self,
        row_index: int,
        col_index: int,
        cell: Any = None,
        rule_sets: Optional[Sequence[Any]] = None,
        path: str = "",
        header_row_count: Optional[int] = None,
    ) -> Optional[ConditionThen]:
        """
        Merged rule effects for one rendered cell.

        Args:
            row_index: Top-level row
            col_index: Top-level column
            cell: Rendered cell; the resolved grid cell when None
            rule_sets: Rule sets; the table's persisted columnRules when None
            path: Rendered sub-cell path for split cells
            header_row_count: Header depth; inferred when None

        Returns:
            ConditionThen, or None when nothing applies
        """
        if cell is None:
            cell = self.resolve_cell(row_index, col_index)
        return self.formatter.get_conditional_then_for_cell(
            row_index,
            col_index,
            cell,
            self.table.column_rules if rule_sets is None else rule_sets,
            self.table.rows,
            self.header_row_count if header_row_count is None else header_row_count,
            path,
        )

    def get_conditional_cell_class(self, row_index: int, col_index: int, cell: Any = None, **kwargs) -> Optional[str]:
        then = self.get_conditional_then_for_cell(row_index, col_index, cell, **kwargs)
        return (then.cell_class or None) if then else None

    def get_conditional_cell_style(self, row_index: int, col_index: int, cell: Any = None, **kwargs) -> Dict[str, str]:
        then = self.get_conditional_then_for_cell(row_index, col_index, cell, **kwargs)
        return then.to_style() if then else {}

    def get_conditional_tooltip(self, row_index: int, col_index: int, cell: Any = None, **kwargs) -> Optional[str]:
        then = self.get_conditional_then_for_cell(row_index, col_index, cell, **kwargs)
        return (then.tooltip or None) if then else None

    def clear_cache(self) -> None:
        """Release the markup cache and the cached header depth."""
        self.value_parser.clear_cache()
        self._header_row_count = None


def create_table_grid(data: Any, config: Optional[TableGridConfig] = None) -> TableGrid:
    """
    Factory function to create a TableGrid.

    Args:
        data: Table model or persisted table widget dict
        config: Grid configuration (DEFAULT_GRID_CONFIG if None)

    Returns:
        TableGrid instance
    """
    return TableGrid(data, config=config)
