# tablegrid/__init__.py
"""
TableGrid Library

Grid model and conditional formatting for rich-text table widgets whose
cells can be merged, covered by merges, or split into nested sub-grids.

Package Structure:
- core: Grid processing core module
    - TableGrid: Facade for one table widget snapshot
    - processor: Grid helpers (covered cells, header depth, column catalog)
      and rule helpers (rule models, evaluator, conditional formatter)
    - functions: Table model, value parsing, configuration, utilities

Usage:
    from tablegrid import TableGrid

    grid = TableGrid(widget_props)
    depth = grid.header_row_count
    columns = grid.build_column_catalog()
    style = grid.get_conditional_cell_style(row_index, col_index)
"""

__version__ = "0.1.0"

# Expose core classes at top level
from tablegrid.core import TableGrid, create_table_grid
from tablegrid.core.functions import (
    TableGridConfig,
    TableGridConfigError,
    DEFAULT_GRID_CONFIG,
)

# Explicit subpackages
from tablegrid import core

__all__ = [
    "__version__",
    # Core classes
    "TableGrid",
    "create_table_grid",
    # Configuration
    "TableGridConfig",
    "TableGridConfigError",
    "DEFAULT_GRID_CONFIG",
    # Subpackages
    "core",
]
